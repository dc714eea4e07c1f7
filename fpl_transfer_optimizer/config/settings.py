"""
Global Configuration System for the FPL Transfer Optimizer

Centralized configuration for every weight, threshold and multiplier used by
the projection model, the expendability scorer, the candidate pool and the
scenario evaluator. Provides type-safe configuration with validation and
environment variable support.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field, field_validator, model_validator

ENV_PREFIX = "FPLTO_"


class XPModelConfig(BaseModel):
    """Expected Points Model Configuration"""

    # Expected minutes
    status_minutes_multipliers: Dict[str, float] = Field(
        default_factory=lambda: {
            "a": 1.0,
            "d": 0.9,
            "i": 0.6,
            "u": 0.6,
            "n": 0.6,
            "s": 0.7,
        },
        description="Expected minutes multiplier keyed by availability status code",
    )
    unknown_status_multiplier: float = Field(
        default=1.0,
        description="Multiplier for unrecognised status codes (no penalty, flagged in logs)",
        ge=0.0,
        le=1.0,
    )
    default_average_minutes: float = Field(
        default=60.0,
        description="Average minutes assumed when a player has no recent history",
        ge=0.0,
        le=90.0,
    )
    max_minutes: float = Field(
        default=90.0, description="Cap on expected minutes", ge=1.0, le=120.0
    )

    # Appearance points (1 point under 60', 2 points from 60')
    appearance_threshold_minutes: float = Field(
        default=60.0, description="Minutes needed for the second appearance point"
    )
    full_match_minutes: float = Field(
        default=90.0, description="Minutes at which appearance points reach 2"
    )

    # Attacking returns
    attack_points_per_involvement: Dict[str, float] = Field(
        default_factory=lambda: {"GKP": 4.0, "DEF": 4.5, "MID": 5.0, "FWD": 5.0},
        description="Points per expected goal involvement by position",
    )
    fdr_attack_multipliers: Dict[int, float] = Field(
        default_factory=lambda: {1: 1.15, 2: 1.10, 3: 1.0, 4: 0.90, 5: 0.80},
        description="Attack multiplier by fixture difficulty (easy +15%, hard -20%)",
    )
    home_attack_multiplier: float = Field(
        default=1.05, description="Home fixture attack adjustment", ge=0.5, le=1.5
    )
    away_attack_multiplier: float = Field(
        default=0.95, description="Away fixture attack adjustment", ge=0.5, le=1.5
    )

    # Clean sheets
    clean_sheet_base_probability: Dict[int, float] = Field(
        default_factory=lambda: {1: 0.45, 2: 0.35, 3: 0.25, 4: 0.15, 5: 0.08},
        description="Clean sheet probability proxy by fixture difficulty",
    )
    clean_sheet_default_probability: float = Field(
        default=0.20, description="Probability for unrated fixtures", ge=0.0, le=1.0
    )
    clean_sheet_home_bonus: float = Field(
        default=0.02, description="Added at home, subtracted away", ge=0.0, le=0.2
    )
    clean_sheet_min_probability: float = Field(default=0.02, ge=0.0, le=1.0)
    clean_sheet_max_probability: float = Field(default=0.70, ge=0.0, le=1.0)
    clean_sheet_points: Dict[str, float] = Field(
        default_factory=lambda: {"GKP": 4.0, "DEF": 4.0, "MID": 1.0, "FWD": 0.0},
        description="Clean sheet points by position",
    )

    # Bonus
    bonus_cap: float = Field(
        default=0.6, description="Soft cap on bonus points per fixture", ge=0.0, le=3.0
    )
    bonus_bps_scale: float = Field(
        default=20.0,
        description="BPS per 90 at which bonus reaches ~63% of the cap",
        gt=0.0,
    )

    # Minutes badge thresholds (share of a full match)
    nailed_minutes_share: float = Field(default=0.9, ge=0.0, le=1.0)
    risk_minutes_share: float = Field(default=0.7, ge=0.0, le=1.0)

    @field_validator("clean_sheet_points", "attack_points_per_involvement")
    @classmethod
    def validate_positions(cls, v):
        missing = {"GKP", "DEF", "MID", "FWD"} - set(v)
        if missing:
            raise ValueError(f"Missing positions: {sorted(missing)}")
        return v

    @model_validator(mode="after")
    def validate_thresholds(self):
        if self.appearance_threshold_minutes >= self.full_match_minutes:
            raise ValueError(
                "appearance_threshold_minutes must be below full_match_minutes"
            )
        if self.clean_sheet_min_probability > self.clean_sheet_max_probability:
            raise ValueError("clean sheet probability bounds are inverted")
        return self


class ExpendabilityConfig(BaseModel):
    """Expendability (weakest link) Scoring Configuration"""

    injured_penalty: float = Field(default=50.0, ge=0.0, le=100.0)
    suspended_penalty: float = Field(default=40.0, ge=0.0, le=100.0)
    doubtful_penalty_factor: float = Field(
        default=0.3, description="Penalty per missing % chance of playing", ge=0.0
    )
    doubtful_default_chance: int = Field(
        default=50, description="Chance assumed when a doubt has no percentage", ge=0, le=100
    )

    low_minutes_threshold: float = Field(default=45.0, ge=0.0, le=90.0)
    low_minutes_penalty: float = Field(default=25.0, ge=0.0)
    rotation_minutes_threshold: float = Field(default=60.0, ge=0.0, le=90.0)
    rotation_penalty: float = Field(default=15.0, ge=0.0)

    low_xp_floor: float = Field(
        default=2.5, description="xP per gameweek below which a penalty applies", ge=0.0
    )
    low_xp_factor: float = Field(default=15.0, ge=0.0)

    poor_fixture_threshold: float = Field(
        default=3.5, description="Average FDR that triggers a fixture penalty", ge=1.0, le=5.0
    )
    poor_fixture_baseline: float = Field(default=3.0, ge=1.0, le=5.0)
    poor_fixture_factor: float = Field(default=10.0, ge=0.0)

    blank_gameweek_penalty: float = Field(default=8.0, ge=0.0)

    declining_form_ratio: float = Field(
        default=0.7, description="Form below this share of PPG is declining", ge=0.0, le=1.0
    )
    declining_form_factor: float = Field(default=15.0, ge=0.0)

    price_drop_net_transfers: int = Field(
        default=50_000, description="Net transfers out that signal a price drop", ge=0
    )
    price_drop_penalty: float = Field(default=10.0, ge=0.0)

    max_score: float = Field(default=100.0, gt=0.0, le=100.0)
    max_expendable: int = Field(
        default=5, description="Upper bound on players flagged expendable", ge=1, le=15
    )
    expendable_share: float = Field(
        default=0.3, description="Share of the squad flagged expendable", ge=0.0, le=1.0
    )

    @model_validator(mode="after")
    def validate_minutes_thresholds(self):
        if self.low_minutes_threshold > self.rotation_minutes_threshold:
            raise ValueError(
                "low_minutes_threshold must not exceed rotation_minutes_threshold"
            )
        return self


class CandidatePoolConfig(BaseModel):
    """Candidate Pool Builder Configuration"""

    per_position_limit: int = Field(
        default=50,
        description="Candidates kept per position before xP projection (accuracy/runtime trade-off)",
        ge=1,
        le=1000,
    )
    form_weight: float = Field(default=2.0, ge=0.0)
    threat_divisor: float = Field(default=100.0, gt=0.0)
    creativity_divisor: float = Field(default=100.0, gt=0.0)
    unusable_statuses: List[str] = Field(
        default_factory=lambda: ["u", "n"],
        description="Status codes that make a player definitionally unusable",
    )
    max_concurrent_projections: int = Field(
        default=15, description="Worker pool size for candidate xP projection", ge=1, le=64
    )


class OptimizationConfig(BaseModel):
    """Transfer Scenario Configuration"""

    transfer_cost: float = Field(
        default=4.0,
        description="Points penalty per transfer beyond free transfers",
        ge=0.0,
        le=10.0,
    )
    hit_safety_margin: float = Field(
        default=2.0,
        description="Extra gross gain required per hit on top of its cost (-4 needs > +6)",
        ge=0.0,
    )
    min_gain_threshold: float = Field(
        default=1.5,
        description="Minimum xP gain for a free transfer to be recommended",
        ge=0.0,
    )
    allow_hits: bool = Field(default=True, description="Consider point hits")
    max_players_per_club: int = Field(default=3, ge=1, le=15)
    max_transfers: int = Field(
        default=3, description="Largest transfer combination evaluated", ge=1, le=3
    )
    max_free_transfers: int = Field(
        default=5, description="Free transfers that can be banked", ge=1, le=15
    )

    single_out_candidates: int = Field(default=5, ge=1, le=15)
    replacements_per_out: int = Field(default=5, ge=1, le=50)
    multi_out_candidates: int = Field(default=3, ge=2, le=15)
    multi_first_leg_candidates: int = Field(default=3, ge=1, le=20)

    # Replacement explanations
    excellent_form: float = Field(default=6.0, ge=0.0)
    good_form: float = Field(default=4.0, ge=0.0)
    great_fixtures_fdr: float = Field(default=2.5, ge=1.0, le=5.0)
    good_fixtures_fdr: float = Field(default=3.0, ge=1.0, le=5.0)
    high_demand_net_transfers: int = Field(default=100_000, ge=0)
    excellent_value_ppm: float = Field(
        default=15.0, description="Total points per £1m that counts as excellent value"
    )
    max_why_best_reasons: int = Field(default=3, ge=1)

    single_display_limit: int = Field(default=5, ge=1)
    hit_display_limit: int = Field(default=3, ge=1)


class CacheConfig(BaseModel):
    """Memoization Configuration"""

    enabled: bool = Field(default=True)
    xp_ttl_seconds: float = Field(default=120.0, ge=0.0)
    recommendation_ttl_seconds: float = Field(default=120.0, ge=0.0)
    max_entries: int = Field(default=200, ge=1)


class EngineConfig(BaseModel):
    """Main Transfer Optimizer Configuration"""

    xp_model: XPModelConfig = Field(
        default_factory=XPModelConfig, description="Expected Points Model Configuration"
    )
    expendability: ExpendabilityConfig = Field(
        default_factory=ExpendabilityConfig,
        description="Expendability Scoring Configuration",
    )
    candidate_pool: CandidatePoolConfig = Field(
        default_factory=CandidatePoolConfig,
        description="Candidate Pool Configuration",
    )
    optimization: OptimizationConfig = Field(
        default_factory=OptimizationConfig, description="Optimization Configuration"
    )
    cache: CacheConfig = Field(
        default_factory=CacheConfig, description="Cache Configuration"
    )

    @model_validator(mode="after")
    def validate_config_consistency(self):
        """Validate cross-section consistency"""
        if self.optimization.multi_out_candidates < min(
            self.optimization.max_transfers, 2
        ):
            raise ValueError(
                "optimization.multi_out_candidates must cover a two-transfer combination"
            )
        return self


def _coerce_env_value(value: str) -> Any:
    """Best-effort conversion of an environment string to bool/int/float/JSON."""
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
        return int(value)
    try:
        return float(value)
    except ValueError:
        pass
    if value[:1] in ("{", "["):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass
    return value


def _collect_env_overrides(environ: Dict[str, str]) -> Dict[str, Dict[str, Any]]:
    """Parse FPLTO_<SECTION>__<FIELD> variables into nested overrides."""
    overrides: Dict[str, Dict[str, Any]] = {}
    for env_var, value in environ.items():
        if not env_var.startswith(ENV_PREFIX):
            continue
        section, sep, field = env_var[len(ENV_PREFIX) :].partition("__")
        if not sep or not section or not field:
            continue
        overrides.setdefault(section.lower(), {})[field.lower()] = _coerce_env_value(
            value
        )
    return overrides


def load_config(
    config_path: Optional[Path] = None,
    config_data: Optional[Dict] = None,
    environ: Optional[Dict[str, str]] = None,
) -> EngineConfig:
    """
    Load configuration with environment variable overrides and optional config file

    Args:
        config_path: Optional path to a JSON configuration file
        config_data: Optional dictionary of configuration data
        environ: Environment mapping (defaults to os.environ)

    Environment variables override any config value using the pattern:
    FPLTO_{SECTION}__{FIELD} = value

    Example: FPLTO_OPTIMIZATION__TRANSFER_COST=4
    """
    config_dict: Dict[str, Any] = {}

    if config_path and config_path.exists():
        try:
            with open(config_path, "r") as f:
                if config_path.suffix.lower() == ".json":
                    config_dict = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"⚠️ Failed to load config file {config_path}: {e}")

    if config_data:
        for section, fields in config_data.items():
            if isinstance(fields, dict):
                config_dict.setdefault(section, {}).update(fields)
            else:
                config_dict[section] = fields

    env_overrides = _collect_env_overrides(
        dict(os.environ) if environ is None else environ
    )
    for section, fields in env_overrides.items():
        config_dict.setdefault(section, {}).update(fields)

    try:
        return EngineConfig(**config_dict)
    except ValueError as e:
        logger.warning(f"⚠️ Configuration validation failed: {e}")
        logger.warning("Using default configuration...")
        return EngineConfig()


# Global configuration instance
config = load_config()
