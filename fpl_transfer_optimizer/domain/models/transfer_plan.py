"""Transfer plan domain models: single moves and per-run settings."""

from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .player import Position


class Transfer(BaseModel):
    """Single player transfer."""

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    player_out_id: int = Field(..., description="Player ID being transferred out")
    player_in_id: int = Field(..., description="Player ID being transferred in")
    player_out_name: str = Field(..., description="Name of player out")
    player_in_name: str = Field(..., description="Name of player in")
    position: Position = Field(..., description="Position (GKP/DEF/MID/FWD)")
    cost: int = Field(
        ..., description="Incoming price minus sale value, tenths (positive = dearer)"
    )
    out_xp: float = Field(..., description="Outgoing xP over the horizon")
    in_xp: float = Field(..., description="Incoming xP over the horizon")
    why_best: str = Field(default="Best available option by xP")
    out_reason: Optional[str] = Field(
        None, description="Primary expendability reason of the outgoing player"
    )

    @property
    def xp_gain(self) -> float:
        return self.in_xp - self.out_xp


class OptimizationSettings(BaseModel):
    """Caller-supplied settings for one optimisation run."""

    model_config = ConfigDict(frozen=True)

    horizon_gw_ids: Tuple[int, ...] = Field(..., description="Gameweeks to project")
    locked_player_ids: FrozenSet[int] = Field(default_factory=frozenset)
    excluded_team_ids: FrozenSet[int] = Field(default_factory=frozenset)
    excluded_player_ids: FrozenSet[int] = Field(default_factory=frozenset)
    hit_threshold: Optional[float] = Field(
        None,
        ge=0.0,
        description=(
            "Net gain each hit must clear beyond its fixed cost "
            "(defaults to optimization.hit_safety_margin)"
        ),
    )
    allow_hits: Optional[bool] = Field(
        None, description="Consider hits (defaults to optimization.allow_hits)"
    )

    @field_validator("horizon_gw_ids", mode="before")
    @classmethod
    def coerce_tuple(cls, v):
        return tuple(v)

    def cache_key(self) -> Tuple:
        return (
            self.horizon_gw_ids,
            tuple(sorted(self.locked_player_ids)),
            tuple(sorted(self.excluded_team_ids)),
            tuple(sorted(self.excluded_player_ids)),
            self.hit_threshold,
            self.allow_hits,
        )
