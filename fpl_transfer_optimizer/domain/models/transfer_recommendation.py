"""Transfer scenario and recommendation domain models."""

from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .expendability import ExpendabilityResult
from .transfer_plan import Transfer


class ScenarioType(str, Enum):
    """Scenario evaluator states."""

    ROLL = "roll"
    SINGLE = "single"
    HIT = "hit"
    HOLD = "hold"


class RecommendationOutcome(str, Enum):
    """Why the recommendation ended where it did."""

    TRANSFER_RECOMMENDED = "transfer_recommended"
    NO_GAIN_ABOVE_THRESHOLD = "no_gain_above_threshold"
    NO_VALID_TRANSFER = "no_valid_transfer"


class TransferScenario(BaseModel):
    """One candidate action measured against the do-nothing baseline."""

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    scenario_type: ScenarioType
    transfers: List[Transfer] = Field(
        default_factory=list, description="Transfers for this scenario (empty = roll/hold)"
    )
    gross_gain: float = Field(0.0, description="Sum of per-transfer xP gains")
    num_hits: int = Field(0, ge=0, description="Transfers beyond the free allowance")
    hit_penalty: float = Field(0.0, ge=0.0, description="Points deducted for hits")
    net_gain: float = Field(0.0, description="Gross gain minus hit penalty")
    gain_bar: float = Field(
        0.0, description="Gross gain this scenario had to exceed to be surfaced"
    )
    clears_bar: bool = False
    remaining_budget: int = Field(..., ge=0, description="Bank after the moves, tenths")
    free_transfers_after: int = Field(0, ge=0)
    description: str = Field(..., min_length=1)
    reasoning: str = Field(..., min_length=1)

    @property
    def num_transfers(self) -> int:
        return len(self.transfers)

    @property
    def is_hold(self) -> bool:
        """Whether this scenario makes no transfers."""
        return len(self.transfers) == 0

    @property
    def remaining_budget_formatted(self) -> str:
        return f"£{self.remaining_budget / 10:.1f}m"


class TransferRecommendation(BaseModel):
    """Complete output of one optimisation run."""

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    action: ScenarioType
    outcome: RecommendationOutcome
    action_reason: str = Field(..., min_length=1)
    best: TransferScenario
    baseline: TransferScenario = Field(..., description="Roll or hold scenario")
    single_options: List[TransferScenario] = Field(default_factory=list)
    hit_options: List[TransferScenario] = Field(default_factory=list)
    do_nothing_xp: float = Field(..., description="Starting XI xP over the horizon")
    free_transfers: int = Field(..., ge=0)
    bank: int = Field(..., ge=0)
    horizon_gw_ids: Tuple[int, ...]
    weakest_links: List[ExpendabilityResult] = Field(default_factory=list)

    @property
    def total_scenarios(self) -> int:
        return len(self.single_options) + len(self.hit_options) + 1
