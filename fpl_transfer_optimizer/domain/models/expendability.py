"""Expendability (weakest link) domain models."""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .player import PlayerDomain
from .squad import SquadPick


class ReasonCode(str, Enum):
    """Why a squad player is a transfer-out candidate."""

    LOCKED = "locked"
    INJURED = "injured"
    SUSPENDED = "suspended"
    DOUBTFUL = "doubtful"
    POOR_FIXTURES = "poor_fixtures"
    LOW_MINUTES = "low_minutes"
    DECLINING_FORM = "declining_form"
    LOW_XP = "low_xp"
    PRICE_DROP = "price_drop"
    ROTATION_RISK = "rotation_risk"
    BLANKS = "blanks"


# (priority, label) - lower priority sorts first in the reasons list
REASON_CATALOGUE: Dict[ReasonCode, Tuple[int, str]] = {
    ReasonCode.LOCKED: (0, "Locked"),
    ReasonCode.INJURED: (1, "Injured/Unavailable"),
    ReasonCode.DOUBTFUL: (1, "Fitness doubt"),
    ReasonCode.SUSPENDED: (2, "Suspended"),
    ReasonCode.POOR_FIXTURES: (3, "Poor upcoming fixtures"),
    ReasonCode.LOW_MINUTES: (4, "Low minutes reliability"),
    ReasonCode.DECLINING_FORM: (5, "Declining form"),
    ReasonCode.LOW_XP: (6, "Low expected returns"),
    ReasonCode.PRICE_DROP: (7, "Price drop risk"),
    ReasonCode.ROTATION_RISK: (9, "Rotation risk"),
    ReasonCode.BLANKS: (10, "Has blank gameweeks"),
}


class ExpendabilityReason(BaseModel):
    """A single triggered signal with its point impact."""

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    code: ReasonCode
    label: str
    priority: int
    detail: str = Field(..., description="Human-readable magnitude")
    impact: float = Field(..., ge=0.0, description="Points added to the score")
    is_primary: bool = False

    @classmethod
    def build(cls, code: ReasonCode, detail: str, impact: float) -> "ExpendabilityReason":
        priority, label = REASON_CATALOGUE[code]
        return cls(code=code, label=label, priority=priority, detail=detail, impact=impact)


class ExpendabilityResult(BaseModel):
    """Weakest-link assessment of one squad player over the horizon."""

    model_config = ConfigDict(frozen=True)

    pick: SquadPick
    score: float = Field(..., ge=0.0, le=100.0)
    reasons: List[ExpendabilityReason] = Field(default_factory=list)
    xp_over_horizon: float
    avg_xp_per_gw: float
    x_mins: float
    average_difficulty: Optional[float] = None
    blank_gameweeks: List[int] = Field(default_factory=list)
    is_locked: bool = False
    rank: Optional[int] = Field(None, description="1 = most expendable; None when locked")
    is_expendable: bool = False

    @property
    def player(self) -> PlayerDomain:
        return self.pick.player

    @property
    def primary_reason(self) -> Optional[ExpendabilityReason]:
        return next((reason for reason in self.reasons if reason.is_primary), None)
