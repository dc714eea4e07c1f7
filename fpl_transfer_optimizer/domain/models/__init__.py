"""Domain models with strict data contracts for the transfer engine."""

from .candidate import CandidatePlayer, ReplacementOption
from .expected_points import (
    GameweekXP,
    MinutesBadge,
    TeamFixture,
    XPBreakdown,
    XPComponents,
)
from .expendability import (
    REASON_CATALOGUE,
    ExpendabilityReason,
    ExpendabilityResult,
    ReasonCode,
)
from .fixture import FixtureDomain
from .player import AvailabilityStatus, PlayerDomain, Position, RecentPerformance
from .squad import Horizon, SquadDomain, SquadPick
from .team import TeamDomain
from .transfer_plan import OptimizationSettings, Transfer
from .transfer_recommendation import (
    RecommendationOutcome,
    ScenarioType,
    TransferRecommendation,
    TransferScenario,
)

__all__ = [
    "AvailabilityStatus",
    "CandidatePlayer",
    "ExpendabilityReason",
    "ExpendabilityResult",
    "FixtureDomain",
    "GameweekXP",
    "Horizon",
    "MinutesBadge",
    "OptimizationSettings",
    "PlayerDomain",
    "Position",
    "REASON_CATALOGUE",
    "ReasonCode",
    "RecentPerformance",
    "RecommendationOutcome",
    "ReplacementOption",
    "ScenarioType",
    "SquadDomain",
    "SquadPick",
    "TeamDomain",
    "TeamFixture",
    "Transfer",
    "TransferRecommendation",
    "TransferScenario",
    "XPBreakdown",
    "XPComponents",
]
