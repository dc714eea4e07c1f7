"""Candidate (incoming player) domain models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .expected_points import XPBreakdown
from .player import PlayerDomain, Position


class CandidatePlayer(BaseModel):
    """A non-owned player that survived pool filtering, with its projection."""

    model_config = ConfigDict(frozen=True)

    player: PlayerDomain
    xp: XPBreakdown
    pre_rank_score: float = Field(0.0, description="Cheap composite used for shortlisting")

    @property
    def player_id(self) -> int:
        return self.player.player_id

    @property
    def position(self) -> Position:
        return self.player.position

    @property
    def team_id(self) -> int:
        return self.player.team_id

    @property
    def now_cost(self) -> int:
        return self.player.now_cost

    @property
    def xp_over_horizon(self) -> float:
        return self.xp.total

    @property
    def avg_xp_per_gw(self) -> float:
        return self.xp.average_per_gw


class ReplacementOption(BaseModel):
    """A legal incoming player for a specific outgoing player."""

    model_config = ConfigDict(frozen=True)

    candidate: CandidatePlayer
    xp_gain: float = Field(..., description="Incoming xP minus outgoing xP")
    remaining_bank: int = Field(..., ge=0, description="Bank after the move, tenths")
    why_best: str = Field(..., min_length=1)
    outgoing_player_id: Optional[int] = None
