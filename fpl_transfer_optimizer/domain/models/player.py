"""Player domain model with strict FPL validation."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Position(str, Enum):
    """FPL player positions."""

    GKP = "GKP"
    DEF = "DEF"
    MID = "MID"
    FWD = "FWD"


class AvailabilityStatus(str, Enum):
    """Player availability status."""

    AVAILABLE = "a"
    DOUBTFUL = "d"
    INJURED = "i"
    SUSPENDED = "s"
    UNAVAILABLE = "u"
    NOT_IN_SQUAD = "n"


class RecentPerformance(BaseModel):
    """Aggregates over a player's most recent finished gameweeks."""

    model_config = ConfigDict(frozen=True)

    games: int = Field(0, ge=0, description="Gameweeks in the window")
    minutes: int = Field(0, ge=0, description="Minutes played in the window")
    expected_goal_involvements: float = Field(0.0, ge=0.0)
    bps: int = Field(0, description="Bonus points system score (can be negative)")
    points: int = Field(0, description="FPL points in the window")

    @property
    def has_history(self) -> bool:
        return self.games > 0

    @property
    def average_minutes(self) -> float:
        if self.games == 0:
            return 0.0
        return self.minutes / self.games

    @property
    def xgi_per_90(self) -> float:
        if self.minutes == 0:
            return 0.0
        return self.expected_goal_involvements / (self.minutes / 90)

    @property
    def bps_per_90(self) -> float:
        if self.minutes == 0:
            return 0.0
        return self.bps / (self.minutes / 90)


class PlayerDomain(BaseModel):
    """
    Domain model for FPL players.

    One canonical schema: the data-access layer normalises upstream payloads
    into this shape before the engine runs. Prices are integer tenths of a
    million (``now_cost=55`` is £5.5m). The raw status code is kept as a
    string so that codes outside ``AvailabilityStatus`` reach the projector,
    which flags them instead of rejecting the player.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    player_id: int = Field(..., gt=0, description="Unique FPL player ID")
    web_name: str = Field(..., min_length=1, max_length=50, description="Display name")
    team_id: int = Field(..., ge=1, description="Owning team ID")
    position: Position = Field(..., description="Player position")
    now_cost: int = Field(..., gt=0, description="Price in tenths of a million")
    status: str = Field(default="a", min_length=1, description="Availability code")
    chance_of_playing_next_round: Optional[int] = Field(None, ge=0, le=100)
    news: str = Field(default="", description="Latest injury/availability news")

    # Season aggregates
    minutes: int = Field(default=0, ge=0)
    goals_scored: int = Field(default=0, ge=0)
    assists: int = Field(default=0, ge=0)
    bonus: int = Field(default=0, ge=0)
    bps: int = Field(default=0, description="Season BPS (can be negative)")
    expected_goal_involvements: float = Field(default=0.0, ge=0.0)
    form: float = Field(default=0.0, description="Recent form (can be negative)")
    points_per_game: float = Field(default=0.0)
    total_points: int = Field(default=0)
    influence: float = Field(default=0.0, ge=0.0)
    creativity: float = Field(default=0.0, ge=0.0)
    threat: float = Field(default=0.0, ge=0.0)

    # Market data
    transfers_in_event: int = Field(default=0, ge=0)
    transfers_out_event: int = Field(default=0, ge=0)
    selected_by_percent: float = Field(default=0.0, ge=0.0, le=100.0)

    recent: Optional[RecentPerformance] = Field(
        None, description="Last finished gameweeks, supplied by the data layer"
    )

    @field_validator("status")
    @classmethod
    def normalise_status(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def price(self) -> float:
        """Price in millions."""
        return self.now_cost / 10

    @property
    def availability(self) -> Optional[AvailabilityStatus]:
        """Parsed status, or None for an unrecognised code."""
        try:
            return AvailabilityStatus(self.status)
        except ValueError:
            return None

    @property
    def is_available(self) -> bool:
        return self.status == AvailabilityStatus.AVAILABLE.value

    @property
    def net_transfers_out(self) -> int:
        return self.transfers_out_event - self.transfers_in_event

    @property
    def season_xgi_per_90(self) -> float:
        if self.minutes == 0:
            return 0.0
        return self.expected_goal_involvements / (self.minutes / 90)

    @property
    def season_bps_per_90(self) -> float:
        if self.minutes == 0:
            return 0.0
        return self.bps / (self.minutes / 90)

    @property
    def points_per_million(self) -> float:
        return self.total_points / self.price
