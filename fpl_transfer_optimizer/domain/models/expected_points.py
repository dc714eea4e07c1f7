"""Expected points (xP) projection models."""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class MinutesBadge(str, Enum):
    """Minutes reliability label derived from expected minutes."""

    NAILED = "NAILED"
    RISK = "RISK"
    CAMEO = "CAMEO"


class XPComponents(BaseModel):
    """Points decomposition of a projection."""

    model_config = ConfigDict(frozen=True)

    appearance: float = 0.0
    attack: float = 0.0
    clean_sheet: float = 0.0
    bonus: float = 0.0

    @property
    def total(self) -> float:
        return self.appearance + self.attack + self.clean_sheet + self.bonus

    def plus(self, other: "XPComponents") -> "XPComponents":
        return XPComponents(
            appearance=self.appearance + other.appearance,
            attack=self.attack + other.attack,
            clean_sheet=self.clean_sheet + other.clean_sheet,
            bonus=self.bonus + other.bonus,
        )


class TeamFixture(BaseModel):
    """One fixture from a team's point of view."""

    model_config = ConfigDict(frozen=True)

    gw: int = Field(..., ge=1, le=38)
    opponent_id: int
    is_home: bool
    difficulty: int = Field(..., ge=1, le=5)
    fixture_id: Optional[int] = None
    opponent_short_name: Optional[str] = None


class GameweekXP(BaseModel):
    """Projection for a single gameweek (zero, one or two fixtures)."""

    model_config = ConfigDict(frozen=True)

    gw: int
    xp: float = Field(..., description="Sum of components for this gameweek")
    components: XPComponents
    fixtures: List[TeamFixture] = Field(default_factory=list)

    @property
    def is_blank(self) -> bool:
        return not self.fixtures

    @property
    def is_double(self) -> bool:
        return len(self.fixtures) > 1


class XPBreakdown(BaseModel):
    """Projection over a horizon with per-gameweek and per-component detail."""

    model_config = ConfigDict(frozen=True)

    player_id: int
    gw_ids: Tuple[int, ...]
    total: float
    per_gw: List[GameweekXP] = Field(default_factory=list)
    components: XPComponents = Field(default_factory=XPComponents)
    x_mins: float = Field(..., ge=0.0)
    minutes_badge: MinutesBadge

    @property
    def average_per_gw(self) -> float:
        if not self.gw_ids:
            return 0.0
        return self.total / len(self.gw_ids)

    @property
    def fixtures(self) -> List[TeamFixture]:
        return [fixture for gw in self.per_gw for fixture in gw.fixtures]

    @property
    def average_difficulty(self) -> Optional[float]:
        """Mean FDR across every fixture in the horizon (None if all blank)."""
        fixtures = self.fixtures
        if not fixtures:
            return None
        return sum(f.difficulty for f in fixtures) / len(fixtures)

    @property
    def blank_gameweeks(self) -> List[int]:
        return [gw.gw for gw in self.per_gw if gw.is_blank]
