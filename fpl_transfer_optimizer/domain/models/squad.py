"""Squad and horizon domain models."""

from collections import Counter
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .player import PlayerDomain, Position

SQUAD_SIZE = 15
MAX_PLAYERS_PER_CLUB = 3
FIRST_GAMEWEEK = 1
LAST_GAMEWEEK = 38


class SquadPick(BaseModel):
    """One of the manager's 15 squad slots."""

    model_config = ConfigDict(frozen=True)

    player: PlayerDomain
    selling_price: Optional[int] = Field(
        None,
        gt=0,
        description="Sale value in tenths of a million (falls back to now_cost)",
    )
    multiplier: int = Field(
        default=1, ge=0, le=3, description="0 = bench, 1 = starter, 2/3 = captain"
    )
    is_captain: bool = False
    is_vice_captain: bool = False
    squad_slot: Optional[int] = Field(None, ge=1, le=SQUAD_SIZE)

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
    def sell_price(self) -> int:
        """Price the engine credits when this player is sold."""
        if self.selling_price is not None:
            return self.selling_price
        return self.player.now_cost

    @property
    def is_starter(self) -> bool:
        return self.multiplier > 0


class SquadDomain(BaseModel):
    """
    A manager's 15-player squad.

    Enforces the structural rules at construction: exactly 15 unique players,
    exactly one captain and one vice-captain, and no more than three players
    from any one club.
    """

    model_config = ConfigDict(frozen=True)

    picks: List[SquadPick] = Field(..., description="All 15 squad picks in squad order")

    @model_validator(mode="after")
    def validate_squad_rules(self):
        if len(self.picks) != SQUAD_SIZE:
            raise ValueError(
                f"Squad must contain exactly {SQUAD_SIZE} players, got {len(self.picks)}"
            )

        player_ids = [pick.player_id for pick in self.picks]
        if len(set(player_ids)) != SQUAD_SIZE:
            duplicates = sorted(pid for pid, n in Counter(player_ids).items() if n > 1)
            raise ValueError(f"Duplicate players in squad: {duplicates}")

        captains = sum(1 for pick in self.picks if pick.is_captain)
        vice_captains = sum(1 for pick in self.picks if pick.is_vice_captain)
        if captains != 1 or vice_captains != 1:
            raise ValueError(
                f"Squad needs exactly 1 captain and 1 vice-captain, got {captains} and {vice_captains}"
            )
        if any(pick.is_captain and pick.is_vice_captain for pick in self.picks):
            raise ValueError("Captain and vice-captain must be different players")

        over_limit = {
            team_id: count
            for team_id, count in self.club_counts().items()
            if count > MAX_PLAYERS_PER_CLUB
        }
        if over_limit:
            raise ValueError(
                f"More than {MAX_PLAYERS_PER_CLUB} players from one club: {over_limit}"
            )
        return self

    @property
    def player_ids(self) -> List[int]:
        return [pick.player_id for pick in self.picks]

    @property
    def starters(self) -> List[SquadPick]:
        return [pick for pick in self.picks if pick.is_starter]

    @property
    def bench(self) -> List[SquadPick]:
        return [pick for pick in self.picks if not pick.is_starter]

    @property
    def captain(self) -> SquadPick:
        return next(pick for pick in self.picks if pick.is_captain)

    @property
    def vice_captain(self) -> SquadPick:
        return next(pick for pick in self.picks if pick.is_vice_captain)

    def club_counts(self) -> Dict[int, int]:
        """Number of squad players per club."""
        return dict(Counter(pick.team_id for pick in self.picks))

    def get_pick(self, player_id: int) -> Optional[SquadPick]:
        return next((pick for pick in self.picks if pick.player_id == player_id), None)

    def fingerprint(self) -> Tuple:
        """Hashable identity of the squad for cache keys."""
        return tuple(
            (pick.player_id, pick.sell_price, pick.multiplier, pick.player.now_cost)
            for pick in self.picks
        )


class Horizon(BaseModel):
    """Ordered, de-duplicated sequence of future gameweek ids."""

    model_config = ConfigDict(frozen=True)

    gw_ids: Tuple[int, ...] = Field(..., description="Gameweeks in projection order")

    @field_validator("gw_ids", mode="before")
    @classmethod
    def deduplicate(cls, v):
        seen = []
        for gw in v:
            if gw not in seen:
                seen.append(gw)
        return tuple(seen)

    @field_validator("gw_ids")
    @classmethod
    def validate_gameweeks(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        if not v:
            raise ValueError("Horizon must contain at least one gameweek")
        out_of_range = [gw for gw in v if not FIRST_GAMEWEEK <= gw <= LAST_GAMEWEEK]
        if out_of_range:
            raise ValueError(f"Gameweeks outside 1-38: {out_of_range}")
        return v

    @classmethod
    def starting_at(cls, start_gw: int, length: int) -> "Horizon":
        """Build a consecutive horizon, truncated at the final gameweek."""
        end = min(start_gw + length, LAST_GAMEWEEK + 1)
        return cls(gw_ids=tuple(range(start_gw, end)))

    def __len__(self) -> int:
        return len(self.gw_ids)
