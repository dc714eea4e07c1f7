"""Shared factories for engine tests."""

from typing import Iterable, List, Optional, Sequence, Tuple

import pytest
from loguru import logger

from fpl_transfer_optimizer.config import EngineConfig
from fpl_transfer_optimizer.domain.models import (
    CandidatePlayer,
    FixtureDomain,
    MinutesBadge,
    PlayerDomain,
    Position,
    RecentPerformance,
    SquadDomain,
    SquadPick,
    TeamDomain,
    XPBreakdown,
)

# Squad players play for clubs 1-5 (home); pool players for clubs 6-10 (away)
DEFAULT_PAIRS: Tuple[Tuple[int, int], ...] = ((1, 6), (2, 7), (3, 8), (4, 9), (5, 10))
SQUAD_POSITIONS = [Position.GKP] * 2 + [Position.DEF] * 5 + [Position.MID] * 5 + [
    Position.FWD
] * 3
BENCH_INDEXES = (1, 6, 11, 14)


def build_player(
    player_id: int,
    position: Position = Position.MID,
    team_id: int = 1,
    now_cost: int = 50,
    status: str = "a",
    games: int = 5,
    minutes: int = 450,
    xgi: float = 2.0,
    bps: int = 100,
    recent: bool = True,
    **overrides,
) -> PlayerDomain:
    data = dict(
        player_id=player_id,
        web_name=f"Player{player_id}",
        team_id=team_id,
        position=position,
        now_cost=now_cost,
        status=status,
    )
    if recent:
        data["recent"] = RecentPerformance(
            games=games,
            minutes=minutes,
            expected_goal_involvements=xgi,
            bps=bps,
            points=25,
        )
    data.update(overrides)
    return PlayerDomain(**data)


def build_squad(
    players: Sequence[PlayerDomain], selling_prices: Optional[dict] = None
) -> SquadDomain:
    """Squad in list order; indexes 1, 6, 11 and 14 on the bench."""
    selling_prices = selling_prices or {}
    picks = []
    for idx, player in enumerate(players):
        picks.append(
            SquadPick(
                player=player,
                selling_price=selling_prices.get(player.player_id),
                multiplier=0 if idx in BENCH_INDEXES else (2 if idx == 2 else 1),
                is_captain=idx == 2,
                is_vice_captain=idx == 3,
                squad_slot=idx + 1,
            )
        )
    return SquadDomain(picks=picks)


def build_squad_players(**overrides_by_index) -> List[PlayerDomain]:
    """15 healthy players, three per club across clubs 1-5."""
    players = []
    for idx, position in enumerate(SQUAD_POSITIONS):
        kwargs = dict(position=position, team_id=(idx % 5) + 1)
        kwargs.update(overrides_by_index.get(f"p{idx}", {}))
        players.append(build_player(idx + 1, **kwargs))
    return players


def build_fixtures(
    gw_ids: Iterable[int],
    pairs: Sequence[Tuple[int, int]] = DEFAULT_PAIRS,
    difficulty: int = 3,
) -> List[FixtureDomain]:
    fixtures = []
    fixture_id = 1
    for gw in gw_ids:
        for home, away in pairs:
            fixtures.append(
                FixtureDomain(
                    fixture_id=fixture_id,
                    event=gw,
                    home_team_id=home,
                    away_team_id=away,
                    home_difficulty=difficulty,
                    away_difficulty=difficulty,
                )
            )
            fixture_id += 1
    return fixtures


def build_teams(count: int = 10) -> List[TeamDomain]:
    return [
        TeamDomain(team_id=i, name=f"Team {i}", short_name=f"T{i:02d}")
        for i in range(1, count + 1)
    ]


def build_candidate(
    player: PlayerDomain, total: float, gw_ids: Tuple[int, ...] = (10,)
) -> CandidatePlayer:
    return CandidatePlayer(
        player=player,
        xp=XPBreakdown(
            player_id=player.player_id,
            gw_ids=gw_ids,
            total=total,
            x_mins=90.0,
            minutes_badge=MinutesBadge.NAILED,
        ),
    )


@pytest.fixture
def engine_config():
    """Default configuration, independent of environment overrides."""
    return EngineConfig()


@pytest.fixture
def squad_players():
    return build_squad_players()


@pytest.fixture
def squad(squad_players):
    return build_squad(squad_players)


@pytest.fixture
def teams():
    return build_teams()


@pytest.fixture
def log_messages():
    """Collect loguru output emitted during a test."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="DEBUG")
    yield messages
    logger.remove(handler_id)
