"""Fixture analysis service: per-team fixture lookup over a gameweek horizon."""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from fpl_transfer_optimizer.domain.models.expected_points import TeamFixture
from fpl_transfer_optimizer.domain.models.fixture import FixtureDomain
from fpl_transfer_optimizer.domain.models.team import TeamDomain


class FixtureDifficultyIndex:
    """
    Lookup of upcoming fixtures by team and gameweek.

    Built once per optimisation run from the full fixture list. Finished
    fixtures and fixtures without a gameweek are ignored. A gameweek in which
    a team has no fixture yields no entries (blank); two fixtures yield two
    entries (double). Lookups never raise for missing data.
    """

    def __init__(
        self,
        fixtures: Iterable[FixtureDomain],
        teams: Optional[Iterable[TeamDomain]] = None,
    ):
        self._short_names: Dict[int, str] = {
            team.team_id: team.short_name for team in (teams or [])
        }
        self._by_team_gw: Dict[Tuple[int, int], List[TeamFixture]] = defaultdict(list)
        signature = []
        skipped = 0

        for fixture in sorted(fixtures, key=lambda f: f.fixture_id):
            if fixture.finished or fixture.event is None:
                skipped += 1
                continue
            for team_id in (fixture.home_team_id, fixture.away_team_id):
                opponent_id = fixture.get_opponent(team_id)
                self._by_team_gw[(team_id, fixture.event)].append(
                    TeamFixture(
                        gw=fixture.event,
                        opponent_id=opponent_id,
                        is_home=fixture.is_home_fixture(team_id),
                        difficulty=fixture.difficulty_for(team_id),
                        fixture_id=fixture.fixture_id,
                        opponent_short_name=self._short_names.get(opponent_id),
                    )
                )
            signature.append(
                (
                    fixture.fixture_id,
                    fixture.event,
                    fixture.home_team_id,
                    fixture.away_team_id,
                    fixture.home_difficulty,
                    fixture.away_difficulty,
                )
            )

        self._fingerprint = hash(tuple(signature))
        logger.debug(
            f"📅 Fixture index built: {len(signature)} upcoming fixtures, {skipped} skipped"
        )

    @property
    def fingerprint(self) -> int:
        """Hash of the indexed fixtures, used in cache keys."""
        return self._fingerprint

    def fixtures_for_team(
        self, team_id: int, gw_ids: Sequence[int]
    ) -> List[TeamFixture]:
        """Fixtures for ``team_id`` in horizon order (zero or more per gameweek)."""
        result: List[TeamFixture] = []
        for gw in gw_ids:
            result.extend(self._by_team_gw.get((team_id, gw), []))
        return result

    def fixtures_in_gameweek(self, team_id: int, gw: int) -> List[TeamFixture]:
        return list(self._by_team_gw.get((team_id, gw), []))

    def average_difficulty(
        self, team_id: int, gw_ids: Sequence[int]
    ) -> Optional[float]:
        """Mean FDR over the horizon's fixtures, or None when every gameweek is blank."""
        fixtures = self.fixtures_for_team(team_id, gw_ids)
        if not fixtures:
            return None
        return sum(f.difficulty for f in fixtures) / len(fixtures)

    def blank_gameweeks(self, team_id: int, gw_ids: Sequence[int]) -> List[int]:
        return [gw for gw in gw_ids if (team_id, gw) not in self._by_team_gw]

    def double_gameweeks(self, team_id: int, gw_ids: Sequence[int]) -> List[int]:
        return [
            gw for gw in gw_ids if len(self._by_team_gw.get((team_id, gw), [])) > 1
        ]
