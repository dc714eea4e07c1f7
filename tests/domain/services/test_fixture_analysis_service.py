"""Tests for the fixture difficulty index."""

import pytest

from conftest import build_fixtures, build_teams
from fpl_transfer_optimizer.domain.models import FixtureDomain
from fpl_transfer_optimizer.domain.services import FixtureDifficultyIndex


def fixture(fixture_id, event, home, away, home_fdr=3, away_fdr=3, finished=False):
    return FixtureDomain(
        fixture_id=fixture_id,
        event=event,
        home_team_id=home,
        away_team_id=away,
        home_difficulty=home_fdr,
        away_difficulty=away_fdr,
        finished=finished,
    )


@pytest.fixture
def index():
    fixtures = [
        fixture(1, 10, 1, 2, home_fdr=2, away_fdr=4),
        fixture(2, 11, 3, 1, home_fdr=3, away_fdr=5),
        fixture(3, 11, 1, 4, home_fdr=2, away_fdr=3),  # team 1 double in GW11
        fixture(4, 13, 2, 1, home_fdr=4, away_fdr=2),
        fixture(5, 9, 1, 5, finished=True),
        FixtureDomain(
            fixture_id=6,
            event=None,
            home_team_id=1,
            away_team_id=6,
            home_difficulty=3,
            away_difficulty=3,
        ),
    ]
    return FixtureDifficultyIndex(fixtures, build_teams(6))


class TestFixturesForTeam:
    """Test per-team lookup semantics."""

    def test_horizon_order_and_perspective(self, index):
        fixtures = index.fixtures_for_team(1, [10, 11, 12, 13])
        assert [f.gw for f in fixtures] == [10, 11, 11, 13]
        assert [f.opponent_id for f in fixtures] == [2, 3, 4, 2]
        assert [f.is_home for f in fixtures] == [True, False, True, False]
        assert [f.difficulty for f in fixtures] == [2, 5, 2, 2]
        assert fixtures[0].opponent_short_name == "T02"

    def test_blank_gameweek_has_no_entry(self, index):
        assert index.fixtures_for_team(1, [12]) == []
        assert index.blank_gameweeks(1, [10, 11, 12, 13]) == [12]

    def test_double_gameweek(self, index):
        assert index.double_gameweeks(1, [10, 11, 12, 13]) == [11]
        assert len(index.fixtures_in_gameweek(1, 11)) == 2

    def test_finished_and_unscheduled_fixtures_ignored(self, index):
        assert index.fixtures_for_team(5, [9]) == []
        assert index.fixtures_for_team(6, list(range(1, 39))) == []

    def test_uncovered_gameweeks_return_empty(self, index):
        assert index.fixtures_for_team(1, [30, 31]) == []
        assert index.fixtures_for_team(99, [10]) == []

    def test_average_difficulty(self, index):
        assert index.average_difficulty(1, [10, 11, 12, 13]) == pytest.approx(11 / 4)
        assert index.average_difficulty(1, [12]) is None


class TestFingerprint:
    def test_independent_of_input_order(self):
        fixtures = build_fixtures([10, 11])
        forward = FixtureDifficultyIndex(fixtures)
        backward = FixtureDifficultyIndex(list(reversed(fixtures)))
        assert forward.fingerprint == backward.fingerprint

    def test_changes_with_difficulty(self):
        easy = FixtureDifficultyIndex(build_fixtures([10], difficulty=2))
        hard = FixtureDifficultyIndex(build_fixtures([10], difficulty=4))
        assert easy.fingerprint != hard.fingerprint

    def test_no_team_names_without_teams(self):
        index = FixtureDifficultyIndex(build_fixtures([10]))
        assert index.fixtures_for_team(1, [10])[0].opponent_short_name is None
