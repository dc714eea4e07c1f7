"""Tests for PlayerDomain, TeamDomain and FixtureDomain models."""

import pytest
from pydantic import ValidationError

from fpl_transfer_optimizer.domain.models import (
    AvailabilityStatus,
    FixtureDomain,
    PlayerDomain,
    Position,
    RecentPerformance,
    TeamDomain,
)


class TestPlayerDomain:
    """Test PlayerDomain model validation."""

    def test_valid_player_creation(self):
        """Test creating a valid player."""
        player = PlayerDomain(
            player_id=1,
            web_name="Haaland",
            team_id=11,
            position=Position.FWD,
            now_cost=150,
            total_points=180,
        )

        assert player.player_id == 1
        assert player.price == 15.0
        assert player.is_available is True
        assert player.availability == AvailabilityStatus.AVAILABLE
        assert player.points_per_million == pytest.approx(12.0)

    def test_status_is_normalised(self):
        player = PlayerDomain(
            player_id=2, web_name="Test", team_id=1, position=Position.DEF, now_cost=45, status=" D "
        )
        assert player.status == "d"
        assert player.availability == AvailabilityStatus.DOUBTFUL

    def test_unknown_status_is_kept(self):
        """Unrecognised codes survive validation so the projector can flag them."""
        player = PlayerDomain(
            player_id=3, web_name="Test", team_id=1, position=Position.MID, now_cost=50, status="x"
        )
        assert player.status == "x"
        assert player.availability is None
        assert player.is_available is False

    def test_player_validation_errors(self):
        """Test various validation errors."""
        base_data = {
            "player_id": 1,
            "web_name": "Test",
            "team_id": 1,
            "position": Position.GKP,
            "now_cost": 45,
        }

        with pytest.raises(ValidationError):
            PlayerDomain(**{**base_data, "player_id": 0})

        with pytest.raises(ValidationError):
            PlayerDomain(**{**base_data, "position": "INVALID"})

        with pytest.raises(ValidationError):
            PlayerDomain(**{**base_data, "now_cost": 0})

        with pytest.raises(ValidationError):
            PlayerDomain(**{**base_data, "chance_of_playing_next_round": 101})

    def test_player_is_immutable(self):
        player = PlayerDomain(
            player_id=1, web_name="Test", team_id=1, position=Position.GKP, now_cost=45
        )
        with pytest.raises(ValidationError):
            player.now_cost = 50

    def test_market_and_rate_properties(self):
        player = PlayerDomain(
            player_id=1,
            web_name="Test",
            team_id=1,
            position=Position.MID,
            now_cost=80,
            minutes=900,
            expected_goal_involvements=5.0,
            bps=200,
            transfers_in_event=10_000,
            transfers_out_event=70_000,
        )
        assert player.net_transfers_out == 60_000
        assert player.season_xgi_per_90 == pytest.approx(0.5)
        assert player.season_bps_per_90 == pytest.approx(20.0)


class TestRecentPerformance:
    """Test per-90 and average derivations."""

    def test_rates(self):
        recent = RecentPerformance(
            games=5, minutes=450, expected_goal_involvements=2.0, bps=100, points=30
        )
        assert recent.has_history is True
        assert recent.average_minutes == 90
        assert recent.xgi_per_90 == pytest.approx(0.4)
        assert recent.bps_per_90 == pytest.approx(20.0)

    def test_zero_minutes_is_neutral(self):
        recent = RecentPerformance(games=3, minutes=0)
        assert recent.average_minutes == 0
        assert recent.xgi_per_90 == 0.0
        assert recent.bps_per_90 == 0.0

    def test_no_games(self):
        recent = RecentPerformance()
        assert recent.has_history is False
        assert recent.average_minutes == 0.0


class TestTeamDomain:
    def test_short_name_length(self):
        TeamDomain(team_id=1, name="Arsenal", short_name="ARS")
        with pytest.raises(ValidationError):
            TeamDomain(team_id=1, name="Arsenal", short_name="ARSN")


class TestFixtureDomain:
    """Test FixtureDomain perspective helpers."""

    @pytest.fixture
    def fixture(self):
        return FixtureDomain(
            fixture_id=1,
            event=10,
            home_team_id=1,
            away_team_id=2,
            home_difficulty=2,
            away_difficulty=4,
        )

    def test_perspective(self, fixture):
        assert fixture.involves_team == {1, 2}
        assert fixture.is_home_fixture(1) is True
        assert fixture.is_home_fixture(2) is False
        assert fixture.get_opponent(1) == 2
        assert fixture.get_opponent(2) == 1
        assert fixture.difficulty_for(1) == 2
        assert fixture.difficulty_for(2) == 4

    def test_uninvolved_team_raises(self, fixture):
        with pytest.raises(ValueError, match="not involved"):
            fixture.get_opponent(3)
        with pytest.raises(ValueError, match="not involved"):
            fixture.difficulty_for(3)

    def test_same_team_rejected(self):
        with pytest.raises(ValidationError, match="two different teams"):
            FixtureDomain(
                fixture_id=1,
                event=1,
                home_team_id=1,
                away_team_id=1,
                home_difficulty=3,
                away_difficulty=3,
            )

    def test_difficulty_bounds(self):
        with pytest.raises(ValidationError):
            FixtureDomain(
                fixture_id=1,
                event=1,
                home_team_id=1,
                away_team_id=2,
                home_difficulty=6,
                away_difficulty=3,
            )
