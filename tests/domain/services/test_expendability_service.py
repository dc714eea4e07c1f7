"""Tests for ExpendabilityService (weakest link scoring)."""

import pytest

from conftest import build_fixtures, build_squad, build_squad_players
from fpl_transfer_optimizer.domain.models import ReasonCode
from fpl_transfer_optimizer.domain.services import (
    ExpectedPointsService,
    ExpendabilityService,
    FixtureDifficultyIndex,
)


def make_service(engine_config, fixtures=None):
    index = FixtureDifficultyIndex(fixtures or build_fixtures([10]))
    return ExpendabilityService(ExpectedPointsService(index, engine_config), engine_config)


def result_for(results, player_id):
    return next(r for r in results if r.pick.player_id == player_id)


def codes(result):
    return [reason.code for reason in result.reasons]


@pytest.fixture
def service(engine_config):
    return make_service(engine_config)


class TestScoreSquad:
    """Test ranking behaviour."""

    def test_healthy_squad_scores_zero_in_squad_order(self, service, squad):
        results = service.score_squad(squad, [10])

        assert [r.score for r in results] == [0.0] * 15
        assert [r.pick.player_id for r in results] == squad.player_ids
        assert [r.rank for r in results] == list(range(1, 16))
        assert [r.is_expendable for r in results] == [True] * 5 + [False] * 10

    def test_injured_player_ranked_first(self, service):
        squad = build_squad(build_squad_players(p0={"status": "i", "minutes": 0}))
        results = service.score_squad(squad, [10])
        injured = results[0]

        assert injured.pick.player_id == 1
        assert injured.score == 100.0
        assert injured.x_mins == 0.0
        assert injured.xp_over_horizon == 0.0
        assert injured.primary_reason.label == "Injured/Unavailable"
        assert codes(injured) == [ReasonCode.INJURED, ReasonCode.LOW_MINUTES, ReasonCode.LOW_XP]
        assert [r.impact for r in injured.reasons] == [50, 25, 38]

    def test_equal_scores_keep_squad_order(self, service):
        squad = build_squad(
            build_squad_players(
                p9={"status": "i", "minutes": 0}, p4={"status": "i", "minutes": 0}
            )
        )
        results = service.score_squad(squad, [10])
        assert [r.pick.player_id for r in results[:2]] == [5, 10]
        assert results[0].score == results[1].score

    def test_locked_players_excluded_from_ranking(self, service):
        squad = build_squad(build_squad_players(p0={"status": "i", "minutes": 0}))
        results = service.score_squad(squad, [10], locked_ids={1, 2})

        ranked = [r for r in results if not r.is_locked]
        locked = results[-2:]
        assert len(ranked) == 13
        assert [r.pick.player_id for r in locked] == [1, 2]
        for result in locked:
            assert result.is_locked is True
            assert result.score == 0.0
            assert result.rank is None
            assert result.is_expendable is False
            assert codes(result) == [ReasonCode.LOCKED]
            assert result.primary_reason.label == "Locked"
        assert result_for(results, 2).xp_over_horizon > 0

    def test_scoring_is_idempotent(self, service, squad):
        assert service.score_squad(squad, [10]) == service.score_squad(squad, [10])


class TestSignals:
    """Test individual expendability signals."""

    def score_player(self, service, gw_ids=(10,), **overrides):
        squad = build_squad(build_squad_players(p7=overrides))
        return result_for(service.score_squad(squad, list(gw_ids)), 8)

    def test_suspended(self, service):
        result = self.score_player(service, status="s", news="Red card")
        reason = result.reasons[0]
        assert reason.code == ReasonCode.SUSPENDED
        assert reason.impact == 40
        assert reason.detail == "Red card"

    def test_doubtful_scales_with_chance(self, service):
        result = self.score_player(service, status="d", chance_of_playing_next_round=50)
        reason = result.reasons[0]
        assert reason.code == ReasonCode.DOUBTFUL
        assert reason.label == "Fitness doubt"
        assert reason.impact == 15
        assert reason.detail.startswith("50% chance of playing")

    def test_doubtful_without_chance_assumes_default(self, service):
        result = self.score_player(service, status="d", news="Knock")
        assert result.reasons[0].impact == 15
        assert result.reasons[0].detail == "50% chance of playing - Knock"

    def test_rotation_risk(self, service):
        result = self.score_player(service, minutes=250)
        assert codes(result) == [ReasonCode.ROTATION_RISK]
        assert result.score == 15
        assert result.reasons[0].detail == "Rotation risk - 50 mins average"

    def test_low_minutes(self, service):
        result = self.score_player(service, minutes=150)
        assert ReasonCode.LOW_MINUTES in codes(result)
        assert ReasonCode.ROTATION_RISK not in codes(result)

    def test_poor_fixtures(self, engine_config):
        service = make_service(engine_config, build_fixtures([10, 11], difficulty=5))
        result = self.score_player(service, gw_ids=(10, 11))
        reason = next(r for r in result.reasons if r.code == ReasonCode.POOR_FIXTURES)
        assert reason.impact == 20
        assert reason.detail == "Tough fixtures ahead (avg FDR 5.0)"

    def test_blank_gameweeks(self, service):
        result = self.score_player(service, gw_ids=(10, 11))
        reason = next(r for r in result.reasons if r.code == ReasonCode.BLANKS)
        assert reason.impact == 8
        assert reason.detail == "Blank in GW11"
        assert result.blank_gameweeks == [11]

    def test_declining_form(self, service):
        result = self.score_player(service, form=2.0, points_per_game=5.0)
        reason = next(r for r in result.reasons if r.code == ReasonCode.DECLINING_FORM)
        assert reason.impact == 9
        assert reason.detail == "Form 2.0 vs season avg 5.0"

    def test_price_drop(self, service):
        result = self.score_player(
            service, transfers_out_event=80_000, transfers_in_event=10_000
        )
        assert codes(result) == [ReasonCode.PRICE_DROP]
        assert result.reasons[0].detail == "70k net transfers out"
        assert result.score == 10

    def test_primary_tie_goes_to_higher_priority(self, service):
        result = self.score_player(service, minutes=250, form=0.0, points_per_game=4.0)
        assert codes(result) == [ReasonCode.DECLINING_FORM, ReasonCode.ROTATION_RISK]
        assert [r.impact for r in result.reasons] == [15, 15]
        assert result.primary_reason.code == ReasonCode.DECLINING_FORM
        assert sum(r.is_primary for r in result.reasons) == 1
