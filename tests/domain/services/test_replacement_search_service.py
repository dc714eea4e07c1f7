"""Tests for ReplacementSearchService."""

import pytest

from conftest import build_candidate, build_player, build_squad, build_squad_players
from fpl_transfer_optimizer.domain.models import Position
from fpl_transfer_optimizer.domain.services import ReplacementSearchService


@pytest.fixture
def service(engine_config):
    return ReplacementSearchService(engine_config)


@pytest.fixture
def outgoing(squad):
    # Player 8: MID at club 3, now_cost 50
    return squad.get_pick(8)


class TestLegality:
    """Test the legality rules."""

    def test_same_position_only(self, service, squad, outgoing):
        pool = [
            build_candidate(build_player(100, position=Position.DEF, team_id=6), 6.0),
            build_candidate(build_player(101, position=Position.MID, team_id=6), 5.0),
        ]
        options = service.find_replacements(outgoing, squad, pool, bank=0, outgoing_xp=2.0)
        assert [o.candidate.player_id for o in options] == [101]

    def test_budget_is_bank_plus_sell_price(self, service, squad_players):
        squad = build_squad(squad_players, selling_prices={8: 48})
        outgoing = squad.get_pick(8)
        pool = [
            build_candidate(build_player(100, team_id=6, now_cost=58), 6.0),
            build_candidate(build_player(101, team_id=6, now_cost=59), 7.0),
        ]
        options = service.find_replacements(outgoing, squad, pool, bank=10, outgoing_xp=2.0)

        assert [o.candidate.player_id for o in options] == [100]
        assert options[0].remaining_bank == 0
        for option in options:
            assert option.candidate.now_cost <= 10 + outgoing.sell_price

    def test_club_limit(self, service, squad, outgoing):
        # Clubs 1-5 each already have three squad players
        pool = [
            build_candidate(build_player(100, team_id=1), 9.0),
            build_candidate(build_player(101, team_id=3), 8.0),
            build_candidate(build_player(102, team_id=6), 7.0),
        ]
        options = service.find_replacements(outgoing, squad, pool, bank=0, outgoing_xp=2.0)
        # Club 3 is allowed because the outgoing player also plays there
        assert [o.candidate.player_id for o in options] == [101, 102]

        counts = squad.club_counts()
        for option in options:
            team_id = option.candidate.team_id
            after = counts.get(team_id, 0) + 1 - (1 if team_id == outgoing.team_id else 0)
            assert after <= 3

    def test_owned_and_excluded(self, service, squad, outgoing):
        owned = squad.get_pick(9).player
        pool = [
            build_candidate(owned, 9.0),
            build_candidate(build_player(100, team_id=6), 8.0),
            build_candidate(build_player(101, team_id=7), 7.0),
        ]
        options = service.find_replacements(
            outgoing, squad, pool, bank=0, outgoing_xp=2.0, excluded_player_ids={100}
        )
        assert [o.candidate.player_id for o in options] == [101]

    def test_no_legal_candidate(self, service, squad, outgoing):
        pool = [build_candidate(build_player(100, team_id=6, now_cost=120), 12.0)]
        assert service.find_replacements(outgoing, squad, pool, bank=0, outgoing_xp=2.0) == []


class TestRanking:
    """Test ranking and tie-breaks."""

    def test_highest_xp_first(self, service, squad, outgoing):
        pool = [
            build_candidate(build_player(100, team_id=6), 5.0),
            build_candidate(build_player(101, team_id=7), 7.0),
            build_candidate(build_player(102, team_id=8), 6.0),
        ]
        options = service.find_replacements(outgoing, squad, pool, bank=0, outgoing_xp=2.0)
        assert [o.candidate.player_id for o in options] == [101, 102, 100]
        assert [o.xp_gain for o in options] == pytest.approx([5.0, 4.0, 3.0])

    def test_equal_xp_prefers_cheaper(self, service, squad, outgoing):
        pool = [
            build_candidate(build_player(100, team_id=6, now_cost=50), 6.0),
            build_candidate(build_player(101, team_id=7, now_cost=45), 6.0),
        ]
        options = service.find_replacements(outgoing, squad, pool, bank=0, outgoing_xp=2.0)
        assert [o.candidate.player_id for o in options] == [101, 100]
        assert options[0].remaining_bank == 5

    def test_limit(self, service, squad, outgoing):
        pool = [build_candidate(build_player(100 + i, team_id=6 + i % 4), float(i)) for i in range(8)]
        options = service.find_replacements(
            outgoing, squad, pool, bank=0, outgoing_xp=0.0, limit=3
        )
        assert len(options) == 3
        assert all(o.outgoing_player_id == 8 for o in options)


class TestWhyBest:
    """Test replacement explanations."""

    def test_reasons_capped_at_three(self, service):
        player = build_player(
            100,
            form=7.0,
            transfers_in_event=200_000,
            total_points=100,
            now_cost=50,
        )
        why = service.why_best(build_candidate(player, 6.0), 2.5)
        assert why == "+2.5 xP over 1 GWs; Excellent form (7.0); Nailed starter"

    def test_market_reasons(self, service):
        player = build_player(
            100,
            status="d",
            form=4.0,
            transfers_in_event=150_000,
            total_points=80,
            now_cost=50,
        )
        why = service.why_best(build_candidate(player, 6.0), -1.0)
        assert why == "Good form (4.0); High transfer in demand; Excellent value"

    def test_default_explanation(self, service):
        player = build_player(100, status="d")
        assert service.why_best(build_candidate(player, 1.0), 0.0) == "Best available option by xP"
