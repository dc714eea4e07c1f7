"""Tests for the pandas display helpers."""

import pandas as pd

from conftest import build_fixtures, build_player, build_squad
from fpl_transfer_optimizer.domain.models import OptimizationSettings
from fpl_transfer_optimizer.domain.services import (
    ExpectedPointsService,
    FixtureDifficultyIndex,
    TransferOptimizationService,
)
from fpl_transfer_optimizer.utils import (
    create_display_dataframe,
    expendability_frame,
    scenario_frame,
    xp_breakdown_frame,
)


class TestCreateDisplayDataframe:
    def test_rounds_sorts_and_skips_missing(self):
        df = pd.DataFrame({"name": ["a", "b"], "xp": [1.234, 5.678]})
        display = create_display_dataframe(df, ["name", "xp", "missing"], sort_by="xp")
        assert list(display.columns) == ["name", "xp"]
        assert list(display["xp"]) == [5.68, 1.23]

    def test_empty_frame_keeps_columns(self):
        display = create_display_dataframe(pd.DataFrame(), ["name", "xp"])
        assert display.empty
        assert list(display.columns) == ["name", "xp"]


class TestEngineFrames:
    """Test frames built from engine output."""

    def test_xp_breakdown_frame(self, teams):
        index = FixtureDifficultyIndex(build_fixtures([10]), teams)
        service = ExpectedPointsService(index)
        player = build_player(1, team_id=1)
        frame = xp_breakdown_frame({1: service.project(player, [10, 11])}, {1: player})

        assert list(frame["gw"]) == [10, 11]
        assert list(frame["fixtures"]) == [1, 0]
        assert frame["opponents"].iloc[0] == "T06 (H)"
        assert frame["web_name"].iloc[0] == "Player1"
        assert frame["xp"].iloc[1] == 0.0

    def test_expendability_and_scenario_frames(self, squad_players, teams, engine_config):
        squad = build_squad(squad_players)
        service = TransferOptimizationService(engine_config)
        result = service.optimize_transfers(
            squad_players,
            teams,
            build_fixtures([10]),
            squad,
            0,
            1,
            OptimizationSettings(horizon_gw_ids=[10]),
        )

        expendability = expendability_frame(result.weakest_links)
        assert len(expendability) == 15
        assert list(expendability["rank"])[:3] == [1, 2, 3]

        scenarios = scenario_frame([result.baseline] + result.single_options)
        assert list(scenarios["type"]) == ["roll"]
        assert scenarios["remaining_budget"].iloc[0] == "£0.0m"
