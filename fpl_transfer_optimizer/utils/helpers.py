"""
Display Helpers

Turn engine results into pandas DataFrames for an external renderer:
- Per-gameweek xP breakdowns
- Expendability rankings
- Scenario comparison tables
"""

from typing import Dict, List, Mapping, Optional, Sequence

import pandas as pd

from fpl_transfer_optimizer.domain.models.expected_points import XPBreakdown
from fpl_transfer_optimizer.domain.models.expendability import ExpendabilityResult
from fpl_transfer_optimizer.domain.models.player import PlayerDomain
from fpl_transfer_optimizer.domain.models.transfer_recommendation import (
    TransferScenario,
)


def create_display_dataframe(
    df: pd.DataFrame,
    columns: List[str],
    sort_by: Optional[str] = None,
    ascending: bool = False,
    round_decimals: int = 2,
) -> pd.DataFrame:
    """
    Create a cleaned DataFrame for display

    Args:
        df: Source DataFrame
        columns: Columns to keep, in display order (missing ones are skipped)
        sort_by: Column to sort by (if available)
        ascending: Sort direction
        round_decimals: Number of decimal places for rounding

    Returns:
        Cleaned DataFrame ready for display
    """
    if df.empty:
        return pd.DataFrame(columns=columns)

    display_df = df[[col for col in columns if col in df.columns]].copy()

    numeric_columns = display_df.select_dtypes(include=["number"]).columns
    if len(numeric_columns) > 0:
        display_df[numeric_columns] = display_df[numeric_columns].round(round_decimals)

    if sort_by and sort_by in display_df.columns:
        display_df = display_df.sort_values(sort_by, ascending=ascending, kind="mergesort")

    return display_df.reset_index(drop=True)


def xp_breakdown_frame(
    breakdowns: Mapping[int, XPBreakdown],
    players: Optional[Mapping[int, PlayerDomain]] = None,
) -> pd.DataFrame:
    """One row per player and gameweek with xP components."""
    players = players or {}
    rows: List[Dict] = []
    for player_id, breakdown in breakdowns.items():
        player = players.get(player_id)
        for gw in breakdown.per_gw:
            rows.append(
                {
                    "player_id": player_id,
                    "web_name": player.web_name if player else None,
                    "gw": gw.gw,
                    "fixtures": len(gw.fixtures),
                    "opponents": ", ".join(
                        (f.opponent_short_name or str(f.opponent_id))
                        + (" (H)" if f.is_home else " (A)")
                        for f in gw.fixtures
                    ),
                    "appearance": gw.components.appearance,
                    "attack": gw.components.attack,
                    "clean_sheet": gw.components.clean_sheet,
                    "bonus": gw.components.bonus,
                    "xp": gw.xp,
                    "x_mins": breakdown.x_mins,
                    "minutes_badge": breakdown.minutes_badge.value,
                }
            )
    return create_display_dataframe(
        pd.DataFrame(rows),
        [
            "player_id",
            "web_name",
            "gw",
            "fixtures",
            "opponents",
            "appearance",
            "attack",
            "clean_sheet",
            "bonus",
            "xp",
            "x_mins",
            "minutes_badge",
        ],
    )


def expendability_frame(results: Sequence[ExpendabilityResult]) -> pd.DataFrame:
    """Expendability ranking in engine order (most expendable first)."""
    rows = []
    for result in results:
        primary = result.primary_reason
        rows.append(
            {
                "rank": result.rank,
                "web_name": result.player.web_name,
                "position": result.player.position.value,
                "score": result.score,
                "primary_reason": primary.label if primary else None,
                "reasons": "; ".join(r.label for r in result.reasons),
                "xp_over_horizon": result.xp_over_horizon,
                "avg_xp_per_gw": result.avg_xp_per_gw,
                "x_mins": result.x_mins,
                "is_expendable": result.is_expendable,
                "is_locked": result.is_locked,
            }
        )
    return create_display_dataframe(
        pd.DataFrame(rows),
        [
            "rank",
            "web_name",
            "position",
            "score",
            "primary_reason",
            "reasons",
            "xp_over_horizon",
            "avg_xp_per_gw",
            "x_mins",
            "is_expendable",
            "is_locked",
        ],
    )


def scenario_frame(scenarios: Sequence[TransferScenario]) -> pd.DataFrame:
    """Scenario comparison table sorted by net gain."""
    rows = [
        {
            "type": scenario.scenario_type.value,
            "moves": ", ".join(
                f"{t.player_out_name} -> {t.player_in_name}" for t in scenario.transfers
            ),
            "gross_gain": scenario.gross_gain,
            "hit_penalty": scenario.hit_penalty,
            "net_gain": scenario.net_gain,
            "gain_bar": scenario.gain_bar,
            "clears_bar": scenario.clears_bar,
            "remaining_budget": scenario.remaining_budget_formatted,
            "free_transfers_after": scenario.free_transfers_after,
        }
        for scenario in scenarios
    ]
    return create_display_dataframe(
        pd.DataFrame(rows),
        [
            "type",
            "moves",
            "gross_gain",
            "hit_penalty",
            "net_gain",
            "gain_bar",
            "clears_bar",
            "remaining_budget",
            "free_transfers_after",
        ],
        sort_by="net_gain",
    )
