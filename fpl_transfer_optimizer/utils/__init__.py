"""
Display Utility Functions

pandas helpers that turn engine results into tables for a renderer.
"""

from .helpers import (
    create_display_dataframe,
    expendability_frame,
    scenario_frame,
    xp_breakdown_frame,
)

__all__ = [
    "create_display_dataframe",
    "expendability_frame",
    "scenario_frame",
    "xp_breakdown_frame",
]
