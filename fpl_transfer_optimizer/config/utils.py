"""
Configuration Utilities

Helper functions for managing engine configuration: export, comparison and
template generation.
"""

import json
from pathlib import Path
from typing import Any, Dict

from loguru import logger

from .settings import EngineConfig


def export_config_to_json(config: EngineConfig, output_path: Path) -> None:
    """
    Export configuration to JSON file

    Args:
        config: EngineConfig instance to export
        output_path: Path where to save the JSON file
    """
    with open(output_path, "w") as f:
        json.dump(config.model_dump(mode="json"), f, indent=2)

    logger.info(f"✅ Configuration exported to {output_path}")


def compare_configs(config1: EngineConfig, config2: EngineConfig) -> Dict[str, Any]:
    """
    Compare two configurations and return differences

    Args:
        config1: First configuration
        config2: Second configuration

    Returns:
        Dictionary of differences keyed by dotted field path
    """
    differences = {}

    def compare_dicts(d1, d2, path=""):
        for key in set(d1.keys()) | set(d2.keys()):
            current_path = f"{path}.{key}" if path else str(key)

            if key not in d1:
                differences[current_path] = {"config1": "<missing>", "config2": d2[key]}
            elif key not in d2:
                differences[current_path] = {"config1": d1[key], "config2": "<missing>"}
            elif isinstance(d1[key], dict) and isinstance(d2[key], dict):
                compare_dicts(d1[key], d2[key], current_path)
            elif d1[key] != d2[key]:
                differences[current_path] = {"config1": d1[key], "config2": d2[key]}

    compare_dicts(config1.model_dump(), config2.model_dump())
    return differences


def create_config_template() -> str:
    """
    Create a configuration template with all available options

    Returns:
        JSON string template
    """
    return EngineConfig().model_dump_json(indent=2)
