"""
FPL Transfer Optimizer Configuration Module

Provides centralized configuration management for the whole engine.
Import the global config instance to access configuration values, or build
an EngineConfig and pass it to a service explicitly.

Usage:
    from fpl_transfer_optimizer.config import config

    # Access XP model configuration
    cs_points = config.xp_model.clean_sheet_points

    # Access hit rules
    transfer_cost = config.optimization.transfer_cost
"""

from .settings import (
    CacheConfig,
    CandidatePoolConfig,
    EngineConfig,
    ExpendabilityConfig,
    OptimizationConfig,
    XPModelConfig,
    config,
    load_config,
)

__all__ = [
    "EngineConfig",
    "XPModelConfig",
    "ExpendabilityConfig",
    "CandidatePoolConfig",
    "OptimizationConfig",
    "CacheConfig",
    "config",
    "load_config",
]
