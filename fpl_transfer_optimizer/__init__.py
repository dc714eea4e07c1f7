"""
FPL Transfer Optimizer Package

Transfer optimization engine for Fantasy Premier League squads. Projects
expected points (xP) from recent form and fixture difficulty, ranks the
weakest links in a 15-player squad, searches legal replacements under
budget, position and club-count rules, and turns the result into a
roll / single / hit / hold recommendation with a full reasoning trail.
"""

from fpl_transfer_optimizer.domain.services.transfer_optimization_service import (
    TransferOptimizationService,
)

__version__ = "1.0.0"

__all__ = ["TransferOptimizationService", "__version__"]
