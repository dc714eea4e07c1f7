"""Domain services: one service per engine component."""

from .candidate_pool_service import CandidatePoolService
from .expected_points_service import ExpectedPointsService
from .expendability_service import ExpendabilityService
from .fixture_analysis_service import FixtureDifficultyIndex
from .replacement_search_service import ReplacementSearchService
from .scenario_evaluation_service import ScenarioEvaluationService
from .transfer_optimization_service import TransferOptimizationService

__all__ = [
    "CandidatePoolService",
    "ExpectedPointsService",
    "ExpendabilityService",
    "FixtureDifficultyIndex",
    "ReplacementSearchService",
    "ScenarioEvaluationService",
    "TransferOptimizationService",
]
