"""Transfer optimization service: the engine's single entry point."""

import threading
from typing import Dict, Iterable, List, Optional, Sequence, Union

from loguru import logger
from pydantic import ValidationError

from fpl_transfer_optimizer.config import EngineConfig, config as default_config
from fpl_transfer_optimizer.domain.common.errors import EngineInputError
from fpl_transfer_optimizer.domain.models.expected_points import XPBreakdown
from fpl_transfer_optimizer.domain.models.expendability import ExpendabilityResult
from fpl_transfer_optimizer.domain.models.fixture import FixtureDomain
from fpl_transfer_optimizer.domain.models.player import PlayerDomain
from fpl_transfer_optimizer.domain.models.squad import (
    SQUAD_SIZE,
    Horizon,
    SquadDomain,
    SquadPick,
)
from fpl_transfer_optimizer.domain.models.team import TeamDomain
from fpl_transfer_optimizer.domain.models.transfer_plan import OptimizationSettings
from fpl_transfer_optimizer.domain.models.transfer_recommendation import (
    TransferRecommendation,
)
from fpl_transfer_optimizer.domain.repositories.cache_repository import (
    CacheRepository,
)
from fpl_transfer_optimizer.domain.services.candidate_pool_service import (
    CandidatePoolService,
)
from fpl_transfer_optimizer.domain.services.expected_points_service import (
    ExpectedPointsService,
)
from fpl_transfer_optimizer.domain.services.expendability_service import (
    ExpendabilityService,
)
from fpl_transfer_optimizer.domain.services.fixture_analysis_service import (
    FixtureDifficultyIndex,
)
from fpl_transfer_optimizer.domain.services.replacement_search_service import (
    ReplacementSearchService,
)
from fpl_transfer_optimizer.domain.services.scenario_evaluation_service import (
    ScenarioEvaluationService,
)

SquadInput = Union[SquadDomain, Sequence[SquadPick]]


def _field_errors(error: ValidationError) -> Dict[str, str]:
    return {
        ".".join(str(part) for part in err["loc"]) or "__root__": err["msg"]
        for err in error.errors()
    }


class TransferOptimizationService:
    """
    Runs the full pipeline for one manager.

    Validates inputs, builds the fixture index, scores the squad, builds
    the candidate pool and evaluates scenarios. Structural input problems
    raise ``EngineInputError`` before any scoring; sparse data and
    infeasible budgets never raise.
    """

    def __init__(
        self,
        engine_config: Optional[EngineConfig] = None,
        cache: Optional[CacheRepository] = None,
    ):
        """Initialize the service.

        Args:
            engine_config: Engine configuration (defaults to the global config)
            cache: Optional cache shared by projections and recommendations
        """
        self.engine_config = engine_config or default_config
        self.cache = cache if self.engine_config.cache.enabled else None

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def validate_horizon(gw_ids: Iterable[int]) -> Horizon:
        gw_ids = tuple(gw_ids)
        if not gw_ids:
            raise EngineInputError.misconfigured(
                "Empty gameweek horizon",
                field_errors={"horizon_gw_ids": "at least one gameweek is required"},
            )
        try:
            return Horizon(gw_ids=gw_ids)
        except ValidationError as e:
            raise EngineInputError.invalid(
                "Invalid gameweek horizon", field_errors=_field_errors(e)
            ) from e

    @staticmethod
    def validate_squad(squad: SquadInput) -> SquadDomain:
        if isinstance(squad, SquadDomain):
            return squad
        picks = list(squad)
        if len(picks) != SQUAD_SIZE:
            raise EngineInputError.misconfigured(
                "Invalid squad",
                field_errors={
                    "picks": f"expected {SQUAD_SIZE} players, got {len(picks)}"
                },
            )
        try:
            return SquadDomain(picks=picks)
        except ValidationError as e:
            raise EngineInputError.invalid(
                "Invalid squad", field_errors=_field_errors(e)
            ) from e

    @staticmethod
    def validate_funds(bank: int, free_transfers: int) -> None:
        field_errors = {}
        if bank < 0:
            field_errors["bank"] = f"must be >= 0, got {bank}"
        if free_transfers < 0:
            field_errors["free_transfers"] = f"must be >= 0, got {free_transfers}"
        if field_errors:
            raise EngineInputError.invalid(
                "Invalid bank or free transfers", field_errors=field_errors
            )

    # ------------------------------------------------------------------
    # Pipeline pieces
    # ------------------------------------------------------------------

    def _xp_service(
        self, fixtures: Iterable[FixtureDomain], teams: Iterable[TeamDomain]
    ) -> ExpectedPointsService:
        index = FixtureDifficultyIndex(fixtures, teams)
        return ExpectedPointsService(index, self.engine_config, self.cache)

    def project_players(
        self,
        players: Iterable[PlayerDomain],
        teams: Iterable[TeamDomain],
        fixtures: Iterable[FixtureDomain],
        gw_ids: Iterable[int],
    ) -> Dict[int, XPBreakdown]:
        """xP breakdowns keyed by player id, for display."""
        horizon = self.validate_horizon(gw_ids)
        xp_service = self._xp_service(fixtures, teams)
        return xp_service.project_many(list(players), horizon.gw_ids)

    def analyze_squad(
        self,
        squad: SquadInput,
        teams: Iterable[TeamDomain],
        fixtures: Iterable[FixtureDomain],
        gw_ids: Iterable[int],
        locked_player_ids: Iterable[int] = (),
    ) -> List[ExpendabilityResult]:
        """Weakest-link ranking of the squad without searching for transfers."""
        horizon = self.validate_horizon(gw_ids)
        squad = self.validate_squad(squad)
        xp_service = self._xp_service(fixtures, teams)
        return ExpendabilityService(xp_service, self.engine_config).score_squad(
            squad, horizon.gw_ids, frozenset(locked_player_ids)
        )

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def optimize_transfers(
        self,
        players: Sequence[PlayerDomain],
        teams: Sequence[TeamDomain],
        fixtures: Sequence[FixtureDomain],
        squad: SquadInput,
        bank: int,
        free_transfers: int,
        settings: OptimizationSettings,
        cancel_event: Optional[threading.Event] = None,
    ) -> TransferRecommendation:
        """Recommend the best transfer action for the coming horizon.

        Args:
            players: Every player in the game, in canonical form
            teams: All teams (used for opponent names)
            fixtures: All fixtures; finished and unscheduled ones are ignored
            squad: Current squad (15 picks)
            bank: Money in the bank, tenths of a million
            free_transfers: Free transfers available
            settings: Horizon, locks, exclusions and hit settings
            cancel_event: Optional event that stops outstanding projections

        Returns:
            TransferRecommendation

        Raises:
            EngineInputError: Empty/invalid horizon, invalid squad, negative
                bank or free transfers
        """
        horizon = self.validate_horizon(settings.horizon_gw_ids)
        squad = self.validate_squad(squad)
        self.validate_funds(bank, free_transfers)

        unknown_locks = set(settings.locked_player_ids) - set(squad.player_ids)
        if unknown_locks:
            logger.debug(f"🔒 Ignoring locks on players not in squad: {sorted(unknown_locks)}")

        players = list(players)
        teams = list(teams)
        fixtures = list(fixtures)
        xp_service = self._xp_service(fixtures, teams)

        cache_key = None
        if self.cache is not None:
            cache_key = (
                "recommendation",
                squad.fingerprint(),
                bank,
                free_transfers,
                settings.cache_key(),
                hash(tuple(players)),
                hash(tuple(teams)),
                xp_service.fixture_index.fingerprint,
                self.engine_config.model_dump_json(),
            )
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug("♻️ Returning cached recommendation")
                return cached

        logger.info(
            f"🚀 Optimising transfers over GW{horizon.gw_ids[0]}-GW{horizon.gw_ids[-1]} "
            f"(bank £{bank / 10:.1f}m, {free_transfers} FT)"
        )

        expendability = ExpendabilityService(xp_service, self.engine_config).score_squad(
            squad, horizon.gw_ids, settings.locked_player_ids
        )
        pool = CandidatePoolService(xp_service, self.engine_config).build_pool(
            players,
            set(squad.player_ids),
            settings.excluded_team_ids,
            settings.excluded_player_ids,
            horizon.gw_ids,
            cancel_event,
        )
        evaluator = ScenarioEvaluationService(
            ReplacementSearchService(self.engine_config), self.engine_config
        )
        recommendation = evaluator.evaluate(
            squad,
            expendability,
            pool,
            bank,
            free_transfers,
            settings.model_copy(update={"horizon_gw_ids": horizon.gw_ids}),
        )

        cancelled = cancel_event is not None and cancel_event.is_set()
        if cache_key is not None and not cancelled:
            self.cache.set(
                cache_key,
                recommendation,
                ttl=self.engine_config.cache.recommendation_ttl_seconds,
            )
        return recommendation
