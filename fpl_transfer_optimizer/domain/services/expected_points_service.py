"""
Expected Points (xP) projection service.

Rule-based projection over a gameweek horizon. Each fixture contributes four
components:

- appearance: 0 -> 1 point ramp up to 60 minutes, then 1 -> 2 up to 90
- attack: xGI per 90 x minutes share x position points, adjusted for FDR and venue
- clean sheet: FDR/venue probability x position points, zero below 60 minutes
- bonus: soft-capped function of BPS per 90

A blank gameweek contributes zero; a double gameweek sums both fixtures.
"""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, Optional, Sequence, Set

import numpy as np
from loguru import logger

from fpl_transfer_optimizer.config import EngineConfig, config as default_config
from fpl_transfer_optimizer.domain.models.expected_points import (
    GameweekXP,
    MinutesBadge,
    TeamFixture,
    XPBreakdown,
    XPComponents,
)
from fpl_transfer_optimizer.domain.models.player import PlayerDomain
from fpl_transfer_optimizer.domain.repositories.cache_repository import (
    CacheRepository,
)
from fpl_transfer_optimizer.domain.services.fixture_analysis_service import (
    FixtureDifficultyIndex,
)


class ExpectedPointsService:
    """Projects player xP over a horizon using a fixture index."""

    def __init__(
        self,
        fixture_index: FixtureDifficultyIndex,
        engine_config: Optional[EngineConfig] = None,
        cache: Optional[CacheRepository] = None,
    ):
        self.fixture_index = fixture_index
        self.engine_config = engine_config or default_config
        self.settings = self.engine_config.xp_model
        self.cache = cache if self.engine_config.cache.enabled else None
        self._settings_fingerprint = self.settings.model_dump_json()
        self._flagged_statuses: Set[str] = set()
        self._flag_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Minutes
    # ------------------------------------------------------------------

    def status_multiplier(self, player: PlayerDomain) -> float:
        """
        Expected-minutes multiplier for the player's availability code.

        Unrecognised codes get ``unknown_status_multiplier`` (1.0 by default,
        no penalty) and are reported once per code as a data-quality warning.
        """
        multipliers = self.settings.status_minutes_multipliers
        if player.status in multipliers:
            return multipliers[player.status]

        with self._flag_lock:
            first_sighting = player.status not in self._flagged_statuses
            self._flagged_statuses.add(player.status)
        if first_sighting:
            logger.warning(
                f"⚠️ Unknown status code '{player.status}' for {player.web_name} "
                f"({player.player_id}); applying multiplier {self.settings.unknown_status_multiplier}"
            )
        return self.settings.unknown_status_multiplier

    def estimate_expected_minutes(self, player: PlayerDomain) -> float:
        """Recent average minutes scaled by availability, clipped to [0, max_minutes]."""
        recent = player.recent
        if recent is None or not recent.has_history:
            average_minutes = self.settings.default_average_minutes
        else:
            average_minutes = recent.average_minutes

        x_mins = average_minutes * self.status_multiplier(player)
        return float(np.clip(x_mins, 0.0, self.settings.max_minutes))

    def minutes_badge(self, x_mins: float) -> MinutesBadge:
        full_match = self.settings.full_match_minutes
        if x_mins >= self.settings.nailed_minutes_share * full_match:
            return MinutesBadge.NAILED
        if x_mins >= self.settings.risk_minutes_share * full_match:
            return MinutesBadge.RISK
        return MinutesBadge.CAMEO

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def appearance_points(self, x_mins: float) -> float:
        threshold = self.settings.appearance_threshold_minutes
        full_match = self.settings.full_match_minutes
        if x_mins <= 0:
            return 0.0
        if x_mins < threshold:
            return x_mins / threshold
        return 1.0 + (min(x_mins, full_match) - threshold) / (full_match - threshold)

    def clean_sheet_probability(self, fixture: TeamFixture) -> float:
        base = self.settings.clean_sheet_base_probability.get(
            fixture.difficulty, self.settings.clean_sheet_default_probability
        )
        venue = self.settings.clean_sheet_home_bonus
        probability = base + venue if fixture.is_home else base - venue
        return float(
            np.clip(
                probability,
                self.settings.clean_sheet_min_probability,
                self.settings.clean_sheet_max_probability,
            )
        )

    def _rates(self, player: PlayerDomain) -> tuple:
        """xGI and BPS per 90, from recent games when they have minutes."""
        recent = player.recent
        if recent is not None and recent.minutes > 0:
            return recent.xgi_per_90, recent.bps_per_90
        return player.season_xgi_per_90, player.season_bps_per_90

    def fixture_components(
        self, player: PlayerDomain, x_mins: float, fixture: TeamFixture
    ) -> XPComponents:
        """xP components for one fixture."""
        position = player.position.value
        minutes_share = x_mins / self.settings.full_match_minutes
        xgi_per_90, bps_per_90 = self._rates(player)

        fdr_multiplier = self.settings.fdr_attack_multipliers.get(fixture.difficulty, 1.0)
        venue_multiplier = (
            self.settings.home_attack_multiplier
            if fixture.is_home
            else self.settings.away_attack_multiplier
        )
        attack = (
            xgi_per_90
            * minutes_share
            * self.settings.attack_points_per_involvement[position]
            * fdr_multiplier
            * venue_multiplier
        )

        clean_sheet = 0.0
        if x_mins >= self.settings.appearance_threshold_minutes:
            clean_sheet = (
                self.clean_sheet_probability(fixture)
                * self.settings.clean_sheet_points[position]
            )

        bonus = (
            self.settings.bonus_cap
            * (1.0 - float(np.exp(-max(bps_per_90, 0.0) / self.settings.bonus_bps_scale)))
            * min(minutes_share, 1.0)
        )

        return XPComponents(
            appearance=self.appearance_points(x_mins),
            attack=attack,
            clean_sheet=clean_sheet,
            bonus=bonus,
        )

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def _cache_key(self, player: PlayerDomain, gw_ids: Sequence[int]) -> tuple:
        return (
            "xp",
            player,
            tuple(gw_ids),
            self.fixture_index.fingerprint,
            self._settings_fingerprint,
        )

    def _compute(self, player: PlayerDomain, gw_ids: Sequence[int]) -> XPBreakdown:
        x_mins = self.estimate_expected_minutes(player)
        per_gw = []
        components = XPComponents()

        for gw in gw_ids:
            fixtures = self.fixture_index.fixtures_in_gameweek(player.team_id, gw)
            gw_components = XPComponents()
            for fixture in fixtures:
                gw_components = gw_components.plus(
                    self.fixture_components(player, x_mins, fixture)
                )
            per_gw.append(
                GameweekXP(
                    gw=gw,
                    xp=gw_components.total,
                    components=gw_components,
                    fixtures=fixtures,
                )
            )
            components = components.plus(gw_components)

        return XPBreakdown(
            player_id=player.player_id,
            gw_ids=tuple(gw_ids),
            total=sum(gw.xp for gw in per_gw),
            per_gw=per_gw,
            components=components,
            x_mins=x_mins,
            minutes_badge=self.minutes_badge(x_mins),
        )

    def project(self, player: PlayerDomain, gw_ids: Sequence[int]) -> XPBreakdown:
        """
        Project a player's xP over ``gw_ids``.

        Args:
            player: Player to project
            gw_ids: Gameweeks in horizon order (an empty horizon gives total 0)

        Returns:
            XPBreakdown with per-gameweek and per-component detail
        """
        if self.cache is None:
            return self._compute(player, gw_ids)

        key = self._cache_key(player, gw_ids)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        breakdown = self._compute(player, gw_ids)
        self.cache.set(key, breakdown, ttl=self.engine_config.cache.xp_ttl_seconds)
        return breakdown

    xp = project

    def project_many(
        self,
        players: Iterable[PlayerDomain],
        gw_ids: Sequence[int],
        cancel_event: Optional[threading.Event] = None,
    ) -> Dict[int, XPBreakdown]:
        """
        Project many players with bounded concurrency.

        Cache hits are resolved on the calling thread and only misses are
        submitted to the worker pool. A projection that raises is logged and
        its player left out of the result. Setting ``cancel_event`` stops
        waiting for outstanding work and returns what has completed.

        Returns:
            Mapping of player id to XPBreakdown
        """
        results: Dict[int, XPBreakdown] = {}
        pending = []
        for player in players:
            if self.cache is not None:
                cached = self.cache.get(self._cache_key(player, gw_ids))
                if cached is not None:
                    results[player.player_id] = cached
                    continue
            pending.append(player)

        if not pending or (cancel_event is not None and cancel_event.is_set()):
            return results

        max_workers = self.engine_config.candidate_pool.max_concurrent_projections
        logger.debug(
            f"⚙️ Projecting {len(pending)} players ({len(results)} cached) with {max_workers} workers"
        )

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(self._compute, player, gw_ids): player
                for player in pending
            }
            for future in as_completed(futures):
                if cancel_event is not None and cancel_event.is_set():
                    cancelled = sum(1 for f in futures if f.cancel())
                    logger.info(
                        f"🛑 Projection cancelled, {cancelled} outstanding projections dropped"
                    )
                    break

                player = futures[future]
                try:
                    breakdown = future.result()
                except Exception as e:
                    logger.warning(
                        f"⚠️ Projection failed for {player.web_name} ({player.player_id}): {e}"
                    )
                    continue

                results[player.player_id] = breakdown
                if self.cache is not None:
                    self.cache.set(
                        self._cache_key(player, gw_ids),
                        breakdown,
                        ttl=self.engine_config.cache.xp_ttl_seconds,
                    )

        return results
