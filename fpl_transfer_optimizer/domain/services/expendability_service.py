"""Expendability service: rank squad players by how replaceable they are."""

import math
from typing import AbstractSet, List, Optional, Sequence, Tuple

from loguru import logger

from fpl_transfer_optimizer.config import EngineConfig, config as default_config
from fpl_transfer_optimizer.domain.models.expected_points import XPBreakdown
from fpl_transfer_optimizer.domain.models.expendability import (
    ExpendabilityReason,
    ExpendabilityResult,
    ReasonCode,
)
from fpl_transfer_optimizer.domain.models.player import AvailabilityStatus
from fpl_transfer_optimizer.domain.models.squad import SquadDomain, SquadPick
from fpl_transfer_optimizer.domain.services.expected_points_service import (
    ExpectedPointsService,
)

UNAVAILABLE_STATUSES = {
    AvailabilityStatus.INJURED.value,
    AvailabilityStatus.UNAVAILABLE.value,
    AvailabilityStatus.NOT_IN_SQUAD.value,
}


class ExpendabilityService:
    """
    Scores each squad player 0-100 from independent additive signals.

    Signals: availability status, minutes reliability, projected output,
    fixture difficulty, blank gameweeks, form against season average and
    price-drop risk. Locked players are never ranked.
    """

    def __init__(
        self,
        xp_service: ExpectedPointsService,
        engine_config: Optional[EngineConfig] = None,
    ):
        self.xp_service = xp_service
        self.engine_config = engine_config or default_config
        self.settings = self.engine_config.expendability

    def _status_reasons(self, pick: SquadPick) -> List[ExpendabilityReason]:
        player = pick.player
        news = player.news
        if player.status in UNAVAILABLE_STATUSES:
            return [
                ExpendabilityReason.build(
                    ReasonCode.INJURED,
                    news or "Unavailable",
                    self.settings.injured_penalty,
                )
            ]
        if player.status == AvailabilityStatus.SUSPENDED.value:
            return [
                ExpendabilityReason.build(
                    ReasonCode.SUSPENDED,
                    news or "Suspended",
                    self.settings.suspended_penalty,
                )
            ]
        if player.status == AvailabilityStatus.DOUBTFUL.value:
            chance = player.chance_of_playing_next_round
            if chance is None:
                chance = self.settings.doubtful_default_chance
            penalty = round((100 - chance) * self.settings.doubtful_penalty_factor)
            return [
                ExpendabilityReason.build(
                    ReasonCode.DOUBTFUL,
                    f"{chance}% chance of playing - {news or 'Doubtful'}",
                    penalty,
                )
            ]
        return []

    def _minutes_reasons(self, x_mins: float) -> List[ExpendabilityReason]:
        if x_mins < self.settings.low_minutes_threshold:
            return [
                ExpendabilityReason.build(
                    ReasonCode.LOW_MINUTES,
                    f"Averaging only {round(x_mins)} mins per game",
                    self.settings.low_minutes_penalty,
                )
            ]
        if x_mins < self.settings.rotation_minutes_threshold:
            return [
                ExpendabilityReason.build(
                    ReasonCode.ROTATION_RISK,
                    f"Rotation risk - {round(x_mins)} mins average",
                    self.settings.rotation_penalty,
                )
            ]
        return []

    def _output_reasons(
        self, breakdown: XPBreakdown, gw_ids: Sequence[int]
    ) -> List[ExpendabilityReason]:
        reasons = []
        avg_xp = breakdown.average_per_gw
        if avg_xp < self.settings.low_xp_floor:
            penalty = round((self.settings.low_xp_floor - avg_xp) * self.settings.low_xp_factor)
            reasons.append(
                ExpendabilityReason.build(
                    ReasonCode.LOW_XP,
                    f"Only {avg_xp:.1f} xP/GW expected over next {len(gw_ids)} GWs",
                    penalty,
                )
            )

        avg_fdr = breakdown.average_difficulty
        if avg_fdr is not None and avg_fdr > self.settings.poor_fixture_threshold:
            penalty = round(
                (avg_fdr - self.settings.poor_fixture_baseline)
                * self.settings.poor_fixture_factor
            )
            reasons.append(
                ExpendabilityReason.build(
                    ReasonCode.POOR_FIXTURES,
                    f"Tough fixtures ahead (avg FDR {avg_fdr:.1f})",
                    penalty,
                )
            )

        blanks = breakdown.blank_gameweeks
        if blanks:
            reasons.append(
                ExpendabilityReason.build(
                    ReasonCode.BLANKS,
                    "Blank in " + ", ".join(f"GW{gw}" for gw in blanks),
                    len(blanks) * self.settings.blank_gameweek_penalty,
                )
            )
        return reasons

    def _market_reasons(self, pick: SquadPick) -> List[ExpendabilityReason]:
        player = pick.player
        reasons = []
        form, ppg = player.form, player.points_per_game
        if ppg > 0 and form < ppg * self.settings.declining_form_ratio:
            penalty = round((1 - form / ppg) * self.settings.declining_form_factor)
            reasons.append(
                ExpendabilityReason.build(
                    ReasonCode.DECLINING_FORM,
                    f"Form {form} vs season avg {ppg:.1f}",
                    penalty,
                )
            )

        net_out = player.net_transfers_out
        if net_out > self.settings.price_drop_net_transfers:
            reasons.append(
                ExpendabilityReason.build(
                    ReasonCode.PRICE_DROP,
                    f"{net_out / 1000:.0f}k net transfers out",
                    self.settings.price_drop_penalty,
                )
            )
        return reasons

    def assess_player(
        self, pick: SquadPick, gw_ids: Sequence[int]
    ) -> Tuple[float, List[ExpendabilityReason], XPBreakdown]:
        """
        Score one squad player.

        Returns:
            (score clamped to [0, max_score], reasons in priority order, xP breakdown)
        """
        breakdown = self.xp_service.project(pick.player, gw_ids)

        reasons = (
            self._status_reasons(pick)
            + self._minutes_reasons(breakdown.x_mins)
            + self._output_reasons(breakdown, gw_ids)
            + self._market_reasons(pick)
        )
        reasons.sort(key=lambda r: r.priority)

        if reasons:
            # max() keeps the first of equal impacts, i.e. the higher priority
            primary = max(reasons, key=lambda r: r.impact)
            reasons = [
                r.model_copy(update={"is_primary": r is primary}) for r in reasons
            ]

        score = min(self.settings.max_score, max(0.0, sum(r.impact for r in reasons)))
        return score, reasons, breakdown

    def score_squad(
        self,
        squad: SquadDomain,
        gw_ids: Sequence[int],
        locked_ids: AbstractSet[int] = frozenset(),
    ) -> List[ExpendabilityResult]:
        """
        Rank the squad from most to least expendable.

        Equal scores keep squad order (stable sort); that order carries no
        meaning beyond determinism. Locked players follow the ranked list
        with score 0, a single "Locked" reason and no rank.

        Args:
            squad: The manager's squad
            gw_ids: Horizon gameweeks
            locked_ids: Player ids that must not be transferred out

        Returns:
            Ranked unlocked results followed by locked results
        """
        ranked: List[ExpendabilityResult] = []
        locked: List[ExpendabilityResult] = []

        for pick in squad.picks:
            if pick.player_id in locked_ids:
                breakdown = self.xp_service.project(pick.player, gw_ids)
                locked.append(
                    ExpendabilityResult(
                        pick=pick,
                        score=0.0,
                        reasons=[
                            ExpendabilityReason.build(
                                ReasonCode.LOCKED, "Locked by manager", 0.0
                            ).model_copy(update={"is_primary": True})
                        ],
                        xp_over_horizon=breakdown.total,
                        avg_xp_per_gw=breakdown.average_per_gw,
                        x_mins=breakdown.x_mins,
                        average_difficulty=breakdown.average_difficulty,
                        blank_gameweeks=breakdown.blank_gameweeks,
                        is_locked=True,
                    )
                )
                continue

            score, reasons, breakdown = self.assess_player(pick, gw_ids)
            ranked.append(
                ExpendabilityResult(
                    pick=pick,
                    score=score,
                    reasons=reasons,
                    xp_over_horizon=breakdown.total,
                    avg_xp_per_gw=breakdown.average_per_gw,
                    x_mins=breakdown.x_mins,
                    average_difficulty=breakdown.average_difficulty,
                    blank_gameweeks=breakdown.blank_gameweeks,
                )
            )

        ranked.sort(key=lambda result: result.score, reverse=True)

        expendable_count = min(
            self.settings.max_expendable,
            math.ceil(len(squad.picks) * self.settings.expendable_share),
        )
        ranked = [
            result.model_copy(
                update={"rank": idx + 1, "is_expendable": idx < expendable_count}
            )
            for idx, result in enumerate(ranked)
        ]

        if ranked:
            top = ranked[0]
            logger.debug(
                f"🔍 Weakest link: {top.player.web_name} (score {top.score:.0f}), "
                f"{len(locked)} locked"
            )
        return ranked + locked
