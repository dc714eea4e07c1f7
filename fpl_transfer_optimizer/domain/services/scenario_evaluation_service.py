"""
Scenario evaluation service.

Compares candidate actions against doing nothing and picks one of four
outcomes:

- ROLL: no transfer, free transfers remain and roll over
- SINGLE: one transfer covered by a free transfer
- HIT: transfers beyond the free allowance, each costing ``transfer_cost``
- HOLD: no transfer with zero free transfers

A free single is recommended only when its gain exceeds
``min_gain_threshold``. A hit must beat ``hits x (transfer_cost +
hit_safety_margin)`` in gross gain (a -4 needs more than +6, a -8 more than
+12); a run's ``hit_threshold`` replaces the margin but never the cost.
Nothing clearing its bar is not an error: the result degrades to ROLL or
HOLD.
"""

from itertools import combinations
from typing import Dict, List, Optional, Sequence, Set, Tuple

from loguru import logger

from fpl_transfer_optimizer.config import EngineConfig, config as default_config
from fpl_transfer_optimizer.domain.models.candidate import CandidatePlayer
from fpl_transfer_optimizer.domain.models.expendability import ExpendabilityResult
from fpl_transfer_optimizer.domain.models.squad import SquadDomain
from fpl_transfer_optimizer.domain.models.transfer_plan import (
    OptimizationSettings,
    Transfer,
)
from fpl_transfer_optimizer.domain.models.transfer_recommendation import (
    RecommendationOutcome,
    ScenarioType,
    TransferRecommendation,
    TransferScenario,
)
from fpl_transfer_optimizer.domain.services.replacement_search_service import (
    ReplacementSearchService,
)


class ScenarioEvaluationService:
    """Generates and ranks roll, single and hit scenarios."""

    def __init__(
        self,
        replacement_service: Optional[ReplacementSearchService] = None,
        engine_config: Optional[EngineConfig] = None,
    ):
        self.engine_config = engine_config or default_config
        self.settings = self.engine_config.optimization
        self.replacement_service = replacement_service or ReplacementSearchService(
            self.engine_config
        )

    def _free_transfers_after(self, free_transfers: int, used: int) -> int:
        return min(self.settings.max_free_transfers, max(free_transfers - used, 0) + 1)

    def baseline_scenario(self, free_transfers: int, bank: int) -> TransferScenario:
        """ROLL when free transfers remain, otherwise HOLD."""
        ft_after = self._free_transfers_after(free_transfers, 0)
        if free_transfers > 0:
            description = (
                f"Bank {free_transfers} FTs for next GW"
                if free_transfers >= 2
                else "Save FT for next week"
            )
            return TransferScenario(
                scenario_type=ScenarioType.ROLL,
                remaining_budget=bank,
                free_transfers_after=ft_after,
                description=description,
                reasoning=(
                    "Already have multiple FTs banked"
                    if free_transfers >= 2
                    else "No compelling transfers available"
                ),
                clears_bar=True,
            )
        return TransferScenario(
            scenario_type=ScenarioType.HOLD,
            remaining_budget=bank,
            free_transfers_after=ft_after,
            description="Hold: no free transfers and no move worth a hit",
            reasoning="No transfer clears the hit bar",
            clears_bar=True,
        )

    @staticmethod
    def _build_transfer(
        out_result: ExpendabilityResult, candidate: CandidatePlayer, why_best: str
    ) -> Transfer:
        pick = out_result.pick
        primary = out_result.primary_reason
        return Transfer(
            player_out_id=pick.player_id,
            player_in_id=candidate.player_id,
            player_out_name=pick.player.web_name,
            player_in_name=candidate.player.web_name,
            position=pick.position,
            cost=candidate.now_cost - pick.sell_price,
            out_xp=out_result.xp_over_horizon,
            in_xp=candidate.xp_over_horizon,
            why_best=why_best,
            out_reason=primary.label if primary else None,
        )

    @staticmethod
    def _reasoning(transfers: Sequence[Transfer]) -> str:
        parts = []
        for transfer in transfers:
            out_reason = f" ({transfer.out_reason})" if transfer.out_reason else ""
            parts.append(
                f"{transfer.player_out_name}{out_reason} -> {transfer.player_in_name}: "
                f"{transfer.why_best}"
            )
        return " | ".join(parts)

    def _scenario(
        self,
        transfers: List[Transfer],
        free_transfers: int,
        remaining_budget: int,
        hit_margin: float,
        allow_hits: bool,
    ) -> TransferScenario:
        """Price a set of transfers against the free allowance and its bar."""
        gross_gain = sum(t.xp_gain for t in transfers)
        num_hits = max(len(transfers) - free_transfers, 0)

        if num_hits == 0:
            scenario_type = ScenarioType.SINGLE
            gain_bar = self.settings.min_gain_threshold
            hit_penalty = 0.0
            net_gain = gross_gain
            clears_bar = net_gain > gain_bar
            description = (
                f"Transfer out {transfers[0].player_out_name}, "
                f"bring in {transfers[0].player_in_name}"
            )
        else:
            scenario_type = ScenarioType.HIT
            gain_bar = num_hits * (self.settings.transfer_cost + hit_margin)
            hit_penalty = num_hits * self.settings.transfer_cost
            net_gain = gross_gain - hit_penalty
            clears_bar = allow_hits and gross_gain > gain_bar
            description = f"Take -{hit_penalty:g} hit for {gross_gain:.1f} xP gain"

        return TransferScenario(
            scenario_type=scenario_type,
            transfers=transfers,
            gross_gain=gross_gain,
            num_hits=num_hits,
            hit_penalty=hit_penalty,
            net_gain=net_gain,
            gain_bar=gain_bar,
            clears_bar=clears_bar,
            remaining_budget=remaining_budget,
            free_transfers_after=self._free_transfers_after(
                free_transfers, len(transfers)
            ),
            description=description,
            reasoning=self._reasoning(transfers),
        )

    def single_scenarios(
        self,
        squad: SquadDomain,
        out_candidates: Sequence[ExpendabilityResult],
        pool: Sequence[CandidatePlayer],
        bank: int,
        free_transfers: int,
        excluded_player_ids: Set[int],
        hit_margin: float,
        allow_hits: bool,
    ) -> List[TransferScenario]:
        scenarios = []
        for out_result in out_candidates[: self.settings.single_out_candidates]:
            options = self.replacement_service.find_replacements(
                out_result.pick,
                squad,
                pool,
                bank,
                out_result.xp_over_horizon,
                excluded_player_ids=excluded_player_ids,
                limit=self.settings.replacements_per_out,
            )
            for option in options:
                transfer = self._build_transfer(
                    out_result, option.candidate, option.why_best
                )
                scenarios.append(
                    self._scenario(
                        [transfer],
                        free_transfers,
                        option.remaining_bank,
                        hit_margin,
                        allow_hits,
                    )
                )
        return scenarios

    def _complete_combination(
        self,
        outs: Tuple[ExpendabilityResult, ...],
        first_in: CandidatePlayer,
        pool: Sequence[CandidatePlayer],
        budget: int,
        base_counts: Dict[int, int],
        owned_ids: Set[int],
        excluded_player_ids: Set[int],
    ) -> Optional[Tuple[List[Transfer], int]]:
        """Fill the remaining legs greedily with the best legal player each."""
        chosen = [first_in]
        remaining = budget - first_in.now_cost
        counts = dict(base_counts)
        counts[first_in.team_id] = counts.get(first_in.team_id, 0) + 1
        owned = owned_ids | {first_in.player_id}

        for out_result in outs[1:]:
            pick = out_result.pick
            # is_legal discounts the outgoing player's own club slot
            leg_counts = dict(counts)
            leg_counts[pick.team_id] = leg_counts.get(pick.team_id, 0) + 1
            legal = self.replacement_service.legal_candidates(
                pick,
                pool,
                remaining - pick.sell_price,
                leg_counts,
                owned,
                excluded_player_ids,
            )
            if not legal:
                return None
            best = legal[0]
            chosen.append(best)
            remaining -= best.now_cost
            counts[best.team_id] = counts.get(best.team_id, 0) + 1
            owned = owned | {best.player_id}

        transfers = [
            self._build_transfer(
                out_result,
                candidate,
                self.replacement_service.why_best(
                    candidate, candidate.xp_over_horizon - out_result.xp_over_horizon
                ),
            )
            for out_result, candidate in zip(outs, chosen)
        ]
        return transfers, remaining

    def multi_transfer_scenarios(
        self,
        squad: SquadDomain,
        out_candidates: Sequence[ExpendabilityResult],
        pool: Sequence[CandidatePlayer],
        bank: int,
        free_transfers: int,
        excluded_player_ids: Set[int],
        hit_margin: float,
    ) -> List[TransferScenario]:
        """
        Combinations of two or more transfers that cost at least one hit.

        Sales are pooled: the budget is the bank plus every outgoing sell
        price, and every outgoing club slot is freed before buying. The first
        leg tries the top few legal players; later legs take the best one
        still legal.
        """
        scenarios = []
        outs_pool = list(out_candidates[: self.settings.multi_out_candidates])
        owned_ids = set(squad.player_ids)
        squad_counts = squad.club_counts()

        for size in range(2, self.settings.max_transfers + 1):
            if size <= free_transfers:
                continue
            for outs in combinations(outs_pool, size):
                budget = bank + sum(result.pick.sell_price for result in outs)
                base_counts = dict(squad_counts)
                for result in outs:
                    base_counts[result.pick.team_id] -= 1

                first = outs[0].pick
                first_counts = dict(base_counts)
                first_counts[first.team_id] += 1
                first_leg = self.replacement_service.legal_candidates(
                    first,
                    pool,
                    budget - first.sell_price,
                    first_counts,
                    owned_ids,
                    excluded_player_ids,
                )[: self.settings.multi_first_leg_candidates]

                for first_in in first_leg:
                    completed = self._complete_combination(
                        outs,
                        first_in,
                        pool,
                        budget,
                        base_counts,
                        owned_ids,
                        excluded_player_ids,
                    )
                    if completed is None:
                        continue
                    transfers, remaining = completed
                    scenarios.append(
                        self._scenario(
                            transfers, free_transfers, remaining, hit_margin, True
                        )
                    )
        return scenarios

    def evaluate(
        self,
        squad: SquadDomain,
        expendability: Sequence[ExpendabilityResult],
        pool: Sequence[CandidatePlayer],
        bank: int,
        free_transfers: int,
        settings: OptimizationSettings,
    ) -> TransferRecommendation:
        """
        Pick the best scenario that clears its bar.

        Args:
            squad: Current squad
            expendability: Output of ``ExpendabilityService.score_squad``
            pool: Projected candidates
            bank: Money in the bank, tenths
            free_transfers: Free transfers available this gameweek
            settings: Per-run settings

        Returns:
            TransferRecommendation; ROLL or HOLD when nothing clears its bar
        """
        hit_margin = (
            settings.hit_threshold
            if settings.hit_threshold is not None
            else self.settings.hit_safety_margin
        )
        allow_hits = (
            settings.allow_hits
            if settings.allow_hits is not None
            else self.settings.allow_hits
        )
        excluded_player_ids = set(settings.excluded_player_ids)

        starter_ids = {pick.player_id for pick in squad.starters}
        do_nothing_xp = sum(
            result.xp_over_horizon
            for result in expendability
            if result.pick.player_id in starter_ids
        )

        out_candidates = [
            result
            for result in expendability
            if result.is_expendable and not result.is_locked
        ]

        baseline = self.baseline_scenario(free_transfers, bank)
        singles = self.single_scenarios(
            squad,
            out_candidates,
            pool,
            bank,
            free_transfers,
            excluded_player_ids,
            hit_margin,
            allow_hits,
        )
        multis = []
        if allow_hits:
            multis = self.multi_transfer_scenarios(
                squad,
                out_candidates,
                pool,
                bank,
                free_transfers,
                excluded_player_ids,
                hit_margin,
            )

        def by_net_gain(scenario: TransferScenario):
            return (-scenario.net_gain, scenario.num_transfers)

        singles_ranked = sorted(singles, key=by_net_gain)
        cleared = sorted(
            [s for s in singles + multis if s.clears_bar], key=by_net_gain
        )
        hit_options = [s for s in cleared if s.scenario_type == ScenarioType.HIT]

        if cleared:
            best = cleared[0]
            outcome = RecommendationOutcome.TRANSFER_RECOMMENDED
            action_reason = (
                f"{best.description}: net {best.net_gain:+.1f} xP "
                f"(bar {best.gain_bar:.1f})"
            )
        else:
            best = baseline
            if singles or multis:
                outcome = RecommendationOutcome.NO_GAIN_ABOVE_THRESHOLD
                top = sorted(singles + multis, key=by_net_gain)[0]
                action_reason = (
                    f"Best move {top.description} nets {top.net_gain:+.1f} xP, "
                    f"below its bar of {top.gain_bar:.1f}"
                )
            else:
                outcome = RecommendationOutcome.NO_VALID_TRANSFER
                action_reason = "No legal replacement within budget and club limits"

        logger.info(
            f"🎯 Recommendation: {best.scenario_type.value.upper()} "
            f"({len(singles)} singles, {len(multis)} multi-transfer scenarios)"
        )

        return TransferRecommendation(
            action=best.scenario_type,
            outcome=outcome,
            action_reason=action_reason,
            best=best,
            baseline=baseline,
            single_options=singles_ranked[: self.settings.single_display_limit],
            hit_options=hit_options[: self.settings.hit_display_limit],
            do_nothing_xp=do_nothing_xp,
            free_transfers=free_transfers,
            bank=bank,
            horizon_gw_ids=tuple(settings.horizon_gw_ids),
            weakest_links=list(expendability),
        )
