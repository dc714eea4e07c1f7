"""Replacement search service: legal incoming players for an outgoing player."""

from typing import AbstractSet, Dict, List, Optional, Sequence

from fpl_transfer_optimizer.config import EngineConfig, config as default_config
from fpl_transfer_optimizer.domain.models.candidate import (
    CandidatePlayer,
    ReplacementOption,
)
from fpl_transfer_optimizer.domain.models.player import AvailabilityStatus
from fpl_transfer_optimizer.domain.models.squad import SquadDomain, SquadPick

DEFAULT_WHY_BEST = "Best available option by xP"


class ReplacementSearchService:
    """
    Finds and ranks legal replacements.

    A candidate is legal when it plays the outgoing player's position, is
    affordable from ``bank + sell price``, keeps its club at or under the
    club limit after the swap, and is neither owned nor excluded.

    Ranking is by projected xP over the horizon, highest first. Equal xP is
    broken by price, cheapest first, so the remaining bank is maximised.
    """

    def __init__(self, engine_config: Optional[EngineConfig] = None):
        self.engine_config = engine_config or default_config
        self.settings = self.engine_config.optimization

    @staticmethod
    def ranking_key(candidate: CandidatePlayer):
        """Sort key: higher xP first, then lower price."""
        return (-candidate.xp_over_horizon, candidate.now_cost)

    def is_legal(
        self,
        outgoing: SquadPick,
        candidate: CandidatePlayer,
        bank: int,
        club_counts: Dict[int, int],
        owned_ids: AbstractSet[int],
        excluded_player_ids: AbstractSet[int] = frozenset(),
    ) -> bool:
        if candidate.position != outgoing.position:
            return False
        if candidate.player_id in owned_ids or candidate.player_id in excluded_player_ids:
            return False
        if candidate.now_cost > bank + outgoing.sell_price:
            return False

        existing = club_counts.get(candidate.team_id, 0)
        if outgoing.team_id == candidate.team_id:
            existing -= 1
        return existing + 1 <= self.settings.max_players_per_club

    def legal_candidates(
        self,
        outgoing: SquadPick,
        pool: Sequence[CandidatePlayer],
        bank: int,
        club_counts: Dict[int, int],
        owned_ids: AbstractSet[int],
        excluded_player_ids: AbstractSet[int] = frozenset(),
    ) -> List[CandidatePlayer]:
        """Legal candidates against an explicit squad state, best first."""
        legal = [
            candidate
            for candidate in pool
            if self.is_legal(
                outgoing, candidate, bank, club_counts, owned_ids, excluded_player_ids
            )
        ]
        return sorted(legal, key=self.ranking_key)

    def find_replacements(
        self,
        outgoing: SquadPick,
        squad: SquadDomain,
        pool: Sequence[CandidatePlayer],
        bank: int,
        outgoing_xp: float,
        excluded_player_ids: AbstractSet[int] = frozenset(),
        limit: Optional[int] = None,
    ) -> List[ReplacementOption]:
        """
        Rank legal replacements for one squad player.

        Args:
            outgoing: Squad pick being sold
            squad: Current squad
            pool: Projected candidates
            bank: Money in the bank, tenths
            outgoing_xp: Outgoing player's xP over the horizon
            excluded_player_ids: Players that may not be bought
            limit: Keep only the best ``limit`` options

        Returns:
            Options best first; empty when nothing is legal
        """
        ranked = self.legal_candidates(
            outgoing,
            pool,
            bank,
            squad.club_counts(),
            set(squad.player_ids),
            excluded_player_ids,
        )
        if limit is not None:
            ranked = ranked[:limit]

        options = []
        for candidate in ranked:
            xp_gain = candidate.xp_over_horizon - outgoing_xp
            options.append(
                ReplacementOption(
                    candidate=candidate,
                    xp_gain=xp_gain,
                    remaining_bank=bank + outgoing.sell_price - candidate.now_cost,
                    why_best=self.why_best(candidate, xp_gain),
                    outgoing_player_id=outgoing.player_id,
                )
            )
        return options

    def why_best(self, candidate: CandidatePlayer, xp_gain: float) -> str:
        """Short explanation of what the incoming player offers."""
        player = candidate.player
        settings = self.settings
        reasons = []

        if xp_gain > 0:
            reasons.append(f"+{xp_gain:.1f} xP over {len(candidate.xp.gw_ids)} GWs")

        if player.form >= settings.excellent_form:
            reasons.append(f"Excellent form ({player.form})")
        elif player.form >= settings.good_form:
            reasons.append(f"Good form ({player.form})")

        if player.status == AvailabilityStatus.AVAILABLE.value and (
            player.chance_of_playing_next_round in (None, 100)
        ):
            reasons.append("Nailed starter")

        avg_fdr = candidate.xp.average_difficulty
        if avg_fdr is not None:
            if avg_fdr <= settings.great_fixtures_fdr:
                reasons.append(f"Great fixtures (avg FDR {avg_fdr:.1f})")
            elif avg_fdr <= settings.good_fixtures_fdr:
                reasons.append(f"Good fixtures (avg FDR {avg_fdr:.1f})")

        if -player.net_transfers_out > settings.high_demand_net_transfers:
            reasons.append("High transfer in demand")

        if player.points_per_million > settings.excellent_value_ppm:
            reasons.append("Excellent value")

        return "; ".join(reasons[: settings.max_why_best_reasons]) or DEFAULT_WHY_BEST
