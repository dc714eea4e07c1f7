"""Candidate pool service: shortlist incoming players and project their xP."""

import threading
from typing import AbstractSet, Iterable, List, Optional, Sequence

import pandas as pd
from loguru import logger

from fpl_transfer_optimizer.config import EngineConfig, config as default_config
from fpl_transfer_optimizer.domain.models.candidate import CandidatePlayer
from fpl_transfer_optimizer.domain.models.player import PlayerDomain
from fpl_transfer_optimizer.domain.services.expected_points_service import (
    ExpectedPointsService,
)


class CandidatePoolService:
    """
    Builds the pool of players the engine may bring in.

    Filtering removes squad members, excluded teams and players, and players
    whose status makes them unusable. Survivors are pre-ranked by a cheap
    composite of form, threat and creativity and only the top
    ``per_position_limit`` per position are projected. The optimum can fall
    outside that shortlist; raising the limit trades runtime for coverage.
    """

    def __init__(
        self,
        xp_service: ExpectedPointsService,
        engine_config: Optional[EngineConfig] = None,
    ):
        self.xp_service = xp_service
        self.engine_config = engine_config or default_config
        self.settings = self.engine_config.candidate_pool

    def _eligible(
        self,
        players: Iterable[PlayerDomain],
        squad_ids: AbstractSet[int],
        excluded_team_ids: AbstractSet[int],
        excluded_player_ids: AbstractSet[int],
    ) -> List[PlayerDomain]:
        unusable = set(self.settings.unusable_statuses)
        return [
            player
            for player in players
            if player.player_id not in squad_ids
            and player.player_id not in excluded_player_ids
            and player.team_id not in excluded_team_ids
            and player.status not in unusable
        ]

    def shortlist(self, players: Sequence[PlayerDomain]) -> pd.DataFrame:
        """
        Pre-rank players and keep the top N per position.

        Returns:
            DataFrame with player_id, position and pre_rank_score, best first
            within each position (ties keep input order)
        """
        if not players:
            return pd.DataFrame(columns=["player_id", "position", "pre_rank_score"])

        df = pd.DataFrame(
            {
                "player_id": [p.player_id for p in players],
                "position": [p.position.value for p in players],
                "form": [p.form for p in players],
                "threat": [p.threat for p in players],
                "creativity": [p.creativity for p in players],
            }
        )
        df["pre_rank_score"] = (
            df["form"] * self.settings.form_weight
            + df["threat"] / self.settings.threat_divisor
            + df["creativity"] / self.settings.creativity_divisor
        )

        ranked = df.sort_values("pre_rank_score", ascending=False, kind="mergesort")
        shortlisted = ranked.groupby("position", sort=False).head(
            self.settings.per_position_limit
        )
        return shortlisted[["player_id", "position", "pre_rank_score"]].reset_index(
            drop=True
        )

    def build_pool(
        self,
        all_players: Iterable[PlayerDomain],
        squad_ids: AbstractSet[int],
        excluded_team_ids: AbstractSet[int],
        excluded_player_ids: AbstractSet[int],
        gw_ids: Sequence[int],
        cancel_event: Optional[threading.Event] = None,
    ) -> List[CandidatePlayer]:
        """
        Filter, shortlist and project candidates.

        Args:
            all_players: Every player in the game
            squad_ids: Ids already owned
            excluded_team_ids: Clubs the manager will not buy from
            excluded_player_ids: Players the manager will not buy
            gw_ids: Horizon gameweeks
            cancel_event: Optional event that stops outstanding projections

        Returns:
            Projected candidates in shortlist order. Players whose projection
            failed or was cancelled are absent.
        """
        all_players = list(all_players)
        eligible = self._eligible(
            all_players, squad_ids, excluded_team_ids, excluded_player_ids
        )
        shortlist = self.shortlist(eligible)

        by_id = {player.player_id: player for player in eligible}
        chosen = [by_id[int(pid)] for pid in shortlist["player_id"]]
        scores = dict(zip(shortlist["player_id"].astype(int), shortlist["pre_rank_score"]))

        projections = self.xp_service.project_many(chosen, gw_ids, cancel_event)

        pool = [
            CandidatePlayer(
                player=player,
                xp=projections[player.player_id],
                pre_rank_score=float(scores[player.player_id]),
            )
            for player in chosen
            if player.player_id in projections
        ]
        logger.info(
            f"🧮 Candidate pool: {len(pool)} projected from {len(eligible)} eligible "
            f"of {len(all_players)} players"
        )
        return pool
