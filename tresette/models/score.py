"""Deal and match scoring for teams."""

import logging
import math
from collections.abc import Iterable, Mapping

from tresette.constants import CAPPOTTO_SCORE, LAST_TRICK_BONUS, ROUND_UP_THRESHOLD
from tresette.models.team import Team

logger = logging.getLogger(__name__)


class ScoreCalculator:
    """Stateless helpers for the deal scoring pipeline."""

    def raw_team_points(self, teams: Iterable[Team]) -> dict[str, float]:
        """Compute raw fractional points per team id for the current deal."""
        return {team.id: team.current_deal_raw_points() for team in teams}

    def round_raw_points(self, raw: Mapping[str, float]) -> dict[str, int]:
        """Round raw points to integers.

        The value is floored, then bumped by one when the fractional part is
        at least 0.9.
        """
        rounded: dict[str, int] = {}
        for team_id, value in raw.items():
            base = math.floor(value)
            if value - base >= ROUND_UP_THRESHOLD:
                base += 1
            rounded[team_id] = base
        return rounded

    def apply_winner_bonus(self, deal_points: dict[str, int], winner_id: str | None) -> None:
        """Add the last-trick bonus to the winner entry in place."""
        if winner_id is None:
            return
        deal_points[winner_id] = deal_points.get(winner_id, 0) + LAST_TRICK_BONUS

    def apply_cappotto(self, deal_points: dict[str, int]) -> None:
        """Apply the cappotto rule in place.

        When a team scored zero, every other team gets the cappotto score
        regardless of its computed points.
        """
        if not any(points == 0 for points in deal_points.values()):
            return
        for team_id, points in deal_points.items():
            if points != 0:
                deal_points[team_id] = CAPPOTTO_SCORE


class ScoreManager:
    """Keeps running team scores and detects the match winner.

    Attributes:
        winning_score_target: Points needed to win the match

    """

    def __init__(self, participant_ids: Iterable[str], winning_score_target: int) -> None:
        """Initialize all participants at zero."""
        self._game_scores: dict[str, int] = dict.fromkeys(participant_ids, 0)
        self._last_deal_points: dict[str, int] = {}
        self._last_deal_winner_id: str | None = None
        self._final_winner_ids: list[str] = []
        self._calculator = ScoreCalculator()
        self.winning_score_target = winning_score_target

    def update_team_game_scores(
        self, teams: Iterable[Team], last_trick_winner_id: str | None
    ) -> dict[str, int]:
        """Score the finished deal and add it to the running totals.

        Pipeline: raw points, rounding, last-trick bonus, cappotto, snapshot,
        accumulation.

        Args:
            teams: Teams taking part in the deal
            last_trick_winner_id: Id of the team that took the last trick

        Returns:
            Deal points per team id

        """
        raw = self._calculator.raw_team_points(teams)
        deal_points = self._calculator.round_raw_points(raw)
        self._calculator.apply_winner_bonus(deal_points, last_trick_winner_id)
        self._last_deal_winner_id = last_trick_winner_id
        self._calculator.apply_cappotto(deal_points)

        self._last_deal_points = dict(deal_points)
        self._accumulate(deal_points)
        logger.info("Deal scored: raw=%s deal=%s total=%s", raw, deal_points, self._game_scores)
        return deal_points

    def _accumulate(self, deal_points: Mapping[str, int]) -> None:
        for team_id, points in deal_points.items():
            self._game_scores[team_id] = self._game_scores.get(team_id, 0) + points

    def check_for_game_winner(self) -> bool:
        """Check whether the target has been reached.

        All participants tied at the highest score are recorded as winners.
        """
        if not self._game_scores:
            return False
        best = max(self._game_scores.values())
        if best < self.winning_score_target:
            return False
        self._final_winner_ids = [
            team_id for team_id, score in self._game_scores.items() if score == best
        ]
        return True

    def get_score(self, participant_id: str) -> int:
        """Get the running score of one participant."""
        return self._game_scores.get(participant_id, 0)

    def get_all_scores(self) -> dict[str, int]:
        """Get a copy of the running scores."""
        return dict(self._game_scores)

    def get_last_deal_points(self) -> dict[str, int]:
        """Get a copy of the last deal's points."""
        return dict(self._last_deal_points)

    @property
    def last_deal_winner_id(self) -> str | None:
        """Team that took the last trick of the last scored deal."""
        return self._last_deal_winner_id

    @property
    def final_winner_ids(self) -> list[str]:
        """Winners recorded by :meth:`check_for_game_winner`."""
        return list(self._final_winner_ids)
