"""Match coordinator: runs consecutive deals and keeps the score."""

import logging
import random
from collections.abc import Callable, Sequence
from typing import Any

from tresette.constants import NUM_PLAYERS, TEAM_1, TEAM_2, WINNING_SCORE_21
from tresette.models.card import Card
from tresette.models.deal import Deal, Deal2v2
from tresette.models.events import (
    DealEnded,
    DealSnapshot,
    GameEnded,
    ModelEvent,
    ScoresUpdated,
    frozen_scores,
)
from tresette.models.player import Player
from tresette.models.score import ScoreManager
from tresette.models.sign import SignEvent, SignType
from tresette.models.team import Team

logger = logging.getLogger(__name__)

GameListener = Callable[[ModelEvent], None]


class GameManager:
    """Coordinates a match of 2v2 deals up to the winning score.

    Seat 0 is the human. Seats 0 and 2 form Team1, seats 1 and 3 Team2.
    Every deal event is forwarded to the manager's listeners; a finished
    deal is scored before its DealEnded event is forwarded, and the
    ScoresUpdated (and GameEnded) events follow it.
    """

    def __init__(  # noqa: PLR0913
        self,
        players: Sequence[Player],
        winning_score: int = WINNING_SCORE_21,
        *,
        bot_move_delay: float | None = None,
        trick_resolution_delay: float | None = None,
        loop: Any = None,
        rng: random.Random | None = None,
    ) -> None:
        """Seat the players and form the teams.

        Raises:
            ValueError: If there are not four players or the target is not positive.

        """
        if len(players) != NUM_PLAYERS:
            msg = f"A match needs exactly {NUM_PLAYERS} players, got {len(players)}"
            raise ValueError(msg)
        if winning_score <= 0:
            msg = f"Winning score must be positive, got {winning_score}"
            raise ValueError(msg)

        self._players: list[Player] = list(players)
        self._teams = (
            Team(TEAM_1, [self._players[0], self._players[2]]),
            Team(TEAM_2, [self._players[1], self._players[3]]),
        )
        self._score_manager = ScoreManager([team.id for team in self._teams], winning_score)
        self._bot_move_delay = bot_move_delay
        self._trick_resolution_delay = trick_resolution_delay
        self._loop = loop
        self._rng = rng

        self._deal: Deal | None = None
        self._deal_counter = 0
        self._paused = False
        self._game_over = False
        self._last_deal_snapshot: DealSnapshot | None = None
        self._listeners: list[GameListener] = []

    def subscribe(self, listener: GameListener) -> None:
        """Register a listener for deal and match events."""
        self._listeners.append(listener)

    def start_game(self) -> bool:
        """Start the first deal."""
        logger.info("Match started, target %d", self.winning_score)
        return self.start_next_deal()

    def start_next_deal(self) -> bool:
        """Start a new deal unless the match is over or a deal is running.

        Returns:
            True if a deal was started

        """
        if self._game_over:
            return False
        if self._deal is not None and not self._deal.is_over:
            return False

        deal = Deal2v2(
            self._deal_counter,
            self._players,
            teams=self._teams,
            bot_move_delay=self._bot_move_delay,
            trick_resolution_delay=self._trick_resolution_delay,
            loop=self._loop,
            rng=self._rng,
        )
        self._deal_counter += 1
        self._deal = deal
        deal.subscribe(self._on_deal_event)
        deal.set_paused(self._paused)
        deal.start()
        return True

    def pause_game(self) -> None:
        """Pause the match and its active deal."""
        self._paused = True
        if self._deal is not None:
            self._deal.set_paused(True)

    def resume_game(self) -> None:
        """Resume the match and its active deal."""
        self._paused = False
        if self._deal is not None:
            self._deal.set_paused(False)

    def stop_game(self) -> None:
        """End the match early; no further deal can start."""
        self._game_over = True
        if self._deal is not None:
            self._deal.stop()
        logger.info("Match stopped")

    def play_human_card(self, player: Player, card: Card) -> bool:
        """Forward a human play to the active deal."""
        if self._deal is None:
            return False
        return self._deal.play_human_card(player, card)

    def handle_player_sign(self, player: Player, sign_type: SignType) -> SignEvent | None:
        """Forward a sign to the active deal."""
        if self._deal is None:
            return None
        return self._deal.handle_player_sign(player, sign_type)

    def _on_deal_event(self, event: ModelEvent) -> None:
        if not isinstance(event, DealEnded):
            self._emit(event)
            return
        # Score while the piles are intact; listeners may start the next deal
        results = self._score_deal(event.snapshot)
        self._emit(event)
        for result in results:
            self._emit(result)

    def _score_deal(self, snapshot: DealSnapshot) -> list[ModelEvent]:
        winner = self._deal.last_trick_winner if self._deal else None
        winner_team = next((t for t in self._teams if winner and t.contains(winner)), None)
        winner_team_id = winner_team.id if winner_team else None

        deal_points = self._score_manager.update_team_game_scores(self._teams, winner_team_id)
        self._last_deal_snapshot = snapshot
        results: list[ModelEvent] = [
            ScoresUpdated(
                deal_points=frozen_scores(deal_points),
                cumulative_scores=frozen_scores(self._score_manager.get_all_scores()),
                deal_winner_id=winner_team_id,
                last_deal_snapshot=snapshot,
            )
        ]

        if self._score_manager.check_for_game_winner():
            self._game_over = True
            winners = self._score_manager.final_winner_ids
            logger.info("Match won by %s", ", ".join(winners))
            results.append(
                GameEnded(
                    final_scores=frozen_scores(self._score_manager.get_all_scores()),
                    winner_ids=tuple(winners),
                )
            )
        return results

    def _emit(self, event: ModelEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def can_player_make_sign(self, player: Player) -> bool:
        """Check whether ``player`` may sign in the active deal."""
        return self._deal is not None and self._deal.can_player_make_sign(player)

    def get_total_scores(self) -> dict[str, int]:
        """Get cumulative scores per team id."""
        return self._score_manager.get_all_scores()

    def get_last_deal_points(self) -> dict[str, int]:
        """Get the points of the last scored deal per team id."""
        return self._score_manager.get_last_deal_points()

    def is_game_over(self) -> bool:
        """Whether the match was won or stopped."""
        return self._game_over

    def is_current_deal_over(self) -> bool:
        """Whether the active deal is finished (True when none was started)."""
        return self._deal is None or self._deal.is_over

    @property
    def current_player(self) -> Player | None:
        """Player whose turn it is in the active deal."""
        return self._deal.current_player if self._deal else None

    @property
    def current_deal(self) -> Deal | None:
        """The active (or last) deal."""
        return self._deal

    @property
    def players(self) -> tuple[Player, ...]:
        """Seated players, human first."""
        return tuple(self._players)

    @property
    def teams(self) -> tuple[Team, ...]:
        """Team1 and Team2."""
        return self._teams

    @property
    def winning_score(self) -> int:
        """Target score of the match."""
        return self._score_manager.winning_score_target

    @property
    def winner_ids(self) -> list[str]:
        """Winning team ids once the match is won."""
        return self._score_manager.final_winner_ids

    @property
    def is_paused(self) -> bool:
        """Whether the match is paused."""
        return self._paused

    @property
    def last_deal_snapshot(self) -> DealSnapshot | None:
        """Snapshot taken when the last deal ended."""
        return self._last_deal_snapshot
