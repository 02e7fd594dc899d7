"""Game session: one human against three bots, driven by ids and card codes.

The session is the inbound surface used by the API layer. It builds the
seats from a :class:`MatchContext`, owns the :class:`GameManager` and keeps
an ordered record of every outbound event.
"""

import logging
import random
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from tresette.bots.base_bot import BotDifficulty
from tresette.bots.strategy_engine import BotStrategyEngine
from tresette.config import settings
from tresette.constants import HUMAN_SEAT, NUM_PLAYERS
from tresette.models.card import Card
from tresette.models.events import DealEvent, DealSnapshot, ModelEvent
from tresette.models.exceptions import PlayerNotFoundError
from tresette.models.game_manager import GameManager
from tresette.models.player import BotPlayer, Player
from tresette.models.sign import SignType
from tresette.services.event_recorder import EventRecorder
from tresette.services.name_pool import NamePool

logger = logging.getLogger(__name__)


@dataclass
class MatchContext:
    """Everything needed to set up a match.

    Attributes:
        username: Human player's display name
        difficulty: Difficulty of the three bots
        winning_score: Match target
        name_pool: Source of bot names
        rng: Random generator seeding the shuffle and the bots

    """

    username: str = field(default_factory=lambda: settings.default_username)
    difficulty: BotDifficulty = field(
        default_factory=lambda: BotDifficulty(settings.default_difficulty)
    )
    winning_score: int = field(default_factory=lambda: settings.default_winning_score)
    name_pool: NamePool = field(default_factory=NamePool)
    rng: random.Random = field(default_factory=random.Random)


def build_players(context: MatchContext) -> list[Player]:
    """Seat the human as P1 and three bots as P2-P4."""
    context.name_pool.reserve(context.username)
    players: list[Player] = [Player(id="P1", username=context.username)]
    for seat in range(1, NUM_PLAYERS):
        strategy = BotStrategyEngine(
            context.difficulty,
            rng=random.Random(context.rng.getrandbits(32)),  # noqa: S311
        )
        players.append(
            BotPlayer(id=f"P{seat + 1}", username=context.name_pool.next(), strategy=strategy)
        )
    return players


class GameSession:
    """A single-human match addressed by player ids and card codes.

    Attributes:
        id: Session identifier
        context: Match settings
        manager: The underlying match coordinator
        recorder: Ordered log of outbound events

    """

    def __init__(
        self,
        context: MatchContext | None = None,
        *,
        session_id: str | None = None,
        bot_move_delay: float | None = None,
        trick_resolution_delay: float | None = None,
        loop: Any = None,
    ) -> None:
        """Create the seats and the match manager."""
        self.id = session_id or str(uuid.uuid4())
        self.context = context or MatchContext()
        self._players = build_players(self.context)
        self.manager = GameManager(
            self._players,
            self.context.winning_score,
            bot_move_delay=bot_move_delay,
            trick_resolution_delay=trick_resolution_delay,
            loop=loop,
            rng=self.context.rng,
        )
        self.recorder = EventRecorder()
        self._latest_snapshot: DealSnapshot | None = None
        self.manager.subscribe(self._on_event)
        self.manager.subscribe(self.recorder.record)

    def subscribe(self, listener: Callable[[ModelEvent], None]) -> None:
        """Register a listener for every outbound event."""
        self.manager.subscribe(listener)

    def _on_event(self, event: ModelEvent) -> None:
        if isinstance(event, DealEvent):
            self._latest_snapshot = event.snapshot

    # Lifecycle

    def start_game(self) -> bool:
        """Start the match."""
        logger.info("Session %s: starting match for %s", self.id, self.context.username)
        return self.manager.start_game()

    def pause(self) -> None:
        """Pause the match."""
        self.manager.pause_game()

    def resume(self) -> None:
        """Resume the match."""
        self.manager.resume_game()

    def start_next_deal(self) -> bool:
        """Start the next deal if the current one is over."""
        return self.manager.start_next_deal()

    def confirm_deal_results(self) -> bool:
        """Acknowledge a finished deal: resume and deal again.

        Returns:
            True if a new deal was started

        """
        if not self.manager.is_current_deal_over() or self.manager.is_game_over():
            return False
        self.manager.resume_game()
        return self.manager.start_next_deal()

    def stop_game(self) -> None:
        """Stop the match and cancel all timers."""
        self.manager.stop_game()
        logger.info("Session %s stopped", self.id)

    # Moves

    def play_card(self, player_id: str, card_code: str) -> bool:
        """Play a card by code for a human player.

        Raises:
            PlayerNotFoundError: If ``player_id`` is not seated.

        """
        player = self.get_player(player_id)
        card = next((c for c in player.hand_cards if c.code == card_code), None)
        if card is None:
            logger.debug("Card %s not in %s's hand", card_code, player_id)
            return False
        return self.manager.play_human_card(player, card)

    def make_sign(self, player_id: str, sign_type: SignType) -> bool:
        """Send a sign for a player.

        Raises:
            PlayerNotFoundError: If ``player_id`` is not seated.

        """
        player = self.get_player(player_id)
        return self.manager.handle_player_sign(player, sign_type) is not None

    def move_human_card(self, from_index: int, to_index: int) -> list[str]:
        """Reorder the human hand; the destination is clamped to the hand.

        Returns:
            Hand codes after the move

        Raises:
            IndexError: If ``from_index`` is out of range.

        """
        hand = self.human_player.hand
        to_index = max(0, min(to_index, len(hand)))
        hand.move_card(from_index, to_index)
        return hand.codes()

    # Queries

    def get_player(self, player_id: str) -> Player:
        """Look up a seated player.

        Raises:
            PlayerNotFoundError: If no seated player has that id.

        """
        for player in self._players:
            if player.id == player_id:
                return player
        msg = f"Player {player_id} not found"
        raise PlayerNotFoundError(msg)

    @property
    def human_player(self) -> Player:
        """The human seat."""
        return self._players[HUMAN_SEAT]

    def player_ids(self) -> list[str]:
        """Player ids in seat order."""
        return [player.id for player in self._players]

    def player_names(self) -> dict[str, str]:
        """Display name per player id."""
        return {player.id: player.username for player in self._players}

    def current_player_id(self) -> str | None:
        """Id of the player whose turn it is."""
        current = self.manager.current_player
        return current.id if current else None

    def human_hand(self) -> list[Card]:
        """Cards in the human hand, in display order."""
        return list(self.human_player.hand_cards)

    def scores(self) -> dict[str, int]:
        """Cumulative team scores."""
        return self.manager.get_total_scores()

    def last_deal_points(self) -> dict[str, int]:
        """Points of the last scored deal."""
        return self.manager.get_last_deal_points()

    @property
    def latest_snapshot(self) -> DealSnapshot | None:
        """Snapshot carried by the most recent deal event."""
        return self._latest_snapshot

    def to_dict(self) -> dict[str, Any]:
        """Summarise the session for clients."""
        return {
            "id": self.id,
            "players": [
                {
                    "id": player.id,
                    "username": player.username,
                    "is_bot": player.is_bot,
                    "team_id": player.team_id,
                }
                for player in self._players
            ],
            "difficulty": self.context.difficulty.value,
            "winning_score": self.manager.winning_score,
            "scores": self.scores(),
            "last_deal_points": self.last_deal_points(),
            "current_player_id": self.current_player_id(),
            "game_over": self.manager.is_game_over(),
            "deal_over": self.manager.is_current_deal_over(),
            "paused": self.manager.is_paused,
            "winner_ids": self.manager.winner_ids,
            "snapshot": self._latest_snapshot.to_dict() if self._latest_snapshot else None,
        }
