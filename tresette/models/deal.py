"""Deal lifecycle: dealing, turns, trick resolution and pause handling.

A deal is driven by timers on an event loop: bot moves and trick
resolution are both deferred with ``call_later``. Pausing cancels every
pending timer; resuming re-arms whatever the current state calls for.
"""

import asyncio
import logging
import random
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Any

from tresette.config import settings
from tresette.constants import CARDS_PER_PLAYER, HUMAN_SEAT, NUM_PLAYERS
from tresette.models.bot_scheduler import BotMoveScheduler
from tresette.models.card import STARTING_CARD, Card
from tresette.models.deck import Deck
from tresette.models.events import (
    CardPlayed,
    DealEnded,
    DealSnapshot,
    DealStarted,
    ModelEvent,
    SignMade,
    TrickEnded,
    TrickStarted,
)
from tresette.models.exceptions import DealStateError, InvariantViolationError
from tresette.models.player import Player
from tresette.models.rules import get_trick_winner, is_valid_play
from tresette.models.sign import SignEvent, SignManager, SignType
from tresette.models.team import Team
from tresette.models.trick import Table

logger = logging.getLogger(__name__)

DealListener = Callable[[ModelEvent], None]


class DealState(str, Enum):
    """Lifecycle states of a deal."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    OVER = "OVER"


class Deal(ABC):
    """One distribution and play-out of the deck.

    Subclasses define who starts and when the deal is finished.

    Attributes:
        deal_index: Position of the deal in the match, from 0

    """

    def __init__(  # noqa: PLR0913
        self,
        deal_index: int,
        players: Sequence[Player],
        *,
        teams: Sequence[Team] = (),
        bot_move_delay: float | None = None,
        trick_resolution_delay: float | None = None,
        loop: Any = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the deal.

        Args:
            deal_index: Position of the deal in the match
            players: Seated players, seat 0 first
            teams: Partnerships, used by bots to recognise their partner
            bot_move_delay: Seconds before each bot move (settings default)
            trick_resolution_delay: Seconds between the fourth card and the
                trick result (settings default)
            loop: Object providing ``call_later``; the running asyncio loop
                is used when omitted
            rng: Random generator for the shuffle

        """
        self.deal_index = deal_index
        self._players: list[Player] = list(players)
        self._teams: tuple[Team, ...] = tuple(teams)
        self._loop = loop
        self._rng = rng
        self._trick_resolution_delay = (
            settings.trick_resolution_delay_seconds
            if trick_resolution_delay is None
            else trick_resolution_delay
        )

        self._deck = Deck()
        self._table = Table()
        self._sign_manager = SignManager(self._players)
        self._scheduler = BotMoveScheduler(
            self,
            settings.bot_move_delay_seconds if bot_move_delay is None else bot_move_delay,
            loop=loop,
        )
        self._resolution_handle: asyncio.TimerHandle | None = None
        self._listeners: list[DealListener] = []

        self._state = DealState.NOT_STARTED
        self._paused = False
        self._stopped = False
        self._current_index = 0
        self._last_trick_winner: Player | None = None

    # ------------------------------------------------------------------
    # Variant hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def is_finished(self) -> bool:
        """Check whether every card of the deal has been played."""

    @abstractmethod
    def find_starting_player_index(self) -> int:
        """Return the seat that leads the first trick."""

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def subscribe(self, listener: DealListener) -> None:
        """Register a listener called synchronously for every event."""
        self._listeners.append(listener)

    def start(self) -> None:
        """Shuffle, deal ten cards each and open the first trick.

        Raises:
            DealStateError: If the deal was already started.

        """
        if self._state is not DealState.NOT_STARTED:
            msg = f"Deal {self.deal_index} already started"
            raise DealStateError(msg)

        for player in self._players:
            player.reset_for_new_deal()
        self._sign_manager.reset_deal()
        self._deck.shuffle(self._rng)
        for _ in range(CARDS_PER_PLAYER):
            for player in self._players:
                player.add_card(self._deck.draw_card())

        self._current_index = self.find_starting_player_index()
        self._state = DealState.IN_PROGRESS
        logger.info("Deal %d started, %s leads", self.deal_index, self.current_player.id)

        self._emit(DealStarted(self.take_snapshot()))
        self._emit(TrickStarted(self.take_snapshot()))
        self._scheduler.schedule_if_bot_turn()

    def stop(self) -> None:
        """Cancel all timers for good; the deal no longer accepts moves."""
        self._stopped = True
        self._cancel_timers()
        logger.info("Deal %d stopped", self.deal_index)

    def set_paused(self, paused: bool) -> None:
        """Pause or resume the deal.

        Pausing cancels pending timers and keeps all state. Resuming re-arms
        trick resolution when a full trick is waiting, otherwise the bot move
        when a bot is due.
        """
        if paused == self._paused:
            return
        self._paused = paused
        if paused:
            self._cancel_timers()
            logger.info("Deal %d paused", self.deal_index)
            return

        logger.info("Deal %d resumed", self.deal_index)
        if self._state is not DealState.IN_PROGRESS or self._stopped:
            return
        if self.is_trick_full():
            self._schedule_trick_resolution()
        else:
            self._scheduler.schedule_if_bot_turn()

    # ------------------------------------------------------------------
    # Plays
    # ------------------------------------------------------------------

    def play_human_card(self, player: Player, card: Card) -> bool:
        """Play a card for a human player if the move is acceptable.

        Returns:
            True if the card was played; False leaves the deal untouched

        """
        reason = self._reject_reason(player, card)
        if reason is not None:
            logger.debug("Play of %s by %s rejected: %s", card.code, player.id, reason)
            return False
        self._execute_play(player, card)
        return True

    def _reject_reason(self, player: Player, card: Card) -> str | None:
        if not self.is_accepting_moves():
            return "deal not accepting moves"
        if player.is_bot:
            return "bot seat"
        if player is not self.current_player:
            return "not the player's turn"
        if not player.has_card(card):
            return "card not in hand"
        if not is_valid_play(player, card, self._table):
            return "must follow the leading suit"
        return None

    def play_card_from_bot(self, player: Player, card: Card) -> None:
        """Play a card chosen by the bot scheduler."""
        self._execute_play(player, card)

    def _execute_play(self, player: Player, card: Card) -> None:
        player.play_card(card)
        self._table.add_card(player, card)
        logger.debug("%s played %s", player.id, card.code)
        self._emit(
            CardPlayed(
                self.take_snapshot(),
                player_id=player.id,
                card_code=card.code,
                card_text=str(card),
            )
        )
        if self.is_trick_full():
            self._schedule_trick_resolution()
        else:
            self._current_index = (self._current_index + 1) % len(self._players)
            self._scheduler.schedule_if_bot_turn()

    # ------------------------------------------------------------------
    # Trick resolution
    # ------------------------------------------------------------------

    def _schedule_trick_resolution(self) -> None:
        if self._resolution_handle is not None or self._paused or self._stopped:
            return
        loop = self._loop or asyncio.get_running_loop()
        self._resolution_handle = loop.call_later(
            self._trick_resolution_delay, self._resolve_trick
        )

    def _resolve_trick(self) -> None:
        self._resolution_handle = None
        if self._paused or self._stopped or self._state is not DealState.IN_PROGRESS:
            return

        winner = get_trick_winner(self._table.plays, self._table.leading_suit)
        winner.add_won_cards(self._table.clear_and_return())
        self._last_trick_winner = winner
        self._current_index = self._seat_of(winner)
        self._sign_manager.on_trick_ended()
        logger.info("Deal %d: trick won by %s", self.deal_index, winner.id)
        self._emit(TrickEnded(self.take_snapshot()))

        if self.is_finished():
            self._end_deal()
            return
        self._emit(TrickStarted(self.take_snapshot()))
        self._scheduler.schedule_if_bot_turn()

    def _end_deal(self) -> None:
        self._state = DealState.OVER
        self._cancel_timers()
        logger.info(
            "Deal %d over, last trick to %s",
            self.deal_index,
            self._last_trick_winner.id if self._last_trick_winner else None,
        )
        self._emit(DealEnded(self.take_snapshot()))

    # ------------------------------------------------------------------
    # Signs
    # ------------------------------------------------------------------

    def can_player_make_sign(self, player: Player | None) -> bool:
        """Check whether ``player`` may send a sign now."""
        if not self.is_accepting_moves():
            return False
        return self._sign_manager.can_player_make_sign(player, self._table, self.current_player)

    def handle_player_sign(self, player: Player, sign_type: SignType) -> SignEvent | None:
        """Send a sign on behalf of ``player``.

        Returns:
            The sign event, or None if the sign was not allowed

        """
        if sign_type is SignType.NONE or not self.can_player_make_sign(player):
            logger.debug("Sign %s by %s rejected", sign_type.value, player.id)
            return None
        event = self._sign_manager.send_sign(player, sign_type, self._table, self.current_player)
        self._emit(SignMade(self.take_snapshot(), sign=event))
        return event

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_accepting_moves(self) -> bool:
        """Whether a card may be played right now."""
        return (
            self._state is DealState.IN_PROGRESS
            and not self._paused
            and not self._stopped
            and not self.is_trick_full()
        )

    def is_trick_full(self) -> bool:
        """Whether every player has played in the current trick."""
        return self._table.size() >= len(self._players)

    def team_of(self, player: Player) -> Team | None:
        """Return the team of ``player``, if teams were given."""
        return next((team for team in self._teams if team.contains(player)), None)

    def take_snapshot(self) -> DealSnapshot:
        """Capture an immutable view of the deal for outbound events."""
        current = self.current_player
        human = self._players[HUMAN_SEAT] if len(self._players) > HUMAN_SEAT else None
        return DealSnapshot.create(
            deal_index=self.deal_index,
            current_player_id=current.id if current else "",
            hand_sizes={p.id: len(p.hand) for p in self._players},
            won_counts={p.id: len(p.won_cards) for p in self._players},
            table_cards=self._table.codes(),
            last_trick_winner_id=self._last_trick_winner.id if self._last_trick_winner else None,
            can_current_player_sign=self.can_player_make_sign(current),
            paused=self._paused,
            human_hand=human.hand.codes() if human and not human.is_bot else None,
        )

    @property
    def state(self) -> DealState:
        """Lifecycle state."""
        return self._state

    @property
    def is_over(self) -> bool:
        """Whether all hands have been played out."""
        return self._state is DealState.OVER

    @property
    def is_paused(self) -> bool:
        """Whether the deal is paused."""
        return self._paused

    @property
    def is_stopped(self) -> bool:
        """Whether the deal was stopped."""
        return self._stopped

    @property
    def current_player(self) -> Player | None:
        """Player whose turn it is."""
        if not self._players:
            return None
        return self._players[self._current_index]

    @property
    def players(self) -> tuple[Player, ...]:
        """Seated players in seat order."""
        return tuple(self._players)

    @property
    def last_trick_winner(self) -> Player | None:
        """Winner of the most recent trick."""
        return self._last_trick_winner

    @property
    def table(self) -> Table:
        """The table; callers must not mutate it."""
        return self._table

    @property
    def bot_scheduler(self) -> BotMoveScheduler:
        """Scheduler driving the bot seats."""
        return self._scheduler

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _emit(self, event: ModelEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def _cancel_timers(self) -> None:
        self._scheduler.cancel()
        if self._resolution_handle is not None:
            self._resolution_handle.cancel()
            self._resolution_handle = None

    def _seat_of(self, player: Player) -> int:
        for index, seated in enumerate(self._players):
            if seated is player:
                return index
        msg = f"{player.id} is not seated in deal {self.deal_index}"
        raise InvariantViolationError(msg)


class Deal2v2(Deal):
    """Standard four-player partnership deal."""

    def __init__(self, deal_index: int, players: Sequence[Player], **kwargs: Any) -> None:
        """Initialize the deal.

        Raises:
            ValueError: If there are not exactly four players.

        """
        if len(players) != NUM_PLAYERS:
            msg = f"Deal2v2 needs exactly {NUM_PLAYERS} players, got {len(players)}"
            raise ValueError(msg)
        super().__init__(deal_index, players, **kwargs)

    def is_finished(self) -> bool:
        """Check whether every hand is empty."""
        return all(player.has_no_cards() for player in self._players)

    def find_starting_player_index(self) -> int:
        """Return the seat holding the starting card.

        Raises:
            InvariantViolationError: If no player holds the starting card.

        """
        for index, player in enumerate(self._players):
            if player.has_card(STARTING_CARD):
                return index
        msg = f"Starting card {STARTING_CARD.code} not found in any hand"
        raise InvariantViolationError(msg)
