"""Timed bot moves for a running deal.

Each deal owns one scheduler holding at most one pending timer. When the
timer fires the current bot may send a sign, then plays a card. Consecutive
bot turns are chained by re-arming after every move.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from tresette.bots.base_bot import BaseBot
from tresette.bots.random_bot import RandomBot
from tresette.models.exceptions import InvariantViolationError
from tresette.models.player import BotPlayer
from tresette.models.sign import SignType

if TYPE_CHECKING:
    from tresette.models.deal import Deal

logger = logging.getLogger(__name__)


class BotMoveScheduler:
    """Arms a delayed action whenever a bot is due to play.

    Attributes:
        delay: Seconds between the turn starting and the bot moving

    """

    def __init__(
        self,
        deal: "Deal",
        delay: float,
        *,
        loop: Any = None,
        fallback: BaseBot | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            deal: Deal whose bot turns are driven
            delay: Seconds to wait before each bot move
            loop: Object providing ``call_later``; the running asyncio loop
                is used when omitted
            fallback: Strategy used when the bot's own strategy fails

        """
        self._deal = deal
        self.delay = delay
        self._loop = loop
        self._fallback = fallback or RandomBot()
        self._handle: asyncio.TimerHandle | None = None

    @property
    def is_pending(self) -> bool:
        """Whether a bot move is armed."""
        return self._handle is not None

    def schedule_if_bot_turn(self) -> bool:
        """Arm the timer if the current player is a bot and the deal is running.

        Returns:
            True if a new timer was armed

        """
        if self._handle is not None:
            return False
        player = self._deal.current_player
        if player is None or not player.is_bot or not self._deal.is_accepting_moves():
            return False
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._on_timer)
        logger.debug("Bot move for %s armed in %.2fs", player.id, self.delay)
        return True

    def cancel(self) -> None:
        """Discard the pending timer, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _on_timer(self) -> None:
        self._handle = None
        player = self._deal.current_player
        # Pause or stop may have happened after arming
        if not isinstance(player, BotPlayer) or not self._deal.is_accepting_moves():
            logger.debug("Bot move skipped: deal not accepting moves")
            return

        try:
            self._move(player)
        except InvariantViolationError:
            raise
        except Exception:
            logger.exception("Bot %s failed to move, falling back to a random card", player.id)
            self._fallback_move(player)

        if self._deal.is_accepting_moves():
            self.schedule_if_bot_turn()

    def _move(self, player: BotPlayer) -> None:
        table = self._deal.table
        if self._deal.can_player_make_sign(player):
            sign = player.decide_sign(table)
            if sign is not SignType.NONE:
                self._deal.handle_player_sign(player, sign)
        card = player.decide_card(table, self._deal.team_of(player))
        logger.debug("Bot %s plays %s", player.id, card.code)
        self._deal.play_card_from_bot(player, card)

    def _fallback_move(self, player: BotPlayer) -> None:
        # The failure may have happened after the card was played
        if self._deal.current_player is not player or not self._deal.is_accepting_moves():
            return
        try:
            card = self._fallback.choose_card(
                self._deal.table, list(player.hand), self._deal.team_of(player)
            )
            self._deal.play_card_from_bot(player, card)
        except InvariantViolationError:
            raise
        except Exception:
            logger.exception("Fallback move failed for %s, turn dropped", player.id)
