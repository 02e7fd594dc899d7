"""Base class for all bot strategies."""

import random
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

from tresette.models.card import Card
from tresette.models.rules import legal_moves
from tresette.models.sign import SignEvent, SignType

if TYPE_CHECKING:
    from tresette.models.team import Team
    from tresette.models.trick import Table


class BotDifficulty(str, Enum):
    """Bot difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class BaseBot(ABC):
    """Abstract base class for bot strategies.

    All bot implementations must implement choose_card() and choose_sign().
    """

    def __init__(
        self,
        difficulty: BotDifficulty = BotDifficulty.MEDIUM,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the bot.

        Args:
            difficulty: Bot difficulty level
            rng: Random generator (a private one is created if omitted)

        """
        self.difficulty = difficulty
        self.rng = rng or random.Random()  # noqa: S311
        self.last_observed_sign: SignEvent | None = None

    @abstractmethod
    def choose_card(self, table: "Table", hand: list[Card], team: "Team | None") -> Card:
        """Pick a legal card to play.

        Args:
            table: Current table (read only)
            hand: Bot's remaining cards
            team: Bot's team, used to recognise the partner's cards

        Returns:
            Card to play

        """

    @abstractmethod
    def choose_sign(self, table: "Table", hand: list[Card]) -> SignType:
        """Pick a sign to send before leading, or SignType.NONE."""

    def observe_sign(self, event: SignEvent) -> None:
        """Record a sign sent at the table."""
        self.last_observed_sign = event

    def _legal_moves(self, table: "Table", hand: list[Card]) -> list[Card]:
        """Get the cards that may be played."""
        return legal_moves(hand, table)

    def __str__(self) -> str:
        """Return string representation."""
        return f"{self.__class__.__name__} ({self.difficulty.value})"
