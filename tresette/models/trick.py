"""Trick and table models for the cards currently in play."""

from types import MappingProxyType
from typing import TYPE_CHECKING

from tresette.models.card import Card, Suit

if TYPE_CHECKING:
    from collections.abc import Mapping

    from tresette.models.player import Player


class Trick:
    """Cards played in the current trick, in play order.

    The first card fixes the leading suit for the rest of the trick.
    """

    def __init__(self) -> None:
        """Initialize an empty trick."""
        self._plays: "dict[Player, Card]" = {}
        self._leading_suit: Suit | None = None

    def add_play(self, player: "Player", card: Card) -> None:
        """Record a play.

        Raises:
            ValueError: If the player already played in this trick.

        """
        if player in self._plays:
            msg = f"{player.id} already played in this trick"
            raise ValueError(msg)
        if not self._plays:
            self._leading_suit = card.suit
        self._plays[player] = card

    @property
    def leading_suit(self) -> Suit | None:
        """Suit of the first card, or None if the trick is empty."""
        return self._leading_suit

    @property
    def plays(self) -> "Mapping[Player, Card]":
        """Read-only player -> card view, in play order."""
        return MappingProxyType(self._plays)

    @property
    def cards(self) -> list[Card]:
        """Cards in play order."""
        return list(self._plays.values())

    def is_empty(self) -> bool:
        """Check if no card has been played."""
        return not self._plays

    def size(self) -> int:
        """Return the number of cards played."""
        return len(self._plays)


class Table:
    """The table holds exactly one active trick."""

    def __init__(self) -> None:
        """Create a table with an empty trick."""
        self._trick = Trick()

    def add_card(self, player: "Player", card: Card) -> None:
        """Add a card to the current trick."""
        self._trick.add_play(player, card)

    def clear_and_return(self) -> list[Card]:
        """Collect the trick cards and start a fresh trick."""
        played = self._trick.cards
        self._trick = Trick()
        return played

    @property
    def leading_suit(self) -> Suit | None:
        """Leading suit of the current trick."""
        return self._trick.leading_suit

    @property
    def plays(self) -> "Mapping[Player, Card]":
        """Read-only plays of the current trick."""
        return self._trick.plays

    @property
    def cards(self) -> list[Card]:
        """Cards on the table in play order."""
        return self._trick.cards

    def codes(self) -> list[str]:
        """Codes of the cards on the table in play order."""
        return [card.code for card in self._trick.cards]

    def is_empty(self) -> bool:
        """Check if the table is empty."""
        return self._trick.is_empty()

    def size(self) -> int:
        """Return the number of cards on the table."""
        return self._trick.size()
