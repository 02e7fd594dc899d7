"""Deck model for shuffling and dealing cards."""

import random

from tresette.models.card import Card, get_all_cards
from tresette.models.exceptions import EmptyDeckError


class Deck:
    """Represents the 40-card Tresette deck (4 suits x 10 ranks).

    The deck is built in a fixed order; call :meth:`shuffle` to randomize it.
    Drawing from an empty deck raises :class:`EmptyDeckError`.
    """

    def __init__(self) -> None:
        """Initialize a full, unshuffled deck."""
        self.cards: list[Card] = get_all_cards()

    def shuffle(self, rng: random.Random | None = None) -> None:
        """Shuffle the remaining cards in place."""
        (rng or random).shuffle(self.cards)

    def draw_card(self) -> Card:
        """Remove and return the top card."""
        if not self.cards:
            msg = "Deck is empty - cannot draw a card."
            raise EmptyDeckError(msg)
        return self.cards.pop()

    def size(self) -> int:
        """Return the number of cards left."""
        return len(self.cards)

    def is_empty(self) -> bool:
        """Check if all cards have been dealt."""
        return not self.cards

    def __len__(self) -> int:
        return len(self.cards)
