"""Card model for the 40-card Italian deck."""

from dataclasses import dataclass
from enum import Enum


class Suit(Enum):
    """The four Italian suits."""

    DENARI = "Denari"
    BASTONI = "Bastoni"
    COPPE = "Coppe"
    SPADE = "Spade"

    @property
    def display_name(self) -> str:
        """Return the suit name shown to players."""
        return self.value


class Rank(Enum):
    """Card ranks with their trick strength and scoring weight.

    ``game_value`` orders cards inside the leading suit (Tre is the highest,
    Quattro the lowest). ``points`` is the fractional value counted at the end
    of a deal: one point for an Ace, a third for each figure, Due and Tre.
    """

    ASSO = ("Asso", 8, 1.0)
    DUE = ("Due", 9, 0.33)
    TRE = ("Tre", 10, 0.33)
    QUATTRO = ("Quattro", 1, 0.0)
    CINQUE = ("Cinque", 2, 0.0)
    SEI = ("Sei", 3, 0.0)
    SETTE = ("Sette", 4, 0.0)
    FANTE = ("Fante", 5, 0.33)
    CAVALLO = ("Cavallo", 6, 0.33)
    RE = ("Re", 7, 0.33)

    def __init__(self, display_name: str, game_value: int, points: float) -> None:
        self.display_name = display_name
        self.game_value = game_value
        self.points = points


@dataclass(frozen=True)
class Card:
    """Immutable playing card, equal and hashable by (suit, rank).

    Attributes:
        suit: Card suit
        rank: Card rank

    """

    suit: Suit
    rank: Rank

    @property
    def game_value(self) -> int:
        """Strength used to compare cards of the same suit."""
        return self.rank.game_value

    @property
    def points(self) -> float:
        """Fractional scoring weight."""
        return self.rank.points

    @property
    def code(self) -> str:
        """Stable wire identifier, e.g. ``ASSO_DENARI``."""
        return f"{self.rank.name}_{self.suit.name}"

    @classmethod
    def from_code(cls, code: str) -> "Card":
        """Decode a wire identifier produced by :attr:`code`.

        Raises:
            ValueError: If the code does not name a card.

        """
        rank_name, sep, suit_name = code.partition("_")
        if not sep:
            msg = f"Invalid card code: {code!r}"
            raise ValueError(msg)
        try:
            return cls(Suit[suit_name], Rank[rank_name])
        except KeyError as e:
            msg = f"Invalid card code: {code!r}"
            raise ValueError(msg) from e

    def __str__(self) -> str:
        """Return the card name, e.g. "Asso di Denari"."""
        return f"{self.rank.display_name} di {self.suit.display_name}"


# All cards in deck order (suit by suit)
_CARDS: tuple[Card, ...] = tuple(Card(suit, rank) for suit in Suit for rank in Rank)

STARTING_CARD = Card(Suit.DENARI, Rank.QUATTRO)


def get_all_cards() -> list[Card]:
    """Get the 40 cards of the deck in a fixed order."""
    return list(_CARDS)
