"""Game domain models."""

from tresette.models.card import STARTING_CARD, Card, Rank, Suit
from tresette.models.deck import Deck
from tresette.models.player import BotPlayer, Hand, Player
from tresette.models.sign import SignEvent, SignType
from tresette.models.team import Team
from tresette.models.trick import Table, Trick

__all__ = [
    "STARTING_CARD",
    "BotPlayer",
    "Card",
    "Deck",
    "Hand",
    "Player",
    "Rank",
    "SignEvent",
    "SignType",
    "Suit",
    "Table",
    "Team",
    "Trick",
]
