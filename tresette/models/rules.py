"""Core Tresette rules as pure functions.

There is no trump: only cards of the leading suit can win a trick, and the
highest game value among them takes it.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING

from tresette.models.card import Card, Suit
from tresette.models.exceptions import InvariantViolationError

if TYPE_CHECKING:
    from tresette.models.player import Player
    from tresette.models.trick import Table


def is_valid_play(player: "Player", card: Card, table: "Table") -> bool:
    """Check whether a card may legally be played.

    Rules:
        1. Any card may lead an empty table
        2. A card of the leading suit is always legal
        3. Another suit is legal only if the player holds no leading-suit card

    """
    leading = table.leading_suit
    if table.is_empty() or leading is None:
        return True
    if card.suit == leading:
        return True
    return not any(c.suit == leading for c in player.hand_cards)


def legal_moves(hand: Sequence[Card], table: "Table") -> list[Card]:
    """Return the cards of ``hand`` that may be played on ``table``."""
    leading = table.leading_suit
    if leading is None:
        return list(hand)
    following = [c for c in hand if c.suit == leading]
    return following or list(hand)


def get_winning_card(cards_on_table: Iterable[Card], leading_suit: Suit) -> Card:
    """Return the highest card of the leading suit.

    Raises:
        ValueError: If no cards are given.
        InvariantViolationError: If no card follows the leading suit.

    """
    cards = list(cards_on_table)
    if not cards:
        msg = "cards_on_table is empty"
        raise ValueError(msg)
    best: Card | None = None
    for card in cards:
        if card.suit == leading_suit and (best is None or card.game_value > best.game_value):
            best = card
    if best is None:
        msg = f"No card with leading suit {leading_suit.name} on table"
        raise InvariantViolationError(msg)
    return best


def card_beats(challenger: Card | None, current_winning: Card | None, leading_suit: Suit) -> bool:
    """Check whether ``challenger`` takes the trick from ``current_winning``.

    Raises:
        InvariantViolationError: If the current winner is off the leading suit.

    """
    if challenger is None:
        return False
    if current_winning is None:
        return True
    if challenger.suit != leading_suit:
        return False
    if current_winning.suit != leading_suit:
        msg = "current winning card without leading suit (logic error)"
        raise InvariantViolationError(msg)
    return challenger.game_value > current_winning.game_value


def get_trick_winner(plays: Mapping["Player", Card], leading_suit: Suit | None) -> "Player":
    """Return the player who played the winning card.

    Raises:
        ValueError: If there are no plays or no leading suit.
        InvariantViolationError: If no play follows the leading suit.

    """
    if not plays:
        msg = "plays is empty"
        raise ValueError(msg)
    if leading_suit is None:
        msg = "leading_suit is None"
        raise ValueError(msg)
    winner: Player | None = None
    best = -1
    for player, card in plays.items():
        if card.suit == leading_suit and card.game_value > best:
            best = card.game_value
            winner = player
    if winner is None:
        msg = f"No card with leading suit {leading_suit.name} among plays"
        raise InvariantViolationError(msg)
    return winner
