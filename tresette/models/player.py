"""Player model: hand, won pile, team membership and bot capability."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tresette.constants import CARDS_PER_PLAYER
from tresette.models.card import Card
from tresette.models.exceptions import HandFullError, TeamAssignmentError

if TYPE_CHECKING:
    from tresette.bots.base_bot import BaseBot
    from tresette.models.sign import SignEvent, SignType
    from tresette.models.team import Team
    from tresette.models.trick import Table


class Hand:
    """Ordered cards held by a player, at most ten."""

    def __init__(self) -> None:
        """Initialize an empty hand."""
        self._cards: list[Card] = []

    def add_card(self, card: Card) -> None:
        """Add a card to the hand.

        Raises:
            HandFullError: If the hand already holds ten cards.

        """
        if len(self._cards) >= CARDS_PER_PLAYER:
            msg = f"Hand capacity {CARDS_PER_PLAYER} reached"
            raise HandFullError(msg)
        self._cards.append(card)

    def remove_card(self, card: Card) -> bool:
        """Remove a card, returning whether it was present."""
        if card in self._cards:
            self._cards.remove(card)
            return True
        return False

    def move_card(self, from_index: int, to_index: int) -> None:
        """Move a card to another slot.

        ``to_index`` is a slot in ``[0, len(hand)]``; moving to ``len(hand)``
        puts the card last.

        Raises:
            IndexError: If either index is out of range.

        """
        size = len(self._cards)
        if not 0 <= from_index < size:
            msg = f"Invalid from_index: {from_index}"
            raise IndexError(msg)
        if not 0 <= to_index <= size:
            msg = f"Invalid to_index: {to_index}"
            raise IndexError(msg)
        if from_index == to_index or (to_index == size and from_index == size - 1):
            return
        card = self._cards.pop(from_index)
        # Removal shifts the target slot left when moving rightwards
        if to_index > from_index:
            to_index -= 1
        self._cards.insert(to_index, card)

    @property
    def cards(self) -> tuple[Card, ...]:
        """Read-only view of the cards in hand order."""
        return tuple(self._cards)

    def codes(self) -> list[str]:
        """Return the card codes in hand order."""
        return [card.code for card in self._cards]

    def clear(self) -> None:
        """Remove all cards."""
        self._cards.clear()

    def is_empty(self) -> bool:
        """Check if the hand has no cards."""
        return not self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(tuple(self._cards))

    def __contains__(self, card: object) -> bool:
        return card in self._cards


@dataclass(eq=False)
class Player:
    """Represents a seat at the table (human or bot).

    Players compare by identity so they can key the plays of a trick.

    Attributes:
        id: Unique player identifier (e.g. "P1")
        username: Display name
        hand: Cards currently held
        won_cards: Cards captured in the current deal
        team_id: Team identifier, assigned once
        is_bot: Whether decisions are made by a strategy

    """

    id: str
    username: str
    hand: Hand = field(default_factory=Hand)
    won_cards: list[Card] = field(default_factory=list)
    team_id: str | None = None
    is_bot: bool = False

    def assign_team(self, team_id: str) -> None:
        """Assign the player to a team; a different second team is refused.

        Raises:
            TeamAssignmentError: If already assigned to another team.

        """
        if self.team_id is None:
            self.team_id = team_id
        elif self.team_id != team_id:
            msg = f"Team already assigned to {self.team_id}, cannot reassign to {team_id}"
            raise TeamAssignmentError(msg)

    def has_team(self) -> bool:
        """Check if a team has been assigned."""
        return self.team_id is not None

    def add_card(self, card: Card) -> None:
        """Add a dealt card to the hand."""
        self.hand.add_card(card)

    def has_card(self, card: Card) -> bool:
        """Check if player has a card in their hand."""
        return card in self.hand

    def play_card(self, card: Card) -> Card:
        """Remove a card from the hand and return it.

        Raises:
            ValueError: If the card is not in the hand.

        """
        if not self.hand.remove_card(card):
            msg = f"Card {card} not in {self.id}'s hand"
            raise ValueError(msg)
        return card

    def move_card(self, from_index: int, to_index: int) -> None:
        """Reorder the hand."""
        self.hand.move_card(from_index, to_index)

    def add_won_cards(self, cards: Iterable[Card]) -> None:
        """Add the cards of a won trick to the pile."""
        self.won_cards.extend(cards)

    def reset_for_new_deal(self) -> None:
        """Clear hand and won pile."""
        self.hand.clear()
        self.won_cards.clear()

    @property
    def hand_cards(self) -> tuple[Card, ...]:
        """Read-only view of the hand."""
        return self.hand.cards

    def has_no_cards(self) -> bool:
        """Check if the hand is empty."""
        return self.hand.is_empty()

    def __str__(self) -> str:
        """Return string representation."""
        bot_str = " (Bot)" if self.is_bot else ""
        return f"{self.username}{bot_str} ({self.id}) - Hand cards: {len(self.hand)}"


@dataclass(eq=False)
class BotPlayer(Player):
    """A player whose moves are decided by a bot strategy.

    Attributes:
        strategy: Decision maker for cards and signs

    """

    strategy: "BaseBot | None" = None

    def __post_init__(self) -> None:
        """Mark the seat as a bot and ensure a strategy is attached."""
        self.is_bot = True
        if self.strategy is None:
            from tresette.bots.strategy_engine import BotStrategyEngine

            self.strategy = BotStrategyEngine()

    def decide_card(self, table: "Table", team: "Team | None") -> Card:
        """Choose a legal card for the current trick.

        Raises:
            ValueError: If the hand is empty.

        """
        if self.hand.is_empty():
            msg = f"{self.id} has no cards in hand"
            raise ValueError(msg)
        return self.strategy.choose_card(table, list(self.hand), team)

    def decide_sign(self, table: "Table") -> "SignType":
        """Choose the sign to emit before leading, or NONE."""
        return self.strategy.choose_sign(table, list(self.hand))

    def on_sign(self, event: "SignEvent") -> None:
        """Receive a sign broadcast at the table."""
        self.strategy.observe_sign(event)
