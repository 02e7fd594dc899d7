"""Heuristic bot strategy for Tresette.

The same heuristic is used at every difficulty; difficulty only sets how
often the bot ignores it and plays (or signs) at random.

Card play:
- Leading: follow up a BUSSO with the highest-point card of the announced
  suit, otherwise lead an Ace-or-better if held, else the lowest card
- Partner winning: follow with the lowest card, or discard the richest card
- Opponent winning: take the trick as cheaply as possible, else play low

Signs:
- BUSSO when a suit is controlled, LISCIO with many point cards, VOLO with a
  weak hand
"""

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tresette.bots.base_bot import BaseBot, BotDifficulty
from tresette.constants import (
    BUSSO_MIN_STRONG_CARDS,
    BUSSO_MIN_SUIT_CARDS_WITH_TOP,
    LISCIO_MIN_POINT_CARDS,
    SIGN_ABSTAIN_PROBABILITY,
    STRONG_GAME_VALUE,
    TOP_GAME_VALUE,
    VOLO_MAX_POINT_CARDS,
)
from tresette.models.card import Card, Rank, Suit
from tresette.models.rules import card_beats, get_winning_card
from tresette.models.sign import SignType

if TYPE_CHECKING:
    from tresette.models.team import Team
    from tresette.models.trick import Table

logger = logging.getLogger(__name__)

# (action noise, sign noise) per difficulty
NOISE_BY_DIFFICULTY: dict[BotDifficulty, tuple[float, float]] = {
    BotDifficulty.EASY: (0.60, 0.60),
    BotDifficulty.MEDIUM: (0.35, 0.35),
    BotDifficulty.HARD: (0.10, 0.10),
}


@dataclass(frozen=True)
class SignThresholds:
    """Tunable thresholds for the sign heuristic."""

    strong_game_value: int = STRONG_GAME_VALUE
    top_game_value: int = TOP_GAME_VALUE
    busso_min_strong: int = BUSSO_MIN_STRONG_CARDS
    busso_min_suit_with_top: int = BUSSO_MIN_SUIT_CARDS_WITH_TOP
    liscio_min_point_cards: int = LISCIO_MIN_POINT_CARDS
    volo_max_point_cards: int = VOLO_MAX_POINT_CARDS
    abstain_probability: float = SIGN_ABSTAIN_PROBABILITY


class BotStrategyEngine(BaseBot):
    """Rule-based bot with difficulty-scaled randomness.

    Attributes:
        action_noise: Probability of playing a random legal card
        sign_noise: Probability of skipping the sign heuristic
        thresholds: Sign heuristic thresholds
        planned_busso_suit: Suit announced with BUSSO, led on the next lead

    """

    def __init__(
        self,
        difficulty: BotDifficulty = BotDifficulty.MEDIUM,
        rng: random.Random | None = None,
        thresholds: SignThresholds | None = None,
    ) -> None:
        """Initialize the engine for a difficulty level."""
        super().__init__(difficulty, rng)
        self.action_noise, self.sign_noise = NOISE_BY_DIFFICULTY[difficulty]
        self.thresholds = thresholds or SignThresholds()
        self.planned_busso_suit: Suit | None = None

    def choose_card(self, table: "Table", hand: list[Card], team: "Team | None") -> Card:
        """Pick a card strategically.

        Args:
            table: Current table
            hand: Bot's remaining cards
            team: Bot's team

        Returns:
            A legal card

        """
        legal = self._legal_moves(table, hand)
        if not legal:
            msg = "No cards to play"
            raise ValueError(msg)
        if len(legal) == 1:
            return legal[0]

        if self.rng.random() < self.action_noise:
            return self.rng.choice(legal)

        leading = table.leading_suit
        if leading is None:
            if self.planned_busso_suit is not None:
                chosen = self._highest_points_of_suit_or_lowest(self.planned_busso_suit, legal)
                self.planned_busso_suit = None
                return chosen
            return self._best_lead_card(legal)

        current_winning = get_winning_card(table.cards, leading)

        mate_winning = team is not None and any(
            card == current_winning and team.contains(player)
            for player, card in table.plays.items()
        )
        if mate_winning:
            if any(c.suit == leading for c in hand):
                return self._min_by_game_value(legal)
            # Discarding on the partner's trick: hand over the most points
            return max(legal, key=lambda c: c.points)

        winning = [c for c in legal if card_beats(c, current_winning, leading)]
        if not winning:
            return self._min_by_game_value(legal)
        return self._min_by_game_value(winning)

    def choose_sign(self, _table: "Table", hand: list[Card]) -> SignType:
        """Decide whether to sign this turn and which sign."""
        if (
            self.rng.random() > self.thresholds.abstain_probability
            or self.rng.random() < self.sign_noise
        ):
            return SignType.NONE

        ideal = self.compute_ideal_sign(hand)
        if ideal != SignType.BUSSO:
            self.planned_busso_suit = None
        logger.debug("%s chose sign %s", self, ideal.value)
        return ideal

    def compute_ideal_sign(self, hand: list[Card]) -> SignType:
        """Compute the sign that best describes the hand (deterministic).

        A BUSSO also plans the announced suit for the next lead.
        """
        busso_suit = self.select_busso_suit(hand)
        if busso_suit is not None:
            self.planned_busso_suit = busso_suit
            return SignType.BUSSO

        strong = sum(1 for c in hand if self._is_strong(c))
        point_cards = sum(1 for c in hand if c.points > 0)
        if point_cards >= self.thresholds.liscio_min_point_cards:
            return SignType.LISCIO
        if strong == 0 and point_cards <= self.thresholds.volo_max_point_cards:
            return SignType.VOLO
        return SignType.NONE

    def select_busso_suit(self, hand: list[Card]) -> Suit | None:
        """Find the suit the bot controls best, if any.

        A suit qualifies with enough strong cards, or with one top card and
        enough cards of the suit. Ties prefer more strong cards, then more
        top cards, then longer suits.
        """
        by_suit: dict[Suit, list[Card]] = {}
        for card in hand:
            by_suit.setdefault(card.suit, []).append(card)

        best_suit: Suit | None = None
        best_key = (-1, -1, -1)
        for suit in Suit:
            cards = by_suit.get(suit)
            if not cards:
                continue
            strong = sum(1 for c in cards if self._is_strong(c))
            top = sum(1 for c in cards if self._is_strong(c) and self._is_top(c))
            qualifies = strong >= self.thresholds.busso_min_strong or (
                top == 1 and len(cards) >= self.thresholds.busso_min_suit_with_top
            )
            if not qualifies:
                continue
            key = (strong, top, len(cards))
            if key > best_key:
                best_suit, best_key = suit, key
        return best_suit

    def _is_strong(self, card: Card) -> bool:
        return card.game_value >= self.thresholds.strong_game_value

    def _is_top(self, card: Card) -> bool:
        return card.game_value >= self.thresholds.top_game_value

    def _min_by_game_value(self, cards: list[Card]) -> Card:
        return min(cards, key=lambda c: c.game_value)

    def _highest_points_of_suit_or_lowest(self, suit: Suit, legal: list[Card]) -> Card:
        of_suit = [c for c in legal if c.suit == suit]
        if not of_suit:
            return self._min_by_game_value(legal)
        return max(of_suit, key=lambda c: c.points)

    def _best_lead_card(self, legal: list[Card]) -> Card:
        """Lead an Ace or better if held, else the weakest card."""
        strongest = max(legal, key=lambda c: c.game_value)
        if strongest.game_value >= Rank.ASSO.game_value:
            return strongest
        return self._min_by_game_value(legal)
