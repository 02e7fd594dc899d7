"""Random bot that makes random legal moves."""

from typing import TYPE_CHECKING

from tresette.bots.base_bot import BaseBot
from tresette.models.card import Card
from tresette.models.sign import SignType

if TYPE_CHECKING:
    from tresette.models.team import Team
    from tresette.models.trick import Table


class RandomBot(BaseBot):
    """Bot that plays a uniformly random legal card and never signs.

    Serves as a baseline and as the fallback when a strategy fails.
    """

    def choose_card(self, table: "Table", hand: list[Card], _team: "Team | None") -> Card:
        """Pick a random legal card.

        Raises:
            ValueError: If the hand is empty.

        """
        playable = self._legal_moves(table, hand)
        if not playable:
            msg = "No cards to play"
            raise ValueError(msg)
        return self.rng.choice(playable)

    def choose_sign(self, _table: "Table", _hand: list[Card]) -> SignType:
        """Never sign."""
        return SignType.NONE
