"""Partner signs and the once-per-trick sign protocol."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from tresette.constants import HUMAN_PARTNER_SEAT
from tresette.models.exceptions import SignNotAllowedError

if TYPE_CHECKING:
    from tresette.models.player import Player
    from tresette.models.trick import Table

logger = logging.getLogger(__name__)


class SignType(str, Enum):
    """Signs a trick leader may give to the partner.

    BUSSO asks the partner to take the trick and return the suit, VOLO says
    the suit is done, LISCIO says only low cards are left.
    """

    NONE = "NONE"
    BUSSO = "BUSSO"
    VOLO = "VOLO"
    LISCIO = "LISCIO"


@dataclass(frozen=True)
class SignEvent:
    """A sign sent at the table.

    Attributes:
        sender_id: Player who sent the sign
        sender_name: Display name of the sender
        sign_type: The sign
        from_teammate_of_human: True when sent by the human's partner seat

    """

    sender_id: str
    sender_name: str
    sign_type: SignType
    from_teammate_of_human: bool

    @property
    def display_message(self) -> str:
        """Human-readable description."""
        return f"{self.sender_name} made the sign {self.sign_type.value.lower()}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for transmission."""
        return {
            "sender_id": self.sender_id,
            "sender_name": self.sender_name,
            "sign_type": self.sign_type.value,
            "from_teammate_of_human": self.from_teammate_of_human,
        }


class SignManager:
    """Enforces the sign rules during a deal.

    Only one sign per trick, only by the player whose turn it is, and only
    before the first card of the trick is played.
    """

    def __init__(self, players: Sequence["Player"]) -> None:
        """Initialize with the seated players (seat 0 is the human)."""
        self._players = list(players)
        self.sign_used_this_trick = False

    def can_player_make_sign(
        self, player: "Player | None", table: "Table | None", current_turn_player: "Player | None"
    ) -> bool:
        """Check whether ``player`` may send a sign right now."""
        if self.sign_used_this_trick:
            return False
        if player is None or table is None:
            return False
        if player is not current_turn_player:
            return False
        return table.is_empty()

    def send_sign(
        self,
        sender: "Player",
        sign_type: SignType,
        table: "Table",
        current_turn_player: "Player",
    ) -> SignEvent:
        """Send a sign and notify every bot at the table.

        Raises:
            SignNotAllowedError: If the sign is not authorized at send time.

        """
        if not self.can_player_make_sign(sender, table, current_turn_player):
            msg = f"{sender.id} cannot make a sign now"
            raise SignNotAllowedError(msg)

        self.sign_used_this_trick = True
        seat = next(i for i, p in enumerate(self._players) if p is sender)
        event = SignEvent(
            sender_id=sender.id,
            sender_name=sender.username,
            sign_type=sign_type,
            from_teammate_of_human=seat == HUMAN_PARTNER_SEAT,
        )
        logger.debug("%s signs %s", sender.id, sign_type.value)

        for player in self._players:
            if player.is_bot:
                player.on_sign(event)
        return event

    def on_trick_ended(self) -> None:
        """Allow a new sign in the next trick."""
        self.sign_used_this_trick = False

    def reset_deal(self) -> None:
        """Reset sign state for a new deal."""
        self.sign_used_this_trick = False
