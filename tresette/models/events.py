"""Outbound domain events and the deal snapshot they carry.

Events are delivered synchronously and in order to subscribers of a deal
(and forwarded by the game manager):
DealStarted -> TrickStarted -> CardPlayed* -> TrickEnded -> ... -> DealEnded
-> ScoresUpdated -> GameEnded.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar

from tresette.models.sign import SignEvent


class GameEventType(str, Enum):
    """Types of outbound game events."""

    DEAL_STARTED = "DEAL_STARTED"
    TRICK_STARTED = "TRICK_STARTED"
    CARD_PLAYED = "CARD_PLAYED"
    TRICK_ENDED = "TRICK_ENDED"
    SIGN = "SIGN"
    DEAL_ENDED = "DEAL_ENDED"
    SCORES_UPDATED = "SCORES_UPDATED"
    GAME_ENDED = "GAME_ENDED"


def _frozen_map(data: dict[str, Any]) -> MappingProxyType:
    return MappingProxyType(dict(data))


@dataclass(frozen=True)
class DealSnapshot:
    """Immutable view of a deal at the moment an event was emitted.

    Only the human seat's hand is exposed card by card; other hands are
    reported as counts.
    """

    deal_index: int
    current_player_id: str
    hand_sizes: MappingProxyType
    won_counts: MappingProxyType
    table_cards: tuple[str, ...]
    last_trick_winner_id: str | None
    can_current_player_sign: bool
    paused: bool
    human_hand: tuple[str, ...] = ()

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        *,
        deal_index: int,
        current_player_id: str,
        hand_sizes: dict[str, int],
        won_counts: dict[str, int],
        table_cards: list[str],
        last_trick_winner_id: str | None,
        can_current_player_sign: bool,
        paused: bool,
        human_hand: list[str] | None = None,
    ) -> "DealSnapshot":
        """Build a snapshot from mutable collections, copying them."""
        return cls(
            deal_index=deal_index,
            current_player_id=current_player_id,
            hand_sizes=_frozen_map(hand_sizes),
            won_counts=_frozen_map(won_counts),
            table_cards=tuple(table_cards),
            last_trick_winner_id=last_trick_winner_id,
            can_current_player_sign=can_current_player_sign,
            paused=paused,
            human_hand=tuple(human_hand or ()),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for transmission."""
        return {
            "deal_index": self.deal_index,
            "current_player_id": self.current_player_id,
            "hand_sizes": dict(self.hand_sizes),
            "won_counts": dict(self.won_counts),
            "table_cards": list(self.table_cards),
            "last_trick_winner_id": self.last_trick_winner_id,
            "can_current_player_sign": self.can_current_player_sign,
            "paused": self.paused,
            "human_hand": list(self.human_hand),
        }


@dataclass(frozen=True)
class ModelEvent:
    """Base class for all outbound events."""

    event_type: ClassVar[GameEventType]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for transmission."""
        return {"event_type": self.event_type.value}


@dataclass(frozen=True)
class DealEvent(ModelEvent):
    """Event scoped to a deal, carrying its snapshot."""

    snapshot: DealSnapshot

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for transmission."""
        return {**super().to_dict(), "snapshot": self.snapshot.to_dict()}


@dataclass(frozen=True)
class DealStarted(DealEvent):
    """Cards have been dealt."""

    event_type: ClassVar[GameEventType] = GameEventType.DEAL_STARTED


@dataclass(frozen=True)
class TrickStarted(DealEvent):
    """A new trick is open."""

    event_type: ClassVar[GameEventType] = GameEventType.TRICK_STARTED


@dataclass(frozen=True)
class TrickEnded(DealEvent):
    """A trick was resolved and collected by its winner."""

    event_type: ClassVar[GameEventType] = GameEventType.TRICK_ENDED


@dataclass(frozen=True)
class DealEnded(DealEvent):
    """All hands are empty."""

    event_type: ClassVar[GameEventType] = GameEventType.DEAL_ENDED


@dataclass(frozen=True)
class CardPlayed(DealEvent):
    """A card moved from a hand to the table."""

    event_type: ClassVar[GameEventType] = GameEventType.CARD_PLAYED

    player_id: str = ""
    card_code: str = ""
    card_text: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for transmission."""
        return {
            **super().to_dict(),
            "player_id": self.player_id,
            "card_code": self.card_code,
            "card_text": self.card_text,
        }


@dataclass(frozen=True)
class SignMade(DealEvent):
    """A trick leader sent a sign."""

    event_type: ClassVar[GameEventType] = GameEventType.SIGN

    sign: SignEvent | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for transmission."""
        data = super().to_dict()
        data["sign"] = self.sign.to_dict() if self.sign else None
        return data


@dataclass(frozen=True)
class ScoresUpdated(ModelEvent):
    """A finished deal has been scored."""

    event_type: ClassVar[GameEventType] = GameEventType.SCORES_UPDATED

    deal_points: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    cumulative_scores: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    deal_winner_id: str | None = None
    last_deal_snapshot: DealSnapshot | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for transmission."""
        return {
            **super().to_dict(),
            "deal_points": dict(self.deal_points),
            "cumulative_scores": dict(self.cumulative_scores),
            "deal_winner_id": self.deal_winner_id,
            "last_deal_snapshot": (
                self.last_deal_snapshot.to_dict() if self.last_deal_snapshot else None
            ),
        }


@dataclass(frozen=True)
class GameEnded(ModelEvent):
    """The match target was reached."""

    event_type: ClassVar[GameEventType] = GameEventType.GAME_ENDED

    final_scores: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    winner_ids: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for transmission."""
        return {
            **super().to_dict(),
            "final_scores": dict(self.final_scores),
            "winner_ids": list(self.winner_ids),
        }


def frozen_scores(scores: dict[str, int]) -> MappingProxyType:
    """Wrap a score dict in a read-only copy for an event."""
    return _frozen_map(scores)
