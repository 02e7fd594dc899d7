"""Response models and DTOs."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from tresette.bots.base_bot import BotDifficulty
from tresette.constants import WINNING_SCORES
from tresette.models.events import GameEventType
from tresette.models.sign import SignType

__all__ = [
    "AcceptedResponse",
    "CardInfo",
    "CardListResponse",
    "Command",
    "CreateGameRequest",
    "CreateGameResponse",
    "ErrorResponse",
    "EventListResponse",
    "HandResponse",
    "MoveCardRequest",
    "PlayCardRequest",
    "ServerMessage",
    "SignRequest",
]


class Command(StrEnum):
    """WebSocket commands.

    Outbound event commands mirror the game event types; SIGN is used both ways.
    """

    # Client -> server
    PLAY = "PLAY"
    SIGN = "SIGN"
    MOVE_CARD = "MOVE_CARD"
    PAUSE = "PAUSE"
    RESUME = "RESUME"
    NEXT_DEAL = "NEXT_DEAL"
    SYNC_STATE = "SYNC_STATE"

    # Server -> client
    STATE = "STATE"
    ACK = "ACK"
    ERROR = "ERROR"
    DEAL_STARTED = GameEventType.DEAL_STARTED.value
    TRICK_STARTED = GameEventType.TRICK_STARTED.value
    CARD_PLAYED = GameEventType.CARD_PLAYED.value
    TRICK_ENDED = GameEventType.TRICK_ENDED.value
    DEAL_ENDED = GameEventType.DEAL_ENDED.value
    SCORES_UPDATED = GameEventType.SCORES_UPDATED.value
    GAME_ENDED = GameEventType.GAME_ENDED.value


@dataclass
class ServerMessage:
    """Message sent from server to clients via WebSocket.

    Attributes:
        command: Command type
        game_id: Game identifier
        content: Message payload (varies by command)

    """

    command: Command
    game_id: str
    content: Any

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "command": self.command.value,
            "content": self.content,
        }


class CreateGameRequest(BaseModel):
    """Request to create a new match against three bots."""

    username: str | None = Field(default=None, min_length=1, max_length=32)
    difficulty: BotDifficulty | None = None
    winning_score: int | None = None
    seed: int | None = None

    @field_validator("winning_score")
    @classmethod
    def check_winning_score(cls, value: int | None) -> int | None:
        """Reject match targets other than the selectable ones."""
        if value is not None and value not in WINNING_SCORES:
            msg = f"winning_score must be one of {WINNING_SCORES}"
            raise ValueError(msg)
        return value


class CreateGameResponse(BaseModel):
    """Response for game creation."""

    game_id: str
    player_id: str
    message: str = "Game created successfully"


class PlayCardRequest(BaseModel):
    """Card to play, by code (e.g. ``ASSO_DENARI``)."""

    card: str
    player_id: str = "P1"


class SignRequest(BaseModel):
    """Sign to send."""

    sign: SignType
    player_id: str = "P1"


class MoveCardRequest(BaseModel):
    """Hand reordering request."""

    from_index: int
    to_index: int


class AcceptedResponse(BaseModel):
    """Outcome of a proposal."""

    accepted: bool


class HandResponse(BaseModel):
    """Human hand after a reorder."""

    hand: list[str]


class CardInfo(BaseModel):
    """Card definition."""

    code: str
    suit: str
    rank: str
    name: str
    game_value: int
    points: float


class CardListResponse(BaseModel):
    """Response for card list endpoint."""

    cards: list[CardInfo]


class EventListResponse(BaseModel):
    """Recorded events of a game."""

    game_id: str
    events: list[dict[str, Any]]


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: str | None = None
