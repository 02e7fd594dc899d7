"""API routes."""

import logging
import random
from typing import Any

from fastapi import APIRouter, HTTPException, WebSocket

from tresette.api.responses import (
    AcceptedResponse,
    CardInfo,
    CardListResponse,
    CreateGameRequest,
    CreateGameResponse,
    EventListResponse,
    HandResponse,
    MoveCardRequest,
    PlayCardRequest,
    SignRequest,
)
from tresette.api.websocket import connection_manager
from tresette.bots.base_bot import BotDifficulty
from tresette.config import settings
from tresette.models.card import get_all_cards
from tresette.models.exceptions import PlayerNotFoundError
from tresette.services.game_session import GameSession, MatchContext
from tresette.services.name_pool import NamePool

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_session(game_id: str) -> GameSession:
    session = connection_manager.get_session(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return session


@router.post("/games")
async def create_game(request: CreateGameRequest) -> CreateGameResponse:
    """Create a match for one human against three bots."""
    rng = random.Random(request.seed)  # noqa: S311
    context = MatchContext(
        username=request.username or settings.default_username,
        difficulty=request.difficulty or BotDifficulty(settings.default_difficulty),
        winning_score=request.winning_score or settings.default_winning_score,
        name_pool=NamePool(rng=random.Random(rng.getrandbits(32))),  # noqa: S311
        rng=rng,
    )
    session = GameSession(context)
    connection_manager.add_session(session)
    logger.info("Created game %s for %s", session.id, context.username)
    return CreateGameResponse(game_id=session.id, player_id=session.human_player.id)


@router.get("/games/cards")
async def get_cards() -> CardListResponse:
    """Get all card definitions."""
    return CardListResponse(
        cards=[
            CardInfo(
                code=card.code,
                suit=card.suit.name,
                rank=card.rank.name,
                name=str(card),
                game_value=card.game_value,
                points=card.points,
            )
            for card in get_all_cards()
        ]
    )


@router.get("/games/{game_id}")
async def get_game(game_id: str) -> dict[str, Any]:
    """Get the current state of a game."""
    return _get_session(game_id).to_dict()


@router.post("/games/{game_id}/start")
async def start_game(game_id: str) -> AcceptedResponse:
    """Deal the first hand."""
    return AcceptedResponse(accepted=_get_session(game_id).start_game())


@router.post("/games/{game_id}/pause")
async def pause_game(game_id: str) -> AcceptedResponse:
    """Pause the game."""
    _get_session(game_id).pause()
    return AcceptedResponse(accepted=True)


@router.post("/games/{game_id}/resume")
async def resume_game(game_id: str) -> AcceptedResponse:
    """Resume the game."""
    _get_session(game_id).resume()
    return AcceptedResponse(accepted=True)


@router.post("/games/{game_id}/next-deal")
async def next_deal(game_id: str) -> AcceptedResponse:
    """Start the next deal once the current one is over."""
    return AcceptedResponse(accepted=_get_session(game_id).start_next_deal())


@router.post("/games/{game_id}/confirm")
async def confirm_deal(game_id: str) -> AcceptedResponse:
    """Acknowledge the deal results, resume and deal again."""
    return AcceptedResponse(accepted=_get_session(game_id).confirm_deal_results())


@router.post("/games/{game_id}/stop")
async def stop_game(game_id: str) -> AcceptedResponse:
    """Stop the game and drop it."""
    _get_session(game_id)
    connection_manager.remove_session(game_id)
    return AcceptedResponse(accepted=True)


@router.post("/games/{game_id}/play")
async def play_card(game_id: str, request: PlayCardRequest) -> AcceptedResponse:
    """Play a card from the human hand."""
    session = _get_session(game_id)
    try:
        accepted = session.play_card(request.player_id, request.card)
    except PlayerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    if not accepted:
        logger.warning("Play %s rejected in game %s", request.card, game_id)
    return AcceptedResponse(accepted=accepted)


@router.post("/games/{game_id}/sign")
async def make_sign(game_id: str, request: SignRequest) -> AcceptedResponse:
    """Send a sign before leading a trick."""
    session = _get_session(game_id)
    try:
        accepted = session.make_sign(request.player_id, request.sign)
    except PlayerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    if not accepted:
        logger.warning("Sign %s rejected in game %s", request.sign.value, game_id)
    return AcceptedResponse(accepted=accepted)


@router.post("/games/{game_id}/hand/move")
async def move_card(game_id: str, request: MoveCardRequest) -> HandResponse:
    """Reorder the human hand."""
    session = _get_session(game_id)
    try:
        hand = session.move_human_card(request.from_index, request.to_index)
    except IndexError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return HandResponse(hand=hand)


@router.get("/games/{game_id}/events")
async def get_events(game_id: str) -> EventListResponse:
    """Get every event recorded for a game, oldest first."""
    session = _get_session(game_id)
    return EventListResponse(game_id=game_id, events=session.recorder.events)


@router.websocket("/games/{game_id}/ws")
async def game_socket(websocket: WebSocket, game_id: str) -> None:
    """Stream game events and accept game commands."""
    if connection_manager.get_session(game_id) is None:
        # Must accept before closing to avoid HTTP 403
        await websocket.accept()
        await websocket.close(code=4004, reason="Game not found")
        return

    await connection_manager.connect(websocket, game_id)
    await connection_manager.handle_client_messages(websocket, game_id)
