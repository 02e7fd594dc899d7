"""WebSocket connection manager and session registry."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from tresette.api.responses import (
    Command,
    MoveCardRequest,
    PlayCardRequest,
    ServerMessage,
    SignRequest,
)
from tresette.models.exceptions import PlayerNotFoundError

if TYPE_CHECKING:
    from tresette.models.events import ModelEvent
    from tresette.services.game_session import GameSession

logger = logging.getLogger(__name__)

_CONNECTION_ERRORS = (WebSocketDisconnect, RuntimeError, ConnectionError, OSError)


class ConnectionManager:
    """Holds the live sessions and the WebSocket clients watching them.

    Game events are queued as they happen and sent by the :meth:`run`
    background task; direct replies to a client are sent immediately.
    """

    def __init__(self) -> None:
        """Initialize the connection manager."""
        # game_id -> connected sockets
        self.active_connections: dict[str, list[WebSocket]] = {}
        self.message_queue: asyncio.Queue[ServerMessage] = asyncio.Queue()
        self.sessions: dict[str, GameSession] = {}

    def add_session(self, session: GameSession) -> None:
        """Register a session and forward its events to connected clients."""
        self.sessions[session.id] = session
        session.subscribe(lambda event: self._on_event(session.id, event))

    def get_session(self, game_id: str) -> GameSession | None:
        """Get a session by id."""
        return self.sessions.get(game_id)

    def remove_session(self, game_id: str) -> None:
        """Stop a session and forget it."""
        session = self.sessions.pop(game_id, None)
        if session is not None:
            session.stop_game()

    def clear(self) -> None:
        """Stop and drop every session."""
        for game_id in list(self.sessions):
            self.remove_session(game_id)
        self.active_connections.clear()

    def _on_event(self, game_id: str, event: ModelEvent) -> None:
        message = ServerMessage(
            command=Command(event.event_type.value),
            game_id=game_id,
            content=event.to_dict(),
        )
        self.message_queue.put_nowait(message)

    async def connect(self, websocket: WebSocket, game_id: str) -> None:
        """Accept a client and send it the current state."""
        await websocket.accept()
        self.active_connections.setdefault(game_id, []).append(websocket)
        logger.info("Client connected to game %s", game_id)

        session = self.sessions.get(game_id)
        if session is not None:
            await self.send_state(websocket, session)

    def disconnect(self, websocket: WebSocket, game_id: str) -> None:
        """Remove a client connection."""
        connections = self.active_connections.get(game_id)
        if connections and websocket in connections:
            connections.remove(websocket)
            logger.info("Client disconnected from game %s", game_id)
            if not connections:
                del self.active_connections[game_id]

    async def send_personal_message(
        self, message: ServerMessage, websocket: WebSocket
    ) -> None:
        """Send a message to one client."""
        try:
            await websocket.send_json(message.to_dict())
        except _CONNECTION_ERRORS:
            logger.warning("Connection lost to a client of game %s", message.game_id)
            self.disconnect(websocket, message.game_id)

    async def send_state(self, websocket: WebSocket, session: GameSession) -> None:
        """Send the full session state to one client."""
        await self.send_personal_message(
            ServerMessage(command=Command.STATE, game_id=session.id, content=session.to_dict()),
            websocket,
        )

    async def broadcast_to_game(self, message: ServerMessage, game_id: str) -> None:
        """Send a message to every client of a game."""
        disconnected = []
        for websocket in list(self.active_connections.get(game_id, [])):
            try:
                await websocket.send_json(message.to_dict())
            except _CONNECTION_ERRORS:
                logger.warning("Connection lost to a client of game %s", game_id)
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(websocket, game_id)

    async def run(self) -> None:
        """Background task draining the event queue to the clients."""
        logger.info("WebSocket manager started")

        while True:
            try:
                message = await self.message_queue.get()
                logger.debug("Dispatching %s to game %s", message.command.value, message.game_id)
                await self.broadcast_to_game(message, message.game_id)
            except asyncio.CancelledError:
                logger.info("WebSocket manager shutting down")
                break
            except _CONNECTION_ERRORS as e:
                logger.warning("WebSocket manager connection error: %s", e)
                await asyncio.sleep(0.1)

    async def handle_client_messages(self, websocket: WebSocket, game_id: str) -> None:
        """Receive commands from a client until it disconnects."""
        try:
            while True:
                data = await websocket.receive_text()
                message = json.loads(data)
                command = message.get("command", "")
                content = message.get("content") or {}
                logger.info("Received %s for game %s", command, game_id)

                session = self.sessions.get(game_id)
                if session is None:
                    logger.warning("Game %s not found", game_id)
                    await self._send_error(websocket, game_id, "Game not found")
                    continue

                await self.handle_command(websocket, session, command, content)

        except WebSocketDisconnect:
            self.disconnect(websocket, game_id)

        except (RuntimeError, ConnectionError, OSError, json.JSONDecodeError) as e:
            logger.warning("Error handling message for game %s: %s", game_id, e)
            self.disconnect(websocket, game_id)

    async def handle_command(
        self,
        websocket: WebSocket,
        session: GameSession,
        command: str,
        content: dict[str, Any],
    ) -> None:
        """Route one client command to its handler.

        Args:
            websocket: Client that sent the command
            session: Target session
            command: Command type
            content: Command payload

        """
        handlers = {
            Command.PLAY: self._handle_play,
            Command.SIGN: self._handle_sign,
            Command.MOVE_CARD: self._handle_move_card,
            Command.PAUSE: self._handle_pause,
            Command.RESUME: self._handle_resume,
            Command.NEXT_DEAL: self._handle_next_deal,
            Command.SYNC_STATE: self._handle_sync_state,
        }

        handler = handlers.get(command)
        if handler is None:
            logger.warning("Unknown command: %s", command)
            await self._send_error(websocket, session.id, f"Unknown command: {command}")
            return
        try:
            await handler(websocket, session, content)
        except (ValidationError, PlayerNotFoundError, IndexError) as e:
            logger.warning("Rejected %s for game %s: %s", command, session.id, e)
            await self._send_error(websocket, session.id, str(e))

    async def _handle_play(
        self, websocket: WebSocket, session: GameSession, content: dict[str, Any]
    ) -> None:
        request = PlayCardRequest.model_validate(content)
        accepted = session.play_card(request.player_id, request.card)
        await self._send_ack(websocket, session.id, Command.PLAY, accepted=accepted)

    async def _handle_sign(
        self, websocket: WebSocket, session: GameSession, content: dict[str, Any]
    ) -> None:
        request = SignRequest.model_validate(content)
        accepted = session.make_sign(request.player_id, request.sign)
        await self._send_ack(websocket, session.id, Command.SIGN, accepted=accepted)

    async def _handle_move_card(
        self, websocket: WebSocket, session: GameSession, content: dict[str, Any]
    ) -> None:
        request = MoveCardRequest.model_validate(content)
        hand = session.move_human_card(request.from_index, request.to_index)
        await self._send_ack(websocket, session.id, Command.MOVE_CARD, accepted=True, hand=hand)

    async def _handle_pause(
        self, websocket: WebSocket, session: GameSession, _content: dict[str, Any]
    ) -> None:
        session.pause()
        await self._send_ack(websocket, session.id, Command.PAUSE, accepted=True)

    async def _handle_resume(
        self, websocket: WebSocket, session: GameSession, _content: dict[str, Any]
    ) -> None:
        session.resume()
        await self._send_ack(websocket, session.id, Command.RESUME, accepted=True)

    async def _handle_next_deal(
        self, websocket: WebSocket, session: GameSession, _content: dict[str, Any]
    ) -> None:
        """Handle NEXT_DEAL: confirm the finished deal and deal again."""
        accepted = session.confirm_deal_results()
        await self._send_ack(websocket, session.id, Command.NEXT_DEAL, accepted=accepted)

    async def _handle_sync_state(
        self, websocket: WebSocket, session: GameSession, _content: dict[str, Any]
    ) -> None:
        await self.send_state(websocket, session)

    async def _send_ack(
        self, websocket: WebSocket, game_id: str, command: str, **content: Any
    ) -> None:
        message = ServerMessage(
            command=Command.ACK, game_id=game_id, content={"command": command, **content}
        )
        await self.send_personal_message(message, websocket)

    async def _send_error(self, websocket: WebSocket, game_id: str, detail: str) -> None:
        await self.send_personal_message(
            ServerMessage(command=Command.ERROR, game_id=game_id, content={"error": detail}),
            websocket,
        )


# Global connection manager instance
connection_manager = ConnectionManager()
