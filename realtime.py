"""
Room-scoped Socket.IO relay.

Clients emit lifecycle events (``joinRoom``, ``passTurn``, ...) and the relay
forwards them to the other sockets of the same room. It never reads or
writes the database; the REST layer calls ``notify`` after a commit so that
the room hears about changes even when no client relays them.
"""

import logging

from flask import request
from flask_socketio import SocketIO, emit, join_room, leave_room

logger = logging.getLogger(__name__)

socketio = SocketIO()


def room_channel(code) -> str:
    return f"room_{code}"


def notify(code: str, event: str, payload=None) -> None:
    """Broadcast a committed state change to everyone in the room."""
    logger.debug(f"notify {event}", extra={"room_code": code, "event": event})
    socketio.emit(event, payload, to=room_channel(code))


def _forward(event: str, room, payload=None) -> None:
    if payload is None:
        emit(event, to=room_channel(room), include_self=False)
    else:
        emit(event, payload, to=room_channel(room), include_self=False)


def _missing_room(event: str) -> None:
    emit("error", {"event": event, "message": "Missing room"})


# -------------------------
# Socket handlers
# -------------------------
@socketio.on("connect")
def on_connect(auth=None):
    logger.info(f"Client connected {request.sid}")


@socketio.on("disconnect")
def on_disconnect(reason=None):
    logger.info(f"Client disconnected {request.sid}")


@socketio.on("joinRoom")
def on_join_room(room=None, player=None):
    if not room:
        return _missing_room("joinRoom")
    join_room(room_channel(room))
    _forward("playerJoined", room, player)
    logger.info(f"Player {player} joined room", extra={"room_code": room})


@socketio.on("leaveRoom")
def on_leave_room(room=None, player=None):
    if not room:
        return _missing_room("leaveRoom")
    _forward("playerLeft", room, player)
    leave_room(room_channel(room))
    logger.info(f"Player {player} left room", extra={"room_code": room})


@socketio.on("startGame")
def on_start_game(room=None):
    if not room:
        return _missing_room("startGame")
    _forward("gameStarted", room)


@socketio.on("joinGame")
def on_join_game(game=None, player=None):
    if not game:
        return _missing_room("joinGame")
    join_room(room_channel(game))
    logger.info(f"Player {player} joined game", extra={"room_code": game})


@socketio.on("passTurn")
def on_pass_turn(game=None, player=None):
    if not game:
        return _missing_room("passTurn")
    _forward("turnPassed", game, player)
    logger.info(f"Player {player} passed turn", extra={"room_code": game})


@socketio.on("playCard")
def on_play_card(game=None, player=None):
    if not game:
        return _missing_room("playCard")
    _forward("cardPlayed", game, player)
    logger.info(f"Player {player} played card", extra={"room_code": game})


@socketio.on("endGame")
def on_end_game(game=None):
    if not game:
        return _missing_room("endGame")
    _forward("gameEnded", game)
