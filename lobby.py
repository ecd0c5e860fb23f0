"""
Room directory and membership.

A room is created by its host and identified by a short code such as
``"AB12"``. Members join in order; that order decides their team (1, 2, 1,
2, ...) and the turn rotation once the game starts.
"""

import logging
import random
import string
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError

from errors import Conflict, Forbidden, NotFound
from models import ROOM_WAITING, HandCard, Player, Room, db
from turns import next_turn_holder

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
MAX_CREATE_ATTEMPTS = 5


def generate_code(length: int = 4) -> str:
    return "".join(random.choices(CODE_ALPHABET, k=length))


def unique_room_code(length: int = 4) -> str:
    """Generate a code not used by any existing room."""
    while True:
        code = generate_code(length)
        if db.session.get(Room, code) is None:
            return code


def team_for_position(position: int) -> int:
    """Team for the member joining at ``position`` (0-based)."""
    return 1 if position % 2 == 0 else 2


# -------------------------
# Room directory
# -------------------------
def list_rooms() -> list[Room]:
    return Room.query.order_by(Room.created_at).all()


def get_room(code: str) -> Room:
    room = db.session.get(Room, code)
    if room is None:
        raise NotFound("Room not found")
    return room


def create_room(user_id: int, code_length: int = 4) -> str:
    """Create a room hosted by ``user_id`` and return its code."""
    for _ in range(MAX_CREATE_ATTEMPTS):
        code = unique_room_code(code_length)
        room = Room(code=code, status=ROOM_WAITING, turn_player_id=user_id)
        room.players.append(Player(user_id=user_id, team=team_for_position(0), host=True))
        db.session.add(room)
        try:
            db.session.commit()
        except IntegrityError:
            # another request took the code between the check and the insert
            db.session.rollback()
            logger.warning(f"Room code {code} collided, retrying")
            continue
        logger.info(f"Created room {code}", extra={"room_code": code, "user_id": user_id})
        return code
    raise Conflict("Could not allocate a room code")


def delete_room(code: str, user_id: int) -> None:
    room = get_room(code)
    if room.players and not any(p.host and p.user_id == user_id for p in room.players):
        raise Forbidden("Only the host can delete the room")
    db.session.delete(room)
    db.session.commit()
    logger.info(f"Deleted room {code}", extra={"room_code": code, "user_id": user_id})


# -------------------------
# Membership
# -------------------------
def get_players(code: str) -> list[Player]:
    return list(get_room(code).players)


def get_membership(code: str, user_id: int) -> Optional[Player]:
    return Player.query.filter_by(room_code=code, user_id=user_id).first()


def require_member(room: Room, user_id: int) -> Player:
    for player in room.players:
        if player.user_id == user_id:
            return player
    raise Forbidden("You are not in this room")


def is_player_in_room(code: str, user_id: int) -> bool:
    return get_membership(code, user_id) is not None


def is_player_host(code: str, user_id: int) -> bool:
    return Player.query.filter_by(room_code=code, user_id=user_id, host=True).first() is not None


def join_room(code: str, user_id: int) -> Player:
    """
    Add ``user_id`` to the room, alternating teams by join order.

    Joining twice returns the existing membership. There is no capacity check
    here; the 2-or-4 player rule is applied when the game starts.
    """
    room = get_room(code)
    existing = get_membership(code, user_id)
    if existing:
        return existing
    if room.status != ROOM_WAITING:
        raise Conflict(f"Cannot join a room that is {room.status}")

    player = Player(user_id=user_id, team=team_for_position(len(room.players)), host=False)
    room.players.append(player)
    db.session.commit()
    logger.info(
        f"Joined room in team {player.team}",
        extra={"room_code": code, "user_id": user_id},
    )
    return player


def _remove_member(room: Room, player: Player) -> Optional[Room]:
    """
    Drop ``player`` from ``room`` and keep the room consistent.

    The host flag moves to the earliest remaining member, the turn moves on
    if the leaver held it, and the room is deleted once empty. Returns the
    room, or None if it was deleted.
    """
    code = room.code
    ids = [p.user_id for p in room.players]

    db.session.execute(
        delete(HandCard).where(HandCard.room_code == code, HandCard.player_id == player.user_id)
    )
    room.players.remove(player)

    if not room.players:
        db.session.delete(room)
        db.session.commit()
        logger.info("Room emptied and deleted", extra={"room_code": code})
        return None

    if player.host:
        room.players[0].host = True
    if room.turn_player_id == player.user_id:
        room.turn_player_id = next_turn_holder(ids, player.user_id)

    db.session.commit()
    return room


def leave_room(code: str, user_id: int) -> Optional[Room]:
    room = get_room(code)
    player = get_membership(code, user_id)
    if player is None:
        raise NotFound("Player not in room")
    result = _remove_member(room, player)
    logger.info("Left room", extra={"room_code": code, "user_id": user_id})
    return result


def give_up(code: str, user_id: int) -> int:
    """Leave a running game; returns the id of the player who gave up."""
    room = get_room(code)
    player = get_membership(code, user_id)
    if player is None:
        raise NotFound("Player not in room")
    player.in_game = False
    db.session.flush()
    _remove_member(room, player)
    logger.info("Gave up", extra={"room_code": code, "user_id": user_id})
    return user_id
