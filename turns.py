"""
Turn rotation.

A room has a single turn pointer (``Room.turn_player_id``) that moves to the
next member in join order, wrapping around at the end.
"""

import logging
from typing import Optional

from sqlalchemy import select, update

from errors import Conflict, Forbidden, NotFound
from models import ROOM_IN_PROGRESS, Player, Room, db

logger = logging.getLogger(__name__)


def next_turn_holder(member_ids: list[int], current: Optional[int]) -> Optional[int]:
    """
    Return the member after ``current``, cycling back to the first.

    When ``current`` is not a member the turn goes to the first member.
    """
    if not member_ids:
        return None
    if current in member_ids:
        return member_ids[(member_ids.index(current) + 1) % len(member_ids)]
    return member_ids[0]


def member_ids(code: str) -> list[int]:
    return list(db.session.scalars(
        select(Player.user_id).where(Player.room_code == code).order_by(Player.id)
    ))


def pass_turn(code: str, caller_id: int, enforce_turn_order: bool = True) -> int:
    """
    Hand the turn to the next member and return their user id.

    The pointer is advanced with a compare-and-set on the previous holder, so
    two requests racing on the same room cannot both succeed.
    """
    ids = member_ids(code)
    if not ids:
        raise NotFound("Room not found")

    room = db.session.get(Room, code)
    if room is None:
        raise NotFound("Room not found")
    if room.status != ROOM_IN_PROGRESS:
        raise Conflict("Game is not in progress")
    if caller_id not in ids:
        raise Forbidden("You are not in this room")

    current = room.turn_player_id
    if enforce_turn_order and current != caller_id:
        raise Forbidden("It's not your turn")

    next_player = next_turn_holder(ids, current)
    result = db.session.execute(
        update(Room)
        .where(Room.code == code, Room.turn_player_id == current)
        .values(turn_player_id=next_player)
    )
    if result.rowcount != 1:
        db.session.rollback()
        raise Conflict("Turn was already passed")
    db.session.commit()

    logger.info(
        f"Turn passed from {current} to {next_player}",
        extra={"room_code": code, "user_id": caller_id},
    )
    return next_player
