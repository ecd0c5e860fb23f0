"""
Card play for a running room: deck, hands and the table.

Every card move is a single transaction that deletes the card from where it
was with a conditional DELETE and inserts it where it goes. If the DELETE
matches nothing the card has already moved (another request won the race)
and the whole move is rolled back.
"""

import logging
import random

from sqlalchemy import delete, func, select

from deck import card_points, generate_deck, is_valid_card
from errors import BadRequest, Conflict, Forbidden, NotFound
from lobby import get_room, require_member
from models import (
    ROOM_ENDED,
    ROOM_IN_PROGRESS,
    ROOM_WAITING,
    DeckCard,
    HandCard,
    Room,
    TableCard,
    db,
)

logger = logging.getLogger(__name__)

VALID_PLAYER_COUNTS = (2, 4)


def require_active_room(code: str) -> Room:
    room = get_room(code)
    if room.status != ROOM_IN_PROGRESS:
        raise Conflict(f"Game is not in progress (room is {room.status})")
    return room


def _clear_cards(code: str, *models) -> None:
    for model in models:
        db.session.execute(delete(model).where(model.room_code == code))


# -------------------------
# Game lifecycle
# -------------------------
def start_game(code: str, user_id: int) -> Room:
    """
    Start the game: every member is dealt in, the turn goes to the first
    member in join order and a fresh 40-card deck is laid down.
    """
    room = get_room(code)
    player = require_member(room, user_id)
    if not player.host:
        raise Forbidden("Only the host can start the game")
    if room.status != ROOM_WAITING:
        raise Conflict(f"Cannot start a game in a room that is {room.status}")
    if len(room.players) not in VALID_PLAYER_COUNTS:
        raise BadRequest("A game needs exactly 2 or 4 players")

    for p in room.players:
        p.in_game = True
    room.status = ROOM_IN_PROGRESS
    room.turn_player_id = room.players[0].user_id

    _clear_cards(code, DeckCard, HandCard, TableCard)
    db.session.add_all(DeckCard(room_code=code, **card) for card in generate_deck())
    db.session.commit()

    logger.info(
        f"Game started with {len(room.players)} players",
        extra={"room_code": code, "user_id": user_id},
    )
    return room


def end_game(code: str, user_id: int) -> Room:
    room = require_active_room(code)
    require_member(room, user_id)

    _clear_cards(code, HandCard, TableCard)
    for p in room.players:
        p.in_game = False
    room.status = ROOM_ENDED
    db.session.commit()

    logger.info("Game ended", extra={"room_code": code, "user_id": user_id})
    return room


# -------------------------
# Card moves
# -------------------------
def draw_card(code: str, player_id: int) -> dict:
    """Move a random card from the deck into ``player_id``'s hand."""
    room = require_active_room(code)
    require_member(room, player_id)

    deck_ids = db.session.scalars(select(DeckCard.id).where(DeckCard.room_code == code)).all()
    if not deck_ids:
        raise NotFound("No cards left in the deck")

    card = db.session.get(DeckCard, random.choice(deck_ids))
    if card is None:
        raise Conflict("Card was already drawn")
    number, seed = card.number, card.seed

    result = db.session.execute(delete(DeckCard).where(DeckCard.id == card.id))
    if result.rowcount != 1:
        db.session.rollback()
        raise Conflict("Card was already drawn")
    db.session.add(HandCard(room_code=code, player_id=player_id, number=number, seed=seed))
    db.session.commit()

    logger.info(f"Drew {number}/{seed}", extra={"room_code": code, "user_id": player_id})
    return {"number": number, "seed": seed, "points": card_points(number)}


def play_card(code: str, player_id: int, number: int, seed: str,
              enforce_turn_order: bool = True) -> dict:
    """Move a card from ``player_id``'s hand onto the table."""
    if not is_valid_card(number, seed):
        raise BadRequest("Invalid card")

    room = require_active_room(code)
    require_member(room, player_id)
    if enforce_turn_order and room.turn_player_id != player_id:
        raise Forbidden("It's not your turn")

    result = db.session.execute(
        delete(HandCard).where(
            HandCard.room_code == code,
            HandCard.player_id == player_id,
            HandCard.number == number,
            HandCard.seed == seed,
        )
    )
    if result.rowcount != 1:
        db.session.rollback()
        raise BadRequest("Card not in hand")
    db.session.add(TableCard(room_code=code, player_id=player_id, number=number, seed=seed))
    db.session.commit()

    logger.info(f"Played {number}/{seed}", extra={"room_code": code, "user_id": player_id})
    return {"number": number, "seed": seed, "points": card_points(number)}


def clear_table(code: str, user_id: int) -> int:
    """Remove the played cards at the end of a trick; returns how many."""
    room = get_room(code)
    require_member(room, user_id)
    result = db.session.execute(delete(TableCard).where(TableCard.room_code == code))
    db.session.commit()
    logger.info("Table cleared", extra={"room_code": code, "user_id": user_id})
    return result.rowcount


# -------------------------
# Views
# -------------------------
def get_table_cards(code: str) -> list[TableCard]:
    get_room(code)
    return list(db.session.scalars(
        select(TableCard).where(TableCard.room_code == code).order_by(TableCard.id)
    ))


def get_hand(code: str, player_id: int) -> list[HandCard]:
    get_room(code)
    return list(db.session.scalars(
        select(HandCard)
        .where(HandCard.room_code == code, HandCard.player_id == player_id)
        .order_by(HandCard.id)
    ))


def deck_size(code: str) -> int:
    get_room(code)
    return db.session.scalar(
        select(func.count()).select_from(DeckCard).where(DeckCard.room_code == code)
    )
