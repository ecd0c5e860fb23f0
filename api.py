"""REST routes for rooms and game play. Notifications are sent after commit."""

from flask import Blueprint, current_app, g, jsonify

import game
import lobby
import turns
from auth import login_required
from realtime import notify

api_bp = Blueprint("api", __name__)


def _enforce_turn_order() -> bool:
    return current_app.config["ENFORCE_TURN_ORDER"]


# -------------------------
# Room directory
# -------------------------
@api_bp.get("/rooms")
@login_required
def list_rooms():
    return jsonify([room.to_dict() for room in lobby.list_rooms()])


@api_bp.get("/room/<code>")
@login_required
def get_room(code):
    return jsonify(lobby.get_room(code).to_dict())


@api_bp.post("/room/create")
@login_required
def create_room():
    code = lobby.create_room(g.user_id, current_app.config["ROOM_CODE_LENGTH"])
    return jsonify({"code": code}), 201


@api_bp.delete("/room/<code>/delete")
@login_required
def delete_room(code):
    lobby.delete_room(code, g.user_id)
    return jsonify({"message": "Room deleted"})


# -------------------------
# Membership
# -------------------------
@api_bp.post("/room/<code>/join")
@login_required
def join_room(code):
    player = lobby.join_room(code, g.user_id)
    notify(code, "playerJoined", {"room": code, "player": g.user_id, "team": player.team})
    return jsonify({"message": "Player joined room", "player": player.to_dict()})


@api_bp.delete("/room/<code>/leave")
@login_required
def leave_room(code):
    room = lobby.leave_room(code, g.user_id)
    notify(code, "playerLeft", {
        "room": code,
        "player": g.user_id,
        "room_deleted": room is None,
    })
    return jsonify({"message": "Player left room", "room_deleted": room is None})


@api_bp.get("/room/<code>/players")
@login_required
def get_players(code):
    return jsonify([p.to_dict() for p in lobby.get_players(code)])


@api_bp.get("/room/<code>/player/in_room")
@login_required
def player_in_room(code):
    return jsonify(lobby.is_player_in_room(code, g.user_id))


@api_bp.get("/room/<code>/player/is_host")
@login_required
def player_is_host(code):
    return jsonify(lobby.is_player_host(code, g.user_id))


@api_bp.post("/room/<code>/give_up")
@login_required
def give_up(code):
    user_id = lobby.give_up(code, g.user_id)
    notify(code, "playerLeft", {"room": code, "player": user_id, "gave_up": True})
    return jsonify(user_id)


# -------------------------
# Game
# -------------------------
@api_bp.post("/room/<code>/start")
@login_required
def start_game(code):
    room = game.start_game(code, g.user_id)
    notify(code, "gameStarted", {"room": code, "turn_player_id": room.turn_player_id})
    return jsonify({"message": f"Game started for room with CODE: {code}", "room": room.to_dict()})


@api_bp.post("/game/<code>")
@login_required
def end_game(code):
    game.end_game(code, g.user_id)
    notify(code, "gameEnded", {"room": code})
    return jsonify({"message": "Game ended successfully"})


@api_bp.post("/room/<code>/pass_turn")
@login_required
def pass_turn(code):
    next_player = turns.pass_turn(code, g.user_id, _enforce_turn_order())
    notify(code, "turnPassed", {"room": code, "player": g.user_id, "turn_player_id": next_player})
    return jsonify({"message": "Turn passed", "turn_player_id": next_player})


@api_bp.post("/room/<code>/draw")
@login_required
def draw_card(code):
    return jsonify(game.draw_card(code, g.user_id))


@api_bp.post("/room/<code>/play/<int:number>/<seed>")
@login_required
def play_card(code, number, seed):
    card = game.play_card(code, g.user_id, number, seed, _enforce_turn_order())
    notify(code, "cardPlayed", {"room": code, "player": g.user_id, **card})
    return jsonify(card)


@api_bp.get("/room/<code>/table_cards")
@login_required
def table_cards(code):
    return jsonify([c.to_dict() for c in game.get_table_cards(code)])


@api_bp.delete("/room/<code>/table_cards")
@login_required
def clear_table(code):
    return jsonify({"cleared": game.clear_table(code, g.user_id)})


@api_bp.get("/room/<code>/players/<int:player_id>/hand")
@login_required
def player_hand(code, player_id):
    return jsonify([c.to_dict() for c in game.get_hand(code, player_id)])


@api_bp.get("/room/<code>/deck")
@login_required
def deck(code):
    return jsonify({"remaining": game.deck_size(code)})
