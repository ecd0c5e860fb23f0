"""
Tests for turn rotation.

Run with: pytest tests/test_turns.py -v
"""

import pytest
from sqlalchemy import update

import lobby
import turns
from errors import Conflict, Forbidden, NotFound
from models import ROOM_IN_PROGRESS, Room, db
from turns import next_turn_holder

API = "/api"


class TestNextTurnHolder:

    def test_cycles_in_order(self):
        ids = [10, 20, 30]
        assert next_turn_holder(ids, 10) == 20
        assert next_turn_holder(ids, 20) == 30
        assert next_turn_holder(ids, 30) == 10

    def test_unknown_holder_goes_to_first(self):
        assert next_turn_holder([10, 20, 30], 99) == 10
        assert next_turn_holder([10, 20, 30], None) == 10

    def test_empty_room(self):
        assert next_turn_holder([], 10) is None

    def test_single_member_keeps_turn(self):
        assert next_turn_holder([10], 10) == 10


@pytest.fixture
def three_player_game(app, users):
    """A running room with alice, bob and carol, built through the services."""
    a, b, c = (u["id"] for u in users[:3])
    with app.app_context():
        code = lobby.create_room(a)
        lobby.join_room(code, b)
        lobby.join_room(code, c)
        room = db.session.get(Room, code)
        room.status = ROOM_IN_PROGRESS
        db.session.commit()
    return code, [a, b, c]


class TestPassTurn:

    def test_rotation_a_b_c_a(self, app, three_player_game):
        code, (a, b, c) = three_player_game
        seen = [a]
        with app.app_context():
            holder = a
            for _ in range(4):
                holder = turns.pass_turn(code, holder)
                seen.append(holder)
        assert seen == [a, b, c, a, b]

    def test_non_holder_is_rejected(self, app, three_player_game):
        code, (a, b, c) = three_player_game
        with app.app_context():
            with pytest.raises(Forbidden):
                turns.pass_turn(code, b)
            assert db.session.get(Room, code).turn_player_id == a

    def test_force_pass_when_not_enforced(self, app, three_player_game):
        code, (a, b, c) = three_player_game
        with app.app_context():
            assert turns.pass_turn(code, c, enforce_turn_order=False) == b

    def test_unknown_room(self, app, users):
        with app.app_context():
            with pytest.raises(NotFound):
                turns.pass_turn("NOPE", users[0]["id"])

    def test_concurrent_pass_is_rejected(self, app, three_player_game, monkeypatch):
        code, (a, b, c) = three_player_game

        def racing_next_turn_holder(ids, current):
            # another request moves the pointer before our update lands
            db.session.execute(update(Room).where(Room.code == code).values(turn_player_id=c))
            return next_turn_holder(ids, current)

        monkeypatch.setattr(turns, "next_turn_holder", racing_next_turn_holder)
        with app.app_context():
            with pytest.raises(Conflict):
                turns.pass_turn(code, a)


class TestPassTurnRoute:

    def test_pass_turn_over_http(self, client, users, started_room):
        resp = client.post(f"{API}/room/{started_room}/pass_turn", headers=users[0]["headers"])
        assert resp.status_code == 200
        assert resp.get_json()["turn_player_id"] == users[1]["id"]

        resp = client.post(f"{API}/room/{started_room}/pass_turn", headers=users[0]["headers"])
        assert resp.status_code == 403
        assert resp.get_json()["error"] == "It's not your turn"

    def test_full_cycle_over_http(self, client, users, started_room):
        for i in range(len(users)):
            holder = users[i]
            resp = client.post(f"{API}/room/{started_room}/pass_turn", headers=holder["headers"])
            assert resp.get_json()["turn_player_id"] == users[(i + 1) % len(users)]["id"]

    def test_pass_before_start(self, client, users, full_room):
        resp = client.post(f"{API}/room/{full_room}/pass_turn", headers=users[0]["headers"])
        assert resp.status_code == 409

    def test_pass_in_unknown_room(self, client, users):
        resp = client.post(f"{API}/room/NOPE/pass_turn", headers=users[0]["headers"])
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "Room not found"

    def test_force_pass_config(self, app, client, users, started_room):
        app.config["ENFORCE_TURN_ORDER"] = False
        resp = client.post(f"{API}/room/{started_room}/pass_turn", headers=users[3]["headers"])
        assert resp.status_code == 200
        assert resp.get_json()["turn_player_id"] == users[1]["id"]
