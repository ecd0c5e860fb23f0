"""Shared fixtures: a fresh app on in-memory sqlite and registered users."""

import pytest

from app import create_app
from config import TestConfig
from models import db
from realtime import socketio

API = "/api"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(client):
    """Register and log in a user; returns {"id", "name", "headers"}."""

    def _make_user(name):
        resp = client.post(f"{API}/auth/register", json={
            "username": name,
            "email": f"{name}@example.com",
            "password": "secret-password",
        })
        assert resp.status_code == 201, resp.get_json()
        resp = client.post(f"{API}/auth/login", json={
            "username": name,
            "password": "secret-password",
        })
        assert resp.status_code == 200
        data = resp.get_json()
        return {
            "id": data["user"]["id"],
            "name": name,
            "headers": {"Authorization": f"Bearer {data['token']}"},
        }

    return _make_user


@pytest.fixture
def users(make_user):
    return [make_user(name) for name in ("alice", "bob", "carol", "dave")]


@pytest.fixture
def room_code(client, users):
    """A waiting room hosted by alice."""
    resp = client.post(f"{API}/room/create", headers=users[0]["headers"])
    assert resp.status_code == 201
    return resp.get_json()["code"]


@pytest.fixture
def full_room(client, users, room_code):
    """A waiting room with all four users, alice hosting."""
    for user in users[1:]:
        resp = client.post(f"{API}/room/{room_code}/join", headers=user["headers"])
        assert resp.status_code == 200
    return room_code


@pytest.fixture
def started_room(client, users, full_room):
    resp = client.post(f"{API}/room/{full_room}/start", headers=users[0]["headers"])
    assert resp.status_code == 200
    return full_room


@pytest.fixture
def socket_client(app, client):
    def _connect():
        sc = socketio.test_client(app, flask_test_client=client)
        assert sc.is_connected()
        sc.get_received()
        return sc

    return _connect
