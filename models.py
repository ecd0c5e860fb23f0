from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

from deck import card_points

db = SQLAlchemy()

ROOM_WAITING = "waiting"
ROOM_IN_PROGRESS = "in_progress"
ROOM_ENDED = "ended"


def utcnow():
    return datetime.now(timezone.utc)


class User(db.Model):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(128), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    def to_dict(self):
        return {"id": self.id, "username": self.username, "email": self.email}


class Room(db.Model):
    __tablename__ = "rooms"
    code = db.Column(db.String(16), primary_key=True)
    status = db.Column(db.String(20), nullable=False, default=ROOM_WAITING)  # waiting / in_progress / ended
    turn_player_id = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    # join order is the autoincrement id
    players = db.relationship(
        "Player", order_by="Player.id", cascade="all, delete-orphan", back_populates="room"
    )
    deck = db.relationship("DeckCard", cascade="all, delete-orphan")
    hand_cards = db.relationship("HandCard", cascade="all, delete-orphan")
    table_cards = db.relationship("TableCard", cascade="all, delete-orphan")

    def to_dict(self):
        return {
            "code": self.code,
            "status": self.status,
            "turn_player_id": self.turn_player_id,
        }


class Player(db.Model):
    __tablename__ = "players"
    __table_args__ = (db.UniqueConstraint("room_code", "user_id"),)
    id = db.Column(db.Integer, primary_key=True)
    room_code = db.Column(db.String(16), db.ForeignKey("rooms.code"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    team = db.Column(db.Integer, nullable=False, default=1)
    host = db.Column(db.Boolean, nullable=False, default=False)
    in_game = db.Column(db.Boolean, nullable=False, default=False)

    room = db.relationship("Room", back_populates="players")
    user = db.relationship("User")

    def to_dict(self):
        return {
            "room_code": self.room_code,
            "user_id": self.user_id,
            "username": self.user.username if self.user else None,
            "team": self.team,
            "host": self.host,
            "in_game": self.in_game,
        }


class DeckCard(db.Model):
    __tablename__ = "deck"
    __table_args__ = (db.UniqueConstraint("room_code", "number", "seed"),)
    id = db.Column(db.Integer, primary_key=True)
    room_code = db.Column(db.String(16), db.ForeignKey("rooms.code"), nullable=False)
    number = db.Column(db.Integer, nullable=False)
    seed = db.Column(db.String(16), nullable=False)


class HandCard(db.Model):
    __tablename__ = "hand_cards"
    __table_args__ = (db.UniqueConstraint("room_code", "number", "seed"),)
    id = db.Column(db.Integer, primary_key=True)
    room_code = db.Column(db.String(16), db.ForeignKey("rooms.code"), nullable=False)
    player_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    number = db.Column(db.Integer, nullable=False)
    seed = db.Column(db.String(16), nullable=False)

    def to_dict(self):
        return {
            "room_code": self.room_code,
            "player_id": self.player_id,
            "number": self.number,
            "seed": self.seed,
            "points": card_points(self.number),
        }


class TableCard(db.Model):
    __tablename__ = "table_cards"
    __table_args__ = (db.UniqueConstraint("room_code", "number", "seed"),)
    id = db.Column(db.Integer, primary_key=True)
    room_code = db.Column(db.String(16), db.ForeignKey("rooms.code"), nullable=False)
    player_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    number = db.Column(db.Integer, nullable=False)
    seed = db.Column(db.String(16), nullable=False)

    def to_dict(self):
        return {
            "room_code": self.room_code,
            "player_id": self.player_id,
            "number": self.number,
            "seed": self.seed,
            "points": card_points(self.number),
        }
