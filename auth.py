"""
Accounts and bearer-token authentication.

Passwords are hashed with bcrypt; sessions are stateless HS256 JWTs whose
``sub`` claim is the user id. Every room/game route resolves its caller with
``login_required``, which stores the id on ``flask.g.user_id``.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from functools import wraps

import bcrypt
import jwt
from flask import Blueprint, current_app, g, jsonify, request
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from errors import BadRequest, Conflict, InvalidCredential, MissingCredential
from models import User, db

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        return False


def issue_token(user_id: int) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(minutes=current_app.config["JWT_EXPIRES_MINUTES"]),
    }
    return jwt.encode(
        payload,
        current_app.config["JWT_SECRET_KEY"],
        algorithm=current_app.config["JWT_ALGORITHM"],
    )


def decode_token(token: str) -> int:
    """Return the user id carried by ``token``; raise InvalidCredential otherwise."""
    try:
        payload = jwt.decode(
            token,
            current_app.config["JWT_SECRET_KEY"],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
        )
        return int(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise InvalidCredential("Invalid or expired token")


def token_from_header(header):
    """Accept both ``Bearer <token>`` and a bare token."""
    if not header:
        return None
    parts = header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    if len(parts) == 1:
        return parts[0]
    return None


def resolve_user_id() -> int:
    token = token_from_header(request.headers.get("Authorization"))
    if not token:
        raise MissingCredential("Authorization token is missing")
    return decode_token(token)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        g.user_id = resolve_user_id()
        return view(*args, **kwargs)

    return wrapper


# -------------------------
# Account operations
# -------------------------
def register_user(username: str, email: str, password: str) -> User:
    username = (username or "").strip()
    email = (email or "").strip().lower()

    if not username or not email or not password:
        raise BadRequest("username, email and password are required")
    if not EMAIL_RE.match(email):
        raise BadRequest("Invalid email address")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise BadRequest(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    existing = User.query.filter(or_(User.username == username, User.email == email)).first()
    if existing:
        raise Conflict("Username or email already registered")

    user = User(username=username, email=email, password_hash=hash_password(password))
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # a concurrent registration took the name or email after the check
        db.session.rollback()
        raise Conflict("Username or email already registered")
    logger.info(f"Registered user {username}", extra={"user_id": user.id})
    return user


def authenticate(username: str, password: str) -> User:
    user = User.query.filter_by(username=(username or "").strip()).first()
    if not user or not verify_password(password or "", user.password_hash):
        raise InvalidCredential("Invalid username or password")
    return user


# -------------------------
# Routes
# -------------------------
auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/auth/register")
def register():
    data = request.get_json(silent=True) or {}
    user = register_user(data.get("username"), data.get("email"), data.get("password"))
    return jsonify(user.to_dict()), 201


@auth_bp.post("/auth/login")
def login():
    data = request.get_json(silent=True) or {}
    user = authenticate(data.get("username"), data.get("password"))
    logger.info(f"User {user.username} logged in", extra={"user_id": user.id})
    return jsonify({"token": issue_token(user.id), "user": user.to_dict()})
