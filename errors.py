import logging

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class GameError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(GameError):
    status_code = 400


class MissingCredential(GameError):
    status_code = 401


class InvalidCredential(GameError):
    status_code = 401


class Forbidden(GameError):
    status_code = 403


class NotFound(GameError):
    status_code = 404


class Conflict(GameError):
    status_code = 409


def register_error_handlers(app, db):
    @app.errorhandler(GameError)
    def handle_game_error(err: GameError):
        db.session.rollback()
        return jsonify({"error": err.message}), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return jsonify({"error": err.description}), err.code

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(err: SQLAlchemyError):
        db.session.rollback()
        logger.exception("Database error")
        return jsonify({"error": "An error occurred"}), 500

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        db.session.rollback()
        logger.exception("Unhandled error")
        return jsonify({"error": "An error occurred"}), 500
