# =========================
#  app.py
#  Flask + SQLAlchemy + SocketIO (WebSocket)
#  Briscola rooms, turns and card play
# =========================

import logging

from flask import Flask
from flask_cors import CORS

from api import api_bp
from auth import auth_bp
from config import INSTANCE_DIR, Config
from errors import register_error_handlers
from logging_config import setup_logging
from models import db
from realtime import socketio

logger = logging.getLogger(__name__)


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    setup_logging(app.config["LOG_LEVEL"], app.config["ENVIRONMENT"])

    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///"):
        INSTANCE_DIR.mkdir(exist_ok=True)

    db.init_app(app)
    origins = app.config["CORS_ORIGINS"]
    if "*" in origins:
        origins = "*"
    CORS(app, origins=origins, supports_credentials=True)
    socketio.init_app(
        app,
        cors_allowed_origins=origins,
        async_mode=app.config["SOCKETIO_ASYNC_MODE"],
    )

    prefix = app.config["API_PREFIX"]
    app.register_blueprint(auth_bp, url_prefix=prefix)
    app.register_blueprint(api_bp, url_prefix=prefix)
    register_error_handlers(app, db)

    # Create DB (first run)
    with app.app_context():
        db.create_all()

    logger.info(f"App ready ({app.config['ENVIRONMENT']})")
    return app
