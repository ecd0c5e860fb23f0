# IMPORTANT: must be BEFORE flask imports for websockets
import eventlet
eventlet.monkey_patch()

from app import create_app  # noqa: E402
from realtime import socketio  # noqa: E402

app = create_app()


# -------------------------
# Local run (Render uses gunicorn from Procfile)
# -------------------------
if __name__ == "__main__":
    socketio.run(app, host="0.0.0.0", port=app.config["PORT"], debug=app.config["ENVIRONMENT"] == "development")
