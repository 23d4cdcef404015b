# wsgi.py
import eventlet

# must run before anything else imports socket or threading
eventlet.monkey_patch()

from marketplace_chat.config.settings import Settings  # noqa: E402
from marketplace_chat.infrastructure.realtime.socketio_server import socketio  # noqa: E402
from marketplace_chat.main import create_app  # noqa: E402

settings = Settings()
app = create_app(settings)

if __name__ == "__main__":
    # production runs gunicorn with the eventlet worker; this is for direct execution
    socketio.run(app, host="0.0.0.0", port=5000, debug=settings.debug)
