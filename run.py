from gramasathi import create_app
from gramasathi.realtime import socketio
import os

app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", 5002))
    socketio.run(
        app,
        host=os.getenv("HOST", "127.0.0.1"),
        port=port,
        debug=False,
        use_reloader=False,
        log_output=True,
    )

# --- Local dev ---

# Bring up Postgres, Redis and MinIO, then apply migrations:
# poetry run alembic upgrade head

# Start the API + Socket.IO together (single process, eventlet):
# SOCKETIO_ASYNC_MODE=eventlet PORT=5002 poetry run python run.py

# Demo data:
# poetry run python scripts/seed.py
