import os
from flask_socketio import SocketIO, join_room, leave_room, emit
from flask import current_app, request

_raw = os.getenv("SOCKETIO_CORS_ORIGINS", "http://localhost:5173").strip()
CORS_ORIGINS = "*" if _raw == "*" else [o.strip() for o in _raw.split(",") if o.strip()]

socketio = SocketIO(cors_allowed_origins=CORS_ORIGINS)


def campaign_room(campaign_id: str) -> str:
    return f"campaign:{campaign_id}"


def broadcast(event: str, campaign_id: str, payload: dict) -> None:
    """Push an event to everyone watching the campaign."""
    if socketio.server is None:
        return
    try:
        socketio.emit(event, payload, to=campaign_room(campaign_id))
    except Exception:
        current_app.logger.exception("socket broadcast %s failed", event)


def init_socketio(app):
    socketio.init_app(
        app,
        async_mode=app.config.get("SOCKETIO_ASYNC_MODE"),
        logger=app.logger if app.debug else False,
        engineio_logger=False,
    )

    @socketio.on("connect")
    def handle_connect():
        app.logger.info(
            "[socket] connect origin=%s ua=%s",
            request.headers.get("Origin"),
            request.headers.get("User-Agent"),
        )
        emit("connected", {"ok": True})

    @socketio.on("disconnect")
    def handle_disconnect(*args):
        app.logger.info("[socket] disconnect")

    @socketio.on("join_campaign")
    def on_join(data):
        cid = _campaign_id(data)
        if not cid:
            emit("error", {"error": "campaign_id required"})
            return
        room = campaign_room(cid)
        join_room(room)
        emit("joined", {"room": room})

    @socketio.on("leave_campaign")
    def on_leave(data):
        cid = _campaign_id(data)
        if not cid:
            return
        room = campaign_room(cid)
        leave_room(room)
        emit("left", {"room": room})


def _campaign_id(data):
    # the web client sends a bare id string; other clients send {"campaign_id": ...}
    if isinstance(data, str):
        return data.strip() or None
    return (data or {}).get("campaign_id")
