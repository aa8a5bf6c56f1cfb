import logging

from flask import Flask
from flask_socketio import SocketIO

from guildhall.config import Settings
from guildhall.core import Services, initialize_services
from guildhall.realtime import SocketIOPublisher
from guildhall.server.routes import api
from guildhall.server.sockets import register_socket_handlers

logger = logging.getLogger(__name__)


def parse_cors_origins(value: str | None) -> str | list[str]:
    """Return '*' (allow all) or the list of origins in a comma-separated string."""
    if value is None:
        return "*"
    value = value.strip()
    if not value or value == "*":
        return "*"
    origins = [origin.strip() for origin in value.split(",") if origin.strip()]
    return origins or "*"


def create_app(settings: Settings, services: Services | None = None) -> tuple[Flask, SocketIO]:
    """
    Build the Flask app and its Socket.IO server.

    When `services` is not given they are wired from `settings`, publishing
    through this Socket.IO server.
    """
    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.secret_key

    socketio = SocketIO(
        app,
        cors_allowed_origins=parse_cors_origins(settings.cors_allowed_origins),
        async_mode="threading",
    )

    if services is None:
        services = initialize_services(settings, SocketIOPublisher(socketio))
    app.extensions["guildhall"] = services

    app.register_blueprint(api)
    register_socket_handlers(socketio, services)

    logger.debug("Created app with CORS origins %s", parse_cors_origins(settings.cors_allowed_origins))
    return app, socketio
