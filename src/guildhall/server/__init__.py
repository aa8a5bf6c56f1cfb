from guildhall.server.app import create_app, parse_cors_origins
from guildhall.server.sockets import register_socket_handlers

__all__ = [
    'create_app',
    'parse_cors_origins',
    'register_socket_handlers',
]
