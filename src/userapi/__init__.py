"""
userapi: a users CRUD API on an HTTP/1.1 server written from sockets up.

    from userapi import create_app, ServerConfig

    server = create_app(ServerConfig(port=8080, db_path="users.db"))
    server.run()
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import HTTPServer
from .app import create_app

__all__ = ["HTTPServer", "ServerConfig", "create_app", "__version__"]
