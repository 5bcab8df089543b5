"""
=============================================================================
EXAMPLE: HELLO WORLD
=============================================================================

The smallest useful server: no database, one route.

    $ python examples/hello_server.py
    Hello World
    ...
    $ curl localhost:8080/
    Hello World

Everything the users API adds (store, validation, /users routes) sits on
top of exactly this.

=============================================================================
"""

import sys
from pathlib import Path

# Run from a checkout without installing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from userapi import HTTPServer, ServerConfig
from userapi.app import hello
from userapi.middleware import LoggingMiddleware


def main():
    print("Hello World")

    server = HTTPServer(ServerConfig(host="127.0.0.1", port=8080))
    server.use(LoggingMiddleware())
    server.get("/")(hello)
    server.run()


if __name__ == "__main__":
    main()
