"""Start and stop an embedded HTTP server around the recipe application.

Used by the integration tests and by ``python -m recipe_service.server`` for
quick local runs. Containerized deployments should point a WSGI server at
``main:app`` instead.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from typing import Optional

from flask import Flask
from werkzeug.serving import BaseWSGIServer, make_server

from . import create_app

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


@dataclass
class ServerHandle:
    """A running server and the thread serving it."""

    server: BaseWSGIServer
    thread: threading.Thread
    app: Flask
    stopped: bool = field(default=False)

    @property
    def host(self) -> str:
        return self.server.server_address[0]

    @property
    def port(self) -> int:
        return self.server.server_address[1]

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"


def start(
    app: Optional[Flask] = None,
    *,
    host: Optional[str] = None,
    port: Optional[int] = None,
) -> ServerHandle:
    """Bind a listener and return once it accepts connections.

    ``host`` and ``port`` fall back to ``RECIPES_HOST`` and ``RECIPES_PORT``.
    Pass ``port=0`` to let the operating system pick a free port.
    """

    if app is None:
        app = create_app()
    if host is None:
        host = os.environ.get("RECIPES_HOST", DEFAULT_HOST)
    if port is None:
        port = int(os.environ.get("RECIPES_PORT", DEFAULT_PORT))

    # The socket is bound and listening once make_server returns.
    server = make_server(host, port, app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, name="recipe-server", daemon=True)
    thread.start()

    handle = ServerHandle(server=server, thread=thread, app=app)
    logger.info("Recipe server listening on %s", handle.url)
    return handle


def stop(handle: ServerHandle) -> None:
    """Close the listener and wait for the serving thread. Safe to call twice."""

    if handle.stopped:
        return
    handle.stopped = True

    handle.server.shutdown()
    handle.server.server_close()
    handle.thread.join()
    logger.info("Recipe server on %s stopped", handle.url)


def main() -> None:
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
    handle = start()
    try:
        handle.thread.join()
    except KeyboardInterrupt:
        pass
    finally:
        stop(handle)


if __name__ == "__main__":
    main()


__all__ = ["ServerHandle", "start", "stop"]
