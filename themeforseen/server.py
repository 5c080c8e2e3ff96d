"""Run the ThemeForseen app under uvicorn on a fixed local port.

The listening socket is bound here, before uvicorn starts, so a port
conflict is reported with a specific diagnostic instead of uvicorn's
generic bind error.  There is no retry and no fallback port.

Functions:
    bind_socket(host, port)   — bind or raise PortInUseError
    serve(app, sock)          — run uvicorn on an already bound socket (blocking)
"""

import errno
import logging
import socket

import uvicorn
from fastapi import FastAPI

logger = logging.getLogger(__name__)


class PortInUseError(OSError):
    """The server port is already bound by another process."""

    def __init__(self, port: int):
        super().__init__(errno.EADDRINUSE, f"Port {port} is already in use")
        self.port = port


def bind_socket(host: str, port: int) -> socket.socket:
    """Return a socket bound to *host*:*port*, ready to hand to uvicorn.

    Raises:
        PortInUseError: If the address is already in use.
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as exc:
        sock.close()
        if exc.errno == errno.EADDRINUSE:
            raise PortInUseError(port) from exc
        raise
    sock.set_inheritable(True)
    return sock


def serve(app: FastAPI, sock: socket.socket, log_level: str = "info") -> None:
    """Serve *app* on *sock* until interrupted, then close the socket."""
    config = uvicorn.Config(app, log_level=log_level.lower(), timeout_graceful_shutdown=5)
    server = uvicorn.Server(config)
    host, port = sock.getsockname()[:2]
    logger.info("Listening on http://%s:%d", host, port)
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()
