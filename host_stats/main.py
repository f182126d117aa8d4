"""CLI entrypoint for launching the stats service with Uvicorn."""
from __future__ import annotations

import logging
import socket
from typing import Optional

import uvicorn

from .api import create_app
from .config import Settings, get_settings
from .errors import ServerBindError
from .sampler import StatsSampler

logger = logging.getLogger(__name__)


def bind_socket(settings: Settings) -> socket.socket:
    """Bind the listening socket up front so a busy port fails before serving."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((settings.host, settings.port))
    except OSError as exc:
        sock.close()
        raise ServerBindError(settings.address, exc) from exc
    return sock


def build_server(settings: Settings, sampler: Optional[StatsSampler] = None) -> uvicorn.Server:
    config = uvicorn.Config(
        create_app(sampler),
        log_level=settings.log_level,
    )
    return uvicorn.Server(config)


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(message)s")

    try:
        sock = bind_socket(settings)
    except ServerBindError as exc:
        logger.error("Server error: %s", exc)
        raise SystemExit(1) from exc

    host, port = sock.getsockname()[:2]
    logger.info("Listening on %s:%s", host, port)
    with sock:
        build_server(settings).run(sockets=[sock])


if __name__ == "__main__":
    main()
