"""
Bootstrap for the application handler
-------------------------------------
- Binds the listening socket up front so bind errors surface as BindFailure
- Serves the handler with uvicorn on the pre-bound socket
- Announces readiness exactly once, after uvicorn has finished starting up
"""

from __future__ import annotations

import enum
import logging
import socket
from concurrent.futures import Future
from typing import Any, Callable, Optional

import uvicorn

from app.config import Port, normalize_log_level


logger = logging.getLogger("app.server")

DEFAULT_BACKLOG = 2048

ListeningCallback = Callable[[Port], Any]


class ListenerState(enum.Enum):
    NOT_LISTENING = "not_listening"
    LISTENING = "listening"


class BindFailure(OSError):
    """The listener could not be started on the requested host/port."""

    def __init__(self, host: str, port: Port, reason: BaseException) -> None:
        super().__init__(f"Cannot listen on {host}:{port} - {reason}")
        self.host = host
        self.port = port
        self.reason = reason


def announce_listening(port: Port) -> None:
    """Default completion callback: one confirmation line on stdout."""
    print(f"Server is listening on - {port}", flush=True)


def bind_socket(host: str, port: Port, backlog: int = DEFAULT_BACKLOG) -> socket.socket:
    """Create, bind and listen a TCP socket for the raw port value.

    The port is only turned into a number here, so a malformed value fails
    the same way an occupied or privileged port does.
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = None
    try:
        number = int(port)
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, number))
        sock.listen(backlog)
    except (OSError, ValueError, TypeError, OverflowError) as e:
        if sock is not None:
            sock.close()
        raise BindFailure(host, port, e) from e
    return sock


class _ListeningServer(uvicorn.Server):
    """uvicorn.Server that reports once its startup has completed."""

    def __init__(self, config: uvicorn.Config, on_started: Callable[[], None]) -> None:
        super().__init__(config)
        self._on_started = on_started

    async def startup(self, sockets: Optional[list] = None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            self._on_started()


class Bootstrap:
    """Starts one application handler listening on one port."""

    def __init__(self, application: Any, host: str = "0.0.0.0", log_level: str = "info",
                 backlog: int = DEFAULT_BACKLOG) -> None:
        self.application = application
        self.host = host
        self.log_level = normalize_log_level(log_level).lower()
        self.backlog = backlog
        self.state = ListenerState.NOT_LISTENING
        # Resolved once with the raw port, or failed with BindFailure
        self.listening: Future = Future()
        self._server: Optional[_ListeningServer] = None
        self._stop_requested = False

    def start(self, port: Port, on_listening: Optional[ListeningCallback] = announce_listening) -> bool:
        """Bind `port`, serve until the server exits, and return whether it ever listened.

        Raises BindFailure before any output when the port cannot be bound.
        """
        if self.state is not ListenerState.NOT_LISTENING or self.listening.done():
            raise RuntimeError("Bootstrap.start() may only be called once")
        logger.debug("Binding %s:%s", self.host, port)
        try:
            sock = bind_socket(self.host, port, self.backlog)
        except BindFailure as e:
            self.listening.set_exception(e)
            raise

        def _started() -> None:
            self.state = ListenerState.LISTENING
            self.listening.set_result(port)
            if on_listening is not None:
                on_listening(port)

        try:
            config = uvicorn.Config(
                self.application,
                host=self.host,
                port=sock.getsockname()[1],
                backlog=self.backlog,
                log_level=self.log_level,
                log_config=None,
            )
            self._server = _ListeningServer(config, _started)
            # stop() may have run before the server existed
            if self._stop_requested:
                logger.info("Stop requested before %s:%s started; not serving", self.host, port)
                return False
            self._server.run(sockets=[sock])
        finally:
            sock.close()
            if not self.listening.done():
                if not self._stop_requested:
                    logger.error("Server on %s:%s exited before it started listening", self.host, port)
                self.listening.cancel()
        return self._server.started

    def stop(self) -> None:
        """Ask the server to exit; a stop before start() makes start() return without serving."""
        self._stop_requested = True
        if self._server is not None:
            self._server.should_exit = True


def start(application: Any, port: Port, host: str = "0.0.0.0",
          on_listening: Optional[ListeningCallback] = announce_listening,
          log_level: str = "info") -> bool:
    """Start `application` listening on `port`; see Bootstrap.start."""
    return Bootstrap(application, host=host, log_level=log_level).start(port, on_listening=on_listening)
