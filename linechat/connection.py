from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any

from websockets.asyncio.client import connect
from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.typing import Subprotocol

from linechat.constants import (
    ABNORMAL_CLOSE_CODE,
    ALLOWED_PORTS,
    DEFAULT_SERVICE_PORT,
    RECONNECT_DELAY_SECONDS,
    WHO_QUERY_DELAY_SECONDS,
    WS_SUBPROTOCOL,
)
from linechat.gateway import OutboundGateway
from linechat.models import ConnectionState, Endpoint
from linechat.session import ChatSession
from linechat.timers import SingleSlotTimer

logger = logging.getLogger(__name__)

TRANSPORT_ERRORS = (OSError, asyncio.TimeoutError, WebSocketException)

Connector = Callable[[str], Awaitable[Any]]


def resolve_endpoint(host: str, port: int | None, secure: bool) -> Endpoint:
    """Pick ws/wss from ``secure`` and keep ``port`` only if it is a well-known one."""
    effective = port or (443 if secure else 80)
    if effective not in ALLOWED_PORTS:
        effective = DEFAULT_SERVICE_PORT
    return Endpoint(scheme="wss" if secure else "ws", host=host, port=effective)


def websocket_connector(url: str) -> Awaitable[Any]:
    return connect(url, subprotocols=[Subprotocol(WS_SUBPROTOCOL)])


def _close_code(transport: Any, exc: BaseException | None = None) -> int:
    if isinstance(exc, ConnectionClosed) and exc.rcvd is not None:
        return exc.rcvd.code
    code = getattr(transport, "close_code", None)
    return code if code else ABNORMAL_CLOSE_CODE


class ConnectionManager:
    """Owns the socket and drives Idle -> Connecting -> Connected -> Disconnected.

    Disconnects always end in a reconnect after a flat backoff. Every attempt
    gets a generation number; an attempt that finishes after a newer one has
    started (or after shutdown) is discarded without touching the session.
    """

    def __init__(
        self,
        session: ChatSession,
        endpoint: Endpoint,
        connector: Connector | None = None,
        reconnect_delay: float = RECONNECT_DELAY_SECONDS,
        who_delay: float = WHO_QUERY_DELAY_SECONDS,
    ):
        self.session = session
        self.endpoint = endpoint
        self.connector = connector or websocket_connector
        self.reconnect_delay = reconnect_delay
        self.who_delay = who_delay
        self.gateway = OutboundGateway(session, self)
        self.transport: Any = None

        self._generation = 0
        self._stopped = False
        self._reconnect_timer = SingleSlotTimer("reconnect")
        self._who_timer = SingleSlotTimer("who-query")
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def state(self) -> ConnectionState:
        return self.session.state

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_timer.pending

    def start(self) -> bool:
        if self.state != ConnectionState.IDLE:
            return False
        self._stopped = False
        self._connect()
        return True

    async def shutdown(self) -> None:
        self._stopped = True
        self._generation += 1
        self._reconnect_timer.cancel()
        self._who_timer.cancel()
        transport, self.transport = self.transport, None
        if transport is not None:
            await self._close_quietly(transport)
        tasks = [task for task in self._tasks if task is not asyncio.current_task()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self.session.set_state(ConnectionState.IDLE)

    def send_line(self, line: str) -> bool:
        transport = self.transport
        if self.state != ConnectionState.CONNECTED or transport is None:
            logger.debug("Dropped outbound line while %s", self.state.value)
            return False
        self._spawn(self._send(transport, line))
        return True

    def _connect(self) -> None:
        self._generation += 1
        self.transport = None
        self.session.set_state(ConnectionState.CONNECTING)
        logger.info("Connecting to %s (attempt %d)", self.endpoint.url, self._generation)
        self._spawn(self._run(self._generation))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and not self._stopped

    async def _run(self, generation: int) -> None:
        try:
            transport = await self.connector(self.endpoint.url)
        except TRANSPORT_ERRORS as exc:
            if self._is_current(generation):
                logger.warning("Connection to %s failed: %s", self.endpoint.url, exc)
                self._on_closed(ABNORMAL_CLOSE_CODE)
            return

        if not self._is_current(generation):
            await self._close_quietly(transport)
            return

        self._on_open(transport)
        failure: BaseException | None = None
        try:
            async for message in transport:
                if not self._is_current(generation):
                    break
                self._on_message(message)
        except TRANSPORT_ERRORS as exc:
            failure = exc
            logger.warning("Connection to %s lost: %s", self.endpoint.url, exc)

        if self._is_current(generation):
            self._on_closed(_close_code(transport, failure))

    def _on_open(self, transport: Any) -> None:
        self.transport = transport
        self.session.set_state(ConnectionState.CONNECTED)
        logger.info("Connected to %s", self.endpoint.url)
        self._who_timer.cancel()
        self._who_timer.schedule(self.who_delay, self.gateway.query_membership)
        self.gateway.reassert_nickname()

    def _on_message(self, message: str | bytes) -> None:
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")
        self.session.apply_line(message.rstrip("\r\n"))

    def _on_closed(self, code: int) -> None:
        self.transport = None
        self._who_timer.cancel()
        self.session.set_state(ConnectionState.DISCONNECTED)
        self.session.append_system(f"* disconnected ({code}) *")
        if not self._stopped:
            self._reconnect_timer.schedule(self.reconnect_delay, self._reconnect)

    def _reconnect(self) -> None:
        if self._stopped or self.state != ConnectionState.DISCONNECTED:
            return
        self._connect()

    async def _send(self, transport: Any, line: str) -> None:
        try:
            await transport.send(line)
        except TRANSPORT_ERRORS as exc:
            logger.warning("Failed sending line to %s: %s", self.endpoint.url, exc)

    async def _close_quietly(self, transport: Any) -> None:
        try:
            await transport.close()
        except TRANSPORT_ERRORS as exc:
            logger.debug("Ignoring error while closing transport: %s", exc)
