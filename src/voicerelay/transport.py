"""
The single WebSocket connection between the recorder screen and its server.

Protocol:
    Client -> Server:
        "start"                     when a recording begins
        "file:///.../rec.wav"       the finished recording's location
    Server -> Client:
        any number of text or binary frames, each one fragment of an
        audio/wav payload

The connection is opened once and never re-opened; a failure is reported
through ``on_error`` and the transport stays down.
"""

import asyncio
from typing import Callable, Optional, Union

import websockets

from voicerelay.errors import TransportError, TransportUnavailable
from voicerelay.logger import get_logger
from voicerelay.state import ConnectionState, connection_machine

logger = get_logger(__name__)

Payload = Union[str, bytes]


class AudioTransport:
    """WebSocket client with browser-style open/error/message reactions.

    Args:
        url: WebSocket URL of the audio endpoint.
        on_message: Called with each inbound payload, in delivery order.
        on_error: Called with a ``TransportError`` on connection failures.
        on_open: Called once the connection is established.
    """

    def __init__(
        self,
        url: str,
        on_message: Callable[[Payload], None],
        on_error: Optional[Callable[[TransportError], None]] = None,
        on_open: Optional[Callable[[], None]] = None,
    ):
        self.url = url
        self._on_message = on_message
        self._on_error = on_error
        self._on_open = on_open
        self._machine = connection_machine()
        self._ws = None
        self._task: Optional[asyncio.Task] = None
        self._settled = asyncio.Event()

    @property
    def state(self) -> ConnectionState:
        return self._machine.state

    @property
    def is_open(self) -> bool:
        return self._machine.state is ConnectionState.OPEN and self._ws is not None

    def open(self) -> asyncio.Task:
        """Start connecting in the background. Only the first call connects."""
        if self._task is not None:
            logger.warning("Connection already opened; ignoring second open()")
            return self._task
        logger.info(f"Connecting to {self.url} ...")
        self._task = asyncio.create_task(self._run())
        return self._task

    async def wait_settled(self) -> ConnectionState:
        """Wait until the connection is open or has failed to open."""
        await self._settled.wait()
        return self.state

    async def _run(self) -> None:
        try:
            async with websockets.connect(self.url) as ws:
                self._ws = ws
                self._machine.transition(ConnectionState.OPEN)
                self._settled.set()
                logger.info("WebSocket connected")
                if self._on_open:
                    self._on_open()

                async for message in ws:
                    self._on_message(message)

        except (websockets.exceptions.WebSocketException, OSError, asyncio.TimeoutError) as e:
            self._report_error(TransportError(f"{type(e).__name__}: {e}"))
        finally:
            self._ws = None
            if self._machine.state in (ConnectionState.CONNECTING, ConnectionState.OPEN):
                self._machine.transition(ConnectionState.CLOSED)
            self._settled.set()
            logger.info(f"WebSocket finished in state '{self.state.value}'")

    def _report_error(self, error: TransportError) -> None:
        logger.error(f"WebSocket error: {error}")
        if self._machine.can_transition(ConnectionState.ERRORED):
            self._machine.transition(ConnectionState.ERRORED)
        if self._on_error:
            self._on_error(error)

    def _require_open(self) -> None:
        if not self.is_open:
            raise TransportUnavailable(f"Connection is {self.state.value}")

    async def send(self, value: Payload) -> bool:
        """Best-effort send. Returns False, without raising, if nothing was sent."""
        try:
            self._require_open()
        except TransportUnavailable as e:
            logger.warning(f"WebSocket is not open. Cannot send audio chunk. ({e})")
            return False

        try:
            await self._ws.send(value)
        except (websockets.exceptions.WebSocketException, OSError) as e:
            self._report_error(TransportError(f"Send failed: {e}"))
            return False
        return True

    async def close(self) -> None:
        """Close the connection unconditionally and wait for the reader to finish."""
        task = self._task
        if self._ws is not None:
            await self._ws.close()
        elif task is not None and not task.done():
            task.cancel()

        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

        if self._machine.can_transition(ConnectionState.CLOSED):
            self._machine.transition(ConnectionState.CLOSED)
        self._settled.set()
