"""WebSocket proxy service that owns the listener and all connection sessions."""

import asyncio
import itertools
import logging
from enum import Enum
from typing import Dict, Optional, Set

from aiohttp import web, WSCloseCode, WSMsgType

from ..models.audio import AudioFormat
from ..stream.session import ConnectionSession
from ..transcription.base import AbstractTranscriptionBackend
from ..transcription.publisher import EventPublisher

logger = logging.getLogger(__name__)


class ServiceState(Enum):
    """Lifecycle of the proxy service."""
    INIT = "init"
    SERVING = "serving"
    DRAINING = "draining"
    STOPPED = "stopped"


class TranscriptionProxyService:
    """Accepts websocket connections and runs one ConnectionSession per connection."""

    def __init__(self,
                 backend: AbstractTranscriptionBackend,
                 audio_format: AudioFormat,
                 host: str = "localhost",
                 port: int = 8765,
                 chunk_duration_seconds: float = 5.0,
                 publisher: Optional[EventPublisher] = None,
                 shutdown_timeout: float = 30.0):
        """Initialize the proxy service.

        Args:
            backend: Transcription backend shared by all sessions
            audio_format: PCM format of inbound audio
            host: Listener host
            port: Listener port (0 picks a free port)
            chunk_duration_seconds: Window duration per transcription
            publisher: Publisher handed to every session
            shutdown_timeout: Seconds to wait for sessions to drain on shutdown
        """
        self.backend = backend
        self.audio_format = audio_format
        self.host = host
        self.port = port
        self.chunk_duration_seconds = chunk_duration_seconds
        self.publisher = publisher
        self.shutdown_timeout = shutdown_timeout

        self.state = ServiceState.INIT
        self.sessions: Dict[str, ConnectionSession] = {}
        self.connections: Dict[str, web.WebSocketResponse] = {}
        self.handler_tasks: Set[asyncio.Task] = set()
        self._session_ids = itertools.count(1)

        self.app = web.Application()
        self.app.router.add_get("/", self.handle_websocket)
        self.runner: Optional[web.AppRunner] = None
        self.site: Optional[web.TCPSite] = None

    @property
    def bound_port(self) -> Optional[int]:
        """Port the listener is actually bound to, once serving."""
        if self.runner is None:
            return None
        for address in self.runner.addresses:
            if isinstance(address, tuple) and len(address) >= 2:
                return address[1]
        return None

    async def start(self) -> None:
        """Bind the listener and start accepting connections."""
        if self.state is not ServiceState.INIT:
            raise RuntimeError(f"Cannot start service in state {self.state.value}")

        self.runner = web.AppRunner(self.app, handle_signals=False)
        await self.runner.setup()
        self.site = web.TCPSite(self.runner, self.host, self.port)
        await self.site.start()
        self.state = ServiceState.SERVING
        logger.info(f"WebSocket server started on {self.host}:{self.bound_port}")

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Run one connection: every message is handled before the next is read."""
        if self.state is not ServiceState.SERVING:
            raise web.HTTPServiceUnavailable(text="Server is shutting down")
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        session_id = f"conn-{next(self._session_ids)}"
        session = ConnectionSession(
            session_id=session_id,
            audio_format=self.audio_format,
            backend=self.backend,
            chunk_duration_seconds=self.chunk_duration_seconds,
            publisher=self.publisher,
        )
        self.sessions[session_id] = session
        self.connections[session_id] = ws
        task = asyncio.current_task()
        self.handler_tasks.add(task)
        logger.info(f"New connection established: {session_id} from {request.remote}")

        try:
            async for msg in ws:
                if msg.type in (WSMsgType.BINARY, WSMsgType.TEXT):
                    await session.handle_message(msg.data)
                elif msg.type == WSMsgType.ERROR:
                    session.on_transport_error(ws.exception())
        finally:
            logger.info(f"WebSocket connection closed: {session_id}")
            try:
                await session.close()
            finally:
                self.sessions.pop(session_id, None)
                self.connections.pop(session_id, None)
                self.handler_tasks.discard(task)

        return ws

    async def shutdown(self) -> None:
        """Stop listening, close open connections and wait for their final drains."""
        if self.state in (ServiceState.DRAINING, ServiceState.STOPPED):
            return
        logger.info("Shutting down proxy server")
        self.state = ServiceState.DRAINING

        if self.site is not None:
            await self.site.stop()
            logger.info("Listener closed")

        # Closes run concurrently; one timeout bounds closes and drains together
        close_tasks = set()
        for session_id, ws in list(self.connections.items()):
            logger.debug(f"Closing connection {session_id}")
            close_tasks.add(asyncio.ensure_future(
                ws.close(code=WSCloseCode.GOING_AWAY, message=b"Server shutdown")))

        handlers = set(self.handler_tasks)
        pending = handlers | close_tasks
        if pending:
            logger.info(f"Waiting up to {self.shutdown_timeout}s for {len(handlers)} sessions to drain...")
            _, still_running = await asyncio.wait(pending, timeout=self.shutdown_timeout)
            if still_running & handlers:
                logger.warning(f"{len(still_running & handlers)} sessions did not finish draining before timeout")
            for task in still_running & close_tasks:
                task.cancel()
            for task in close_tasks - still_running:
                if not task.cancelled() and task.exception() is not None:
                    logger.warning(f"Error closing connection: {task.exception()}")

        if self.runner is not None:
            await self.runner.cleanup()
        await self.backend.cleanup()

        self.state = ServiceState.STOPPED
        logger.info("Proxy server shutdown complete")
