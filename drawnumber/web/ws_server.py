"""WebSocket front end: remote players send guesses, every client hears the answers."""

from __future__ import annotations

import asyncio
import json
import logging
import threading
from typing import Any, Dict, Optional

import websockets
from websockets.exceptions import ConnectionClosedError, ConnectionClosedOK

from drawnumber.core.core import parse_guess
from drawnumber.model.draw_number import DrawResult
from drawnumber.modules.base import BaseView
from drawnumber.modules.print_stream import NUMBER_INCORRECT_MESSAGE

logger = logging.getLogger("drawnumber.ws")

DEFAULT_WS_HOST = "0.0.0.0"
DEFAULT_WS_PORT = 8888
STARTUP_TIMEOUT = 5.0
RESET_WORDS = ("reset", "new")


def _envelope(title: str, data: Any = None, status: str = "ok") -> Dict[str, Any]:
    return {"status": status, "title": title, "data": data}


class WebSocketView(BaseView):
    """Runs a websockets server on its own event loop thread."""

    name = "websocket"

    def __init__(self, host: str = DEFAULT_WS_HOST, port: int = DEFAULT_WS_PORT, *, name: Optional[str] = None) -> None:
        super().__init__(name)
        self.host = host
        self.port = port
        self._clients: set = set()
        self._clients_lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._ready = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.bound_port: Optional[int] = None

    # Lifecycle -----------------------------------------------------------
    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, name="websocket_view", daemon=True)
        self._thread.start()
        self._ready.wait(STARTUP_TIMEOUT)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def stop(self) -> None:
        loop, stop_event = self._loop, self._stop_event
        if loop is None or stop_event is None:
            return
        try:
            loop.call_soon_threadsafe(stop_event.set)
        except RuntimeError:
            # Loop already closed.
            return

    def _run(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        try:
            loop.run_until_complete(self._serve())
        except Exception as exc:
            logger.error({"evt": "ws_server_error", "error": str(exc)})
        finally:
            self._ready.set()
            self._loop = None
            loop.run_until_complete(loop.shutdown_default_executor())
            loop.close()

    async def _serve(self) -> None:
        self._stop_event = asyncio.Event()
        async with websockets.serve(self._session, self.host, self.port) as server:
            self.bound_port = server.sockets[0].getsockname()[1]
            logger.info({"evt": "ws_server", "status": "waiting", "host": self.host, "port": self.bound_port})
            self._ready.set()
            await self._stop_event.wait()
        logger.info({"evt": "ws_server", "status": "stopped"})

    async def _session(self, websocket) -> None:
        with self._clients_lock:
            self._clients.add(websocket)
        try:
            async for message in websocket:
                # The controller lock and view writes must not stall the loop.
                response = await asyncio.get_running_loop().run_in_executor(None, self.handle_message, message)
                await websocket.send(json.dumps(response))
        except (ConnectionClosedOK, ConnectionClosedError) as exc:
            logger.debug({"evt": "ws_connection_closed", "code": getattr(exc, "code", None), "reason": getattr(exc, "reason", None)})
        finally:
            with self._clients_lock:
                self._clients.discard(websocket)

    # Input ---------------------------------------------------------------
    def handle_message(self, raw: Any) -> Dict[str, Any]:
        """Run one client message against the game and build the reply."""
        data = raw
        if isinstance(data, (bytes, bytearray)):
            data = data.decode("utf-8", errors="replace")
        try:
            data = json.loads(data)
        except (TypeError, ValueError):
            logger.debug({"evt": "ws_parse_failed", "raw": data})

        command = ""
        value: Any = None
        if isinstance(data, dict):
            command = str(data.get("cmd", "")).strip().lower()
            value = data.get("value")
        elif isinstance(data, (str, int, float)) and not isinstance(data, bool):
            text = str(data).strip().lower()
            if text in RESET_WORDS:
                command = "reset"
            else:
                command, value = "attempt", data

        if command == "attempt":
            guess = parse_guess(value)
            if guess is None:
                return _envelope(command, {"message": NUMBER_INCORRECT_MESSAGE}, status="error")
            outcome = self.dispatch("attempt", {"value": guess})
            if outcome.payload is None:
                return _envelope(command, {"message": NUMBER_INCORRECT_MESSAGE}, status="error")
            return _envelope(command, outcome.payload.as_dict())
        if command in RESET_WORDS:
            self.dispatch("reset")
            return _envelope("reset", {"message": "New game started"})
        logger.debug({"evt": "ws_unknown_command", "payload": data})
        return _envelope(command or "unknown", {"message": "Unknown command"}, status="error")

    # Output --------------------------------------------------------------
    @property
    def client_count(self) -> int:
        with self._clients_lock:
            return len(self._clients)

    async def _send_all(self, text: str) -> None:
        with self._clients_lock:
            clients = list(self._clients)
        for websocket in clients:
            try:
                await websocket.send(text)
            except (ConnectionClosedOK, ConnectionClosedError):
                with self._clients_lock:
                    self._clients.discard(websocket)

    def _broadcast(self, title: str, data: Dict[str, Any]) -> None:
        loop = self._loop
        if loop is None:
            return
        text = json.dumps(_envelope(title, data))
        try:
            asyncio.run_coroutine_threadsafe(self._send_all(text), loop)
        except RuntimeError:
            logger.debug({"evt": "ws_broadcast_dropped", "title": title})

    def number_incorrect(self) -> None:
        self._broadcast("number_incorrect", {"message": NUMBER_INCORRECT_MESSAGE})

    def result(self, result: DrawResult) -> None:
        self._broadcast("result", result.as_dict())

    def display_error(self, message: str) -> None:
        self._broadcast("error", {"message": message})
