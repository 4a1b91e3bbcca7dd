"""HTTP front end of the game: JSON API, server-sent events and a small page."""

from __future__ import annotations

import json
import logging
import os
import queue
import threading
from typing import Optional

from flask import Flask, Response, jsonify, request, send_from_directory
from flask_cors import CORS
from werkzeug.serving import make_server

from drawnumber.core.core import parse_guess
from drawnumber.core.events import EventBus
from drawnumber.model.draw_number import DrawResult
from drawnumber.modules.base import BaseView
from drawnumber.modules.print_stream import NUMBER_INCORRECT_MESSAGE

logger = logging.getLogger("drawnumber.web")

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5000
KEEPALIVE_SECONDS = 15.0

dir_path = os.path.dirname(os.path.realpath(__file__))
dist_dir = os.path.join(dir_path, "dist")
default_index = "index.html"


def create_app(view: "WebView") -> Flask:
    """Build the Flask application serving ``view``."""
    app = Flask(__name__)
    CORS(app, supports_credentials=True)

    def _not_running():
        return jsonify({"error": "Game is not running"}), 503

    @app.route('/api/status')
    def status_api():
        if view.controller is None:
            return _not_running()
        return jsonify(view.controller.status())

    @app.route('/api/attempt', methods=['POST'])
    def attempt_api():
        payload = request.get_json(force=True, silent=True)
        if not isinstance(payload, dict):
            payload = {}
        value = parse_guess(payload.get("value"))
        if value is None:
            return jsonify({"error": NUMBER_INCORRECT_MESSAGE}), 400
        try:
            outcome = view.dispatch("attempt", {"value": value})
        except RuntimeError:
            return _not_running()
        result = outcome.payload
        if result is None:
            return jsonify({"error": NUMBER_INCORRECT_MESSAGE}), 400
        return jsonify({"success": True, **result.as_dict()})

    @app.route('/api/reset', methods=['POST'])
    def reset_api():
        try:
            view.dispatch("reset")
        except RuntimeError:
            return _not_running()
        return jsonify({"success": True})

    @app.route('/api/events')
    def sse_events():
        """Server-sent events stream for UI updates."""
        def stream():
            listener = view.event_bus.listen()
            if view.controller is not None:
                listener.put({"type": "status", "payload": view.controller.status()})
            try:
                while not view.stopped:
                    try:
                        message = listener.get(timeout=KEEPALIVE_SECONDS)
                    except queue.Empty:
                        yield ": keepalive\n\n"
                        continue
                    event_type = message.get("type", "message")
                    payload = message.get("payload", {})
                    yield f"event: {event_type}\ndata: {json.dumps(payload)}\n\n"
            finally:
                view.event_bus.remove(listener)

        return Response(stream(), mimetype='text/event-stream')

    @app.route('/')
    def index():
        return send_from_directory(dist_dir, default_index)

    return app


class WebView(BaseView):
    """Serves the game over HTTP from a background thread."""

    name = "web"

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        *,
        event_bus: Optional[EventBus] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(name)
        self.host = host
        self.port = port
        self.event_bus = event_bus or EventBus()
        self.app = create_app(self)
        self._server = None
        self._thread: Optional[threading.Thread] = None
        self._stopped = threading.Event()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    @property
    def server_port(self) -> Optional[int]:
        return self._server.server_port if self._server is not None else None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        self._server = make_server(self.host, self.port, self.app, threaded=True)
        self._thread = threading.Thread(target=self._server.serve_forever, name="web_view", daemon=True)
        self._thread.start()
        logger.info({"evt": "web_server", "host": self.host, "port": self._server.server_port})

    def stop(self) -> None:
        self._stopped.set()
        server, self._server = self._server, None
        if server is not None:
            server.shutdown()
            server.server_close()
            logger.info({"evt": "web_server", "status": "stopped"})

    def number_incorrect(self) -> None:
        self.event_bus.publish("number_incorrect", {"message": NUMBER_INCORRECT_MESSAGE})

    def result(self, result: DrawResult) -> None:
        self.event_bus.publish("result", result.as_dict())

    def display_error(self, message: str) -> None:
        self.event_bus.publish("error", {"message": message})
