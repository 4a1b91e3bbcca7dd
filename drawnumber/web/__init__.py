"""Network views: HTTP/SSE and WebSocket front ends of the game."""

from .app import WebView, create_app
from .ws_server import WebSocketView

__all__ = ["WebSocketView", "WebView", "create_app"]
