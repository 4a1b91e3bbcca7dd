#!/usr/bin/env python3
"""Project entry point. Builds the views and launches the game controller."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional, Sequence

from drawnumber.core import DrawNumberApp
from drawnumber.core.core import View
from drawnumber.modules import ConsoleView, PrintStreamView

logger = logging.getLogger("drawnumber")

DEFAULT_LOG_FILE = "log.txt"


def _read_env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return default


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="drawnumber",
        description="Guess the number drawn by the game, from the console, a browser or a websocket.",
    )
    parser.add_argument(
        "--config",
        default=os.getenv("DRAWNUMBER_CONFIG"),
        help="YAML file with minimum, maximum and attempts (default: packaged config.yml).",
    )
    parser.add_argument(
        "--log-file",
        default=os.getenv("DRAWNUMBER_LOG_FILE", DEFAULT_LOG_FILE),
        help="File receiving a transcript of the game; empty string disables it (default: log.txt).",
    )
    parser.add_argument(
        "--no-console",
        action="store_true",
        help="Do not read guesses from standard input; print results to standard output instead.",
    )
    parser.add_argument(
        "--web",
        action="store_true",
        help="Serve the HTTP front end.",
    )
    parser.add_argument(
        "--host",
        default=os.getenv("DRAWNUMBER_WEB_HOST", "0.0.0.0"),
        help="Interface the network front ends bind to (default: 0.0.0.0).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=_read_env_int("DRAWNUMBER_WEB_PORT", 5000),
        help="HTTP port (default: 5000).",
    )
    parser.add_argument(
        "--ws-port",
        type=int,
        default=_read_env_int("DRAWNUMBER_WS_PORT", None),
        help="Serve the WebSocket front end on this port (default: disabled).",
    )
    return parser.parse_args(argv)


def build_views(args: argparse.Namespace) -> List[View]:
    views: List[View] = []
    if args.no_console:
        views.append(PrintStreamView(sys.stdout))
    else:
        views.append(ConsoleView())
    if args.log_file:
        views.append(PrintStreamView(args.log_file))
    if args.web:
        from drawnumber.web.app import WebView

        views.append(WebView(args.host, args.port))
    if args.ws_port is not None:
        from drawnumber.web.ws_server import WebSocketView

        views.append(WebSocketView(args.host, args.ws_port))
    return views


def main(argv: Optional[Sequence[str]] = None) -> int:
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format='%(asctime)s %(levelname)s %(message)s',
    )
    args = parse_args(argv)
    logger.info({"evt": "startup", "component": "drawnumber", "log_level": log_level})

    app = DrawNumberApp(build_views(args), config_file=args.config)
    try:
        app.wait()
    except KeyboardInterrupt:
        logger.info({"evt": "interrupted"})
        app.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
