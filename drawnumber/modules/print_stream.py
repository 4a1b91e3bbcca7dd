"""Output-only view writing the game transcript to a text stream or a file."""

from __future__ import annotations

import logging
import os
import threading
from typing import Optional, TextIO, Union

from drawnumber.model.draw_number import DrawResult

from .base import BaseView

logger = logging.getLogger("drawnumber.views")

NUMBER_INCORRECT_MESSAGE = "You must enter a number"


class PrintStreamView(BaseView):
    """Writes results and errors, one per line.

    ``target`` is either an open text stream, which is left open on stop, or
    a path, which is opened (truncated, UTF-8) here and closed on stop.
    """

    name = "print_stream"

    def __init__(self, target: Union[TextIO, str, os.PathLike], name: Optional[str] = None) -> None:
        if isinstance(target, (str, os.PathLike)):
            self._out: TextIO = open(target, "w", encoding="utf-8")
            self._owns_stream = True
            label = os.fspath(target)
        else:
            self._out = target
            self._owns_stream = False
            label = getattr(target, "name", None) or type(target).__name__
        super().__init__(name or f"{self.name}:{label}")
        self._lock = threading.Lock()

    def _println(self, line: str) -> None:
        with self._lock:
            if self._out.closed:
                logger.debug({"evt": "print_stream_closed", "view": self.name, "line": line})
                return
            self._out.write(line + "\n")
            self._out.flush()

    def stop(self) -> None:
        if self._owns_stream:
            with self._lock:
                self._out.close()

    def number_incorrect(self) -> None:
        self._println(NUMBER_INCORRECT_MESSAGE)

    def result(self, result: DrawResult) -> None:
        self._println(result.description)

    def display_error(self, message: str) -> None:
        self._println(f"Error: {message}")
