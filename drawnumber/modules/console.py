"""Interactive terminal view: reads guesses from a stream, prints the answers."""

from __future__ import annotations

import logging
import sys
import threading
from typing import Optional, TextIO

from drawnumber.core.core import parse_guess
from drawnumber.model.draw_number import DrawResult

from .base import BaseView
from .print_stream import NUMBER_INCORRECT_MESSAGE

logger = logging.getLogger("drawnumber.views")

PROMPT = "> "
HELP_TEXT = "Enter a number to guess, 'reset' for a new game or 'quit' to leave."
PLAY_AGAIN_TEXT = "Play again? [y/n]"
QUIT_WORDS = ("quit", "exit")
RESET_WORDS = ("reset", "new")
YES_WORDS = ("y", "yes")


class ConsoleView(BaseView):
    """Line-oriented player front end running on a background reader thread."""

    name = "console"

    def __init__(
        self,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(name)
        self._in = stdin or sys.stdin
        self._out = stdout or sys.stdout
        self._write_lock = threading.Lock()
        self._running = threading.Event()
        self._awaiting_restart = False
        self._thread: Optional[threading.Thread] = None

    # Lifecycle -----------------------------------------------------------
    def start(self) -> None:
        self._running.set()
        self._thread = threading.Thread(target=self._run, name="console_view", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._running.clear()

    @property
    def running(self) -> bool:
        return self._running.is_set()

    def _run(self) -> None:
        self._write(HELP_TEXT)
        while self._running.is_set():
            self._write(PROMPT, newline=False)
            line = self._in.readline()
            if not line:
                logger.info({"evt": "console_eof"})
                if self._running.is_set():
                    self.dispatch("quit")
                break
            if not self._running.is_set():
                break
            self.handle_line(line)

    # Input ---------------------------------------------------------------
    def handle_line(self, line: str) -> None:
        """Interpret one line typed by the player."""
        text = line.strip().lower()
        if not text:
            return
        if self._awaiting_restart:
            self._awaiting_restart = False
            if text in YES_WORDS:
                self._new_game()
            else:
                self.dispatch("quit")
            return
        if text in QUIT_WORDS:
            self.dispatch("quit")
        elif text in RESET_WORDS:
            self._new_game()
        else:
            value = parse_guess(text)
            if value is None:
                self.number_incorrect()
                return
            outcome = self.dispatch("attempt", {"value": value})
            # Only a game this console ended asks to play again.
            if outcome.payload is not None and outcome.payload.is_game_over:
                self._awaiting_restart = True
                self._write(PLAY_AGAIN_TEXT)

    def _new_game(self) -> None:
        self.dispatch("reset")
        self._write("New game started")

    # Output --------------------------------------------------------------
    def _write(self, text: str, newline: bool = True) -> None:
        with self._write_lock:
            self._out.write(text + ("\n" if newline else ""))
            self._out.flush()

    def number_incorrect(self) -> None:
        self._write(NUMBER_INCORRECT_MESSAGE)

    def result(self, result: DrawResult) -> None:
        self._write(result.description)

    def display_error(self, message: str) -> None:
        self._write(f"Error: {message}")
