"""Game controller: owns the model and keeps every attached view informed."""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol

from drawnumber.model.configuration import Configuration, ConfigurationError, read_configuration
from drawnumber.model.draw_number import DrawNumber, DrawResult

logger = logging.getLogger("drawnumber.core")


class CommandHandler(Protocol):
    """Typed callable for command handlers."""

    def __call__(self, payload: Optional[Dict[str, Any]] = None) -> Any: ...


class View(Protocol):
    """Interface the controller expects from views."""

    name: str

    def attach(self, controller: "DrawNumberApp") -> None: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def number_incorrect(self) -> None: ...

    def result(self, result: DrawResult) -> None: ...

    def display_error(self, message: str) -> None: ...


@dataclass
class CommandResult:
    """Standard response envelope returned by `DrawNumberApp.dispatch`."""

    command: str
    handled: bool
    payload: Optional[Any] = None


def parse_guess(value: Any) -> Optional[int]:
    """Return ``value`` as an int, or None when it is not a whole number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


class DrawNumberApp:
    """Controller of the game, observer of all its views."""

    def __init__(
        self,
        views: Optional[Iterable[View]] = None,
        *,
        config_file: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._views: Dict[str, View] = {}
        self._lock = threading.RLock()
        self._finished = threading.Event()
        self._command_registry: Dict[str, CommandHandler] = {
            "attempt": self._handle_attempt,
            "reset": self._handle_reset,
            "quit": self._handle_quit,
        }
        # Views first, so configuration problems reach them. Commands sent by
        # views that are already running wait on the lock until the model exists.
        with self._lock:
            try:
                for view in views or ():
                    self.register_view(view)
                self.model = DrawNumber(self._load_configuration(config_file), rng=rng)
            except BaseException:
                for view in self.views:
                    self.unregister_view(view.name)
                raise
            logger.info({"evt": "game_ready", **self.status()})

    # Views ---------------------------------------------------------------
    @property
    def views(self) -> List[View]:
        with self._lock:
            return list(self._views.values())

    def register_view(self, view: View) -> None:
        """Attach a view to this controller and start it."""
        with self._lock:
            if view.name in self._views:
                raise ValueError(f"View '{view.name}' already registered")
            view.attach(self)
            self._views[view.name] = view
        view.start()
        logger.debug({"evt": "view_registered", "view": view.name})

    def unregister_view(self, name: str) -> None:
        with self._lock:
            view = self._views.pop(name, None)
        if view is None:
            return
        try:
            view.stop()
        except Exception as exc:
            logger.warning({"evt": "view_stop_failed", "view": name, "error": str(exc)})

    def display_error_all(self, message: str) -> None:
        for view in self.views:
            view.display_error(message)

    def _load_configuration(self, config_file: Optional[str]) -> Configuration:
        try:
            configuration = read_configuration(config_file)
        except ConfigurationError as exc:
            logger.warning({"evt": "config_error", "error": str(exc)})
            self.display_error_all(str(exc))
            return Configuration()
        if not configuration.is_consistent():
            logger.warning({"evt": "config_inconsistent", **configuration.as_dict()})
            self.display_error_all(
                f"Invalid configuration (min: {configuration.minimum}, max: {configuration.maximum}, "
                f"attempts: {configuration.attempts}). Default values have been set."
            )
            return Configuration()
        return configuration

    # Observer ------------------------------------------------------------
    def new_attempt(self, n: int) -> Optional[DrawResult]:
        """Play ``n`` and tell every view; None when the number was rejected."""
        with self._lock:
            try:
                result = self.model.attempt(n)
            except ValueError:
                logger.info({"evt": "attempt_rejected", "value": n})
                for view in self._views.values():
                    view.number_incorrect()
                return None
            logger.info({"evt": "attempt", "value": n, "result": result.name,
                         "remaining": self.model.remaining_attempts})
            for view in self._views.values():
                view.result(result)
            return result

    def reset_game(self) -> None:
        with self._lock:
            self.model.reset()
        logger.info({"evt": "game_reset"})

    def quit(self) -> None:
        """Stop every view and release anyone blocked in `wait`."""
        if self._finished.is_set():
            return
        logger.info({"evt": "quit"})
        for view in self.views:
            self.unregister_view(view.name)
        self._finished.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._finished.wait(timeout)

    @property
    def finished(self) -> bool:
        return self._finished.is_set()

    def status(self) -> Dict[str, int]:
        with self._lock:
            return {
                "minimum": self.model.minimum,
                "maximum": self.model.maximum,
                "attempts": self.model.attempts,
                "remaining_attempts": self.model.remaining_attempts,
            }

    # Commands ------------------------------------------------------------
    def dispatch(self, command: str, payload: Optional[Dict[str, Any]] = None) -> CommandResult:
        """Send a named command from a view into the game."""
        handler = self._command_registry.get(command)
        if handler is None:
            return CommandResult(command=command, handled=False)
        result = handler(payload or {})
        return CommandResult(command=command, handled=True, payload=result)

    def _handle_attempt(self, payload: Optional[Dict[str, Any]] = None) -> Optional[DrawResult]:
        value = parse_guess((payload or {}).get("value"))
        if value is None:
            with self._lock:
                for view in self._views.values():
                    view.number_incorrect()
            return None
        return self.new_attempt(value)

    def _handle_reset(self, payload: Optional[Dict[str, Any]] = None) -> None:
        self.reset_game()

    def _handle_quit(self, payload: Optional[Dict[str, Any]] = None) -> None:
        self.quit()


__all__ = ["CommandResult", "DrawNumberApp", "View", "parse_guess"]
