"""Base class for views attached to the game controller."""

from __future__ import annotations

from typing import Any, Dict, Optional

from drawnumber.core.core import CommandResult, DrawNumberApp
from drawnumber.model.draw_number import DrawResult


class BaseView:
    """Default implementation that other views can extend."""

    name = "base"

    def __init__(self, name: Optional[str] = None) -> None:
        if name is not None:
            self.name = name
        self.controller: Optional[DrawNumberApp] = None

    # Lifecycle -----------------------------------------------------------
    def attach(self, controller: DrawNumberApp) -> None:
        self.controller = controller

    def start(self) -> None:  # pragma: no cover - default no-op
        pass

    def stop(self) -> None:  # pragma: no cover - default no-op
        pass

    # Rendering -----------------------------------------------------------
    def number_incorrect(self) -> None:
        pass

    def result(self, result: DrawResult) -> None:
        pass

    def display_error(self, message: str) -> None:
        pass

    # Utilities -----------------------------------------------------------
    def dispatch(self, command: str, payload: Optional[Dict[str, Any]] = None) -> CommandResult:
        if self.controller is None:
            raise RuntimeError(f"View '{self.name}' is not attached to a controller")
        return self.controller.dispatch(command, payload or {})
