"""Core package exposing the game controller and shared utilities."""

from .core import CommandResult, DrawNumberApp
from .events import EventBus

__all__ = ["CommandResult", "DrawNumberApp", "EventBus"]
