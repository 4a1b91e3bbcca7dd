"""Views attached to the game controller."""

from .base import BaseView
from .console import ConsoleView
from .print_stream import PrintStreamView

__all__ = ["BaseView", "ConsoleView", "PrintStreamView"]
