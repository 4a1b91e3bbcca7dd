"""Model layer: game state and its configuration."""

from .configuration import Configuration, ConfigurationError, read_configuration
from .draw_number import DrawNumber, DrawResult

__all__ = ["Configuration", "ConfigurationError", "DrawNumber", "DrawResult", "read_configuration"]
