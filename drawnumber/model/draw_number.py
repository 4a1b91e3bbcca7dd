"""Game model: a secret number drawn in a range and a budget of attempts."""

from __future__ import annotations

import random
from enum import Enum
from typing import Dict, Optional

from .configuration import Configuration


class DrawResult(Enum):
    """Outcome of a single attempt."""

    YOURS_HIGH = "Your number is too high"
    YOURS_LOW = "Your number is too low"
    YOU_WON = "You won"
    YOU_LOST = "You lost"

    @property
    def description(self) -> str:
        return self.value

    @property
    def is_game_over(self) -> bool:
        return self in (DrawResult.YOU_WON, DrawResult.YOU_LOST)

    def as_dict(self) -> Dict[str, object]:
        return {
            "result": self.name,
            "description": self.description,
            "game_over": self.is_game_over,
        }


class DrawNumber:
    """Holds the secret number and the attempts left for the current game."""

    def __init__(self, configuration: Configuration, rng: Optional[random.Random] = None) -> None:
        self._configuration = configuration
        self._rng = rng or random.Random()
        self._choice = configuration.minimum
        self._remaining = 0
        self.reset()

    @property
    def minimum(self) -> int:
        return self._configuration.minimum

    @property
    def maximum(self) -> int:
        return self._configuration.maximum

    @property
    def attempts(self) -> int:
        return self._configuration.attempts

    @property
    def remaining_attempts(self) -> int:
        return self._remaining

    def reset(self) -> None:
        """Start a new game: full attempts and a fresh secret in [minimum, maximum]."""
        self._remaining = self._configuration.attempts
        self._choice = self._rng.randint(self.minimum, self.maximum)

    def attempt(self, n: int) -> DrawResult:
        """Compare ``n`` with the secret.

        Once the attempts are used up every call answers ``YOU_LOST``. A
        number outside the range raises ``ValueError`` without consuming an
        attempt.
        """
        if self._remaining <= 0:
            return DrawResult.YOU_LOST
        if n < self.minimum or n > self.maximum:
            raise ValueError("The number is outside boundaries")
        self._remaining -= 1
        if n > self._choice:
            return DrawResult.YOURS_HIGH
        if n < self._choice:
            return DrawResult.YOURS_LOW
        return DrawResult.YOU_WON


__all__ = ["DrawNumber", "DrawResult"]
