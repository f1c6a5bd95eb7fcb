"""
Driver intents - Discrete inputs queued between ticks.
"""

from enum import Enum
from typing import Iterable, List
import logging

from revbox.car.shifter import Direction


logger = logging.getLogger(__name__)


class Intent(Enum):
    """Discrete driver inputs."""
    SHIFT_LEFT = "shift_left"
    SHIFT_RIGHT = "shift_right"
    SHIFT_UP = "shift_up"
    SHIFT_DOWN = "shift_down"
    THROTTLE_HOLD = "throttle_hold"
    THROTTLE_RELEASE = "throttle_release"
    BRAKE_HOLD = "brake_hold"
    BRAKE_RELEASE = "brake_release"
    MUTE_TOGGLE = "mute_toggle"

    @property
    def is_shift(self) -> bool:
        return self in SHIFT_DIRECTIONS

    @property
    def direction(self) -> Direction | None:
        """Knob direction for shift intents."""
        return SHIFT_DIRECTIONS.get(self)

    @classmethod
    def for_direction(cls, direction: Direction | str) -> "Intent":
        """Shift intent for a knob direction."""
        if isinstance(direction, str):
            direction = direction.lower()
        return _DIRECTION_INTENTS[Direction(direction)]


SHIFT_DIRECTIONS = {
    Intent.SHIFT_LEFT: Direction.LEFT,
    Intent.SHIFT_RIGHT: Direction.RIGHT,
    Intent.SHIFT_UP: Direction.UP,
    Intent.SHIFT_DOWN: Direction.DOWN,
}
_DIRECTION_INTENTS = {v: k for k, v in SHIFT_DIRECTIONS.items()}


class IntentQueue:
    """Intents collected between two ticks.

    Draining returns all shifts first, then the pedal and mute toggles,
    each group in arrival order.
    """

    def __init__(self):
        self._pending: List[Intent] = []

    def __len__(self) -> int:
        return len(self._pending)

    def push(self, intent: Intent | str) -> bool:
        """Queue an intent.

        Args:
            intent: Intent or its string value

        Returns:
            True if the intent was recognised and queued
        """
        try:
            intent = Intent(intent)
        except ValueError:
            logger.debug(f"Ignoring unknown intent: {intent!r}")
            return False
        self._pending.append(intent)
        return True

    def extend(self, intents: Iterable[Intent | str]) -> None:
        for intent in intents:
            self.push(intent)

    def drain(self) -> List[Intent]:
        """Take all queued intents in application order."""
        pending, self._pending = self._pending, []
        shifts = [i for i in pending if i.is_shift]
        toggles = [i for i in pending if not i.is_shift]
        return shifts + toggles

    def clear(self) -> None:
        self._pending.clear()
