"""
Shifter component - H-pattern gear selector.

Simulates:
- Two-axis knob position (lane x row) in an H-pattern gate
- Edge-saturating moves (no wraparound past the gate)
- Gear lookup from knob position
"""

from dataclasses import dataclass
from enum import Enum
import logging


logger = logging.getLogger(__name__)


class Lane(Enum):
    """Horizontal knob lanes."""
    LEFT = "left"
    MID = "mid"
    RIGHT = "right"


class Row(Enum):
    """Vertical knob rows."""
    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


class Direction(Enum):
    """Discrete knob moves."""
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class Gear(str, Enum):
    """Gear symbols."""
    N = "N"
    FIRST = "1"
    SECOND = "2"
    THIRD = "3"
    FOURTH = "4"
    FIFTH = "5"
    REVERSE = "R"

    @classmethod
    def coerce(cls, value: "Gear | str | None") -> "Gear":
        """Convert a gear or symbol to a Gear, falling back to neutral."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return cls.N

    @property
    def is_neutral(self) -> bool:
        return self is Gear.N


@dataclass(frozen=True)
class GearPosition:
    """Knob position in the gate."""
    lane: Lane = Lane.MID
    row: Row = Row.CENTER


GEAR_TABLE = {
    GearPosition(Lane.MID, Row.CENTER): Gear.N,
    GearPosition(Lane.LEFT, Row.TOP): Gear.FIRST,
    GearPosition(Lane.LEFT, Row.BOTTOM): Gear.SECOND,
    GearPosition(Lane.MID, Row.TOP): Gear.THIRD,
    GearPosition(Lane.MID, Row.BOTTOM): Gear.FOURTH,
    GearPosition(Lane.RIGHT, Row.TOP): Gear.FIFTH,
    GearPosition(Lane.RIGHT, Row.BOTTOM): Gear.REVERSE,
}
GEAR_POSITIONS = {gear: position for position, gear in GEAR_TABLE.items()}

# Knob coordinates as percent of the gate (for the display layer)
LANE_X_PERCENT = {Lane.LEFT: 30.0, Lane.MID: 50.0, Lane.RIGHT: 70.0}
ROW_Y_PERCENT = {Row.TOP: 20.0, Row.CENTER: 50.0, Row.BOTTOM: 80.0}

_LANE_ORDER = [Lane.LEFT, Lane.MID, Lane.RIGHT]
_ROW_ORDER = [Row.TOP, Row.CENTER, Row.BOTTOM]


def gear_from(position: GearPosition) -> Gear:
    """Look up the gear for a knob position (unmapped -> N)."""
    return GEAR_TABLE.get(position, Gear.N)


def _step(order: list, current, delta: int):
    index = order.index(current) + delta
    index = min(max(index, 0), len(order) - 1)
    return order[index]


class GearSelector:
    """H-pattern gear selector.

    Tracks the knob position and derives the engaged gear from it.
    Moves saturate at the gate edges, so from the right lane a left
    move lands in the middle lane and a further right move does nothing.

    Usage:
        selector = GearSelector()
        selector.shift("left")
        selector.shift("up")
        selector.current_gear  # Gear.FIRST
    """

    def __init__(self, position: GearPosition | None = None):
        """Initialize selector.

        Args:
            position: Starting knob position. Neutral if None.
        """
        self._position = position or GearPosition()

    @property
    def position(self) -> GearPosition:
        """Current knob position."""
        return self._position

    @property
    def current_gear(self) -> Gear:
        """Gear derived from the knob position."""
        return gear_from(self._position)

    @property
    def knob_percent(self) -> tuple[float, float]:
        """Knob (x, y) position as percent of the gate."""
        return LANE_X_PERCENT[self._position.lane], ROW_Y_PERCENT[self._position.row]

    def shift(self, direction: Direction | str) -> bool:
        """Move the knob one step.

        Args:
            direction: Move direction (enum or its string value)

        Returns:
            True if the derived gear changed
        """
        if isinstance(direction, str):
            direction = direction.lower()
        try:
            direction = Direction(direction)
        except ValueError:
            logger.debug(f"Ignoring unknown shift direction: {direction!r}")
            return False

        before = self.current_gear
        lane, row = self._position.lane, self._position.row

        if direction is Direction.LEFT:
            lane = _step(_LANE_ORDER, lane, -1)
        elif direction is Direction.RIGHT:
            lane = _step(_LANE_ORDER, lane, 1)
        elif direction is Direction.UP:
            row = _step(_ROW_ORDER, row, -1)
        else:
            row = _step(_ROW_ORDER, row, 1)

        self._position = GearPosition(lane, row)
        return self.current_gear is not before

    def set_gear(self, gear: Gear | str) -> bool:
        """Place the knob directly at a gear's slot.

        Args:
            gear: Target gear (unknown symbols select neutral)

        Returns:
            True if the derived gear changed
        """
        before = self.current_gear
        self._position = GEAR_POSITIONS[Gear.coerce(gear)]
        return self.current_gear is not before

    def reset(self) -> None:
        """Return knob to neutral."""
        self._position = GearPosition()

    def get_state(self) -> dict:
        """Get selector state for telemetry.

        Returns:
            Dictionary containing selector state values
        """
        return {
            "lane": self._position.lane.value,
            "row": self._position.row.value,
            "gear": self.current_gear.value,
        }
