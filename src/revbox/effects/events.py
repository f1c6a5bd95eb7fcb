"""
Outgoing events for the audio and display collaborators.
"""

from dataclasses import dataclass

from revbox.car.shifter import Gear


@dataclass(frozen=True)
class ShiftEvent:
    """Gear changed; play the shift sound."""
    gear: Gear
    intensity: float = 1.0


@dataclass(frozen=True)
class PopEvent:
    """Exhaust pop.

    Intensity scales volume/brightness (roughly 0.3 to 1.3).
    Delay is seconds after the tick at which the pop should sound.
    """
    intensity: float
    delay: float = 0.0
    source: str = "limiter"


SHIFT_INTENSITY = {
    Gear.REVERSE: 1.2,
    Gear.N: 0.7,
}


def shift_event_for(gear: Gear) -> ShiftEvent:
    """Build the shift event for a newly engaged gear."""
    return ShiftEvent(gear=gear, intensity=SHIFT_INTENSITY.get(gear, 1.0))
