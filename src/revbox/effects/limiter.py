"""
Rev limiter - Duty-cycle fuel cut near redline.

Simulates:
- Oscillating cut/fire cycle while pinned at the limiter
- Limiter pops at a throttled rate
"""

from dataclasses import dataclass, field
from typing import List
import logging
import numpy as np

from revbox.car.shifter import Gear
from revbox.effects.events import PopEvent


logger = logging.getLogger(__name__)


@dataclass
class LimiterConfig:
    """Rev limiter tuning."""
    start_rpm: float = 7750.0
    min_throttle: float = 0.65

    # Cut oscillator
    frequency_hz: float = 14.0
    cut_duty: float = 0.45
    cut_throttle: float = 0.02

    # Pops
    pop_intensity_range: tuple[float, float] = (0.9, 1.25)
    pop_cooldown_range: tuple[float, float] = (0.12, 0.22)


@dataclass
class LimiterOutput:
    """Result of one limiter update."""
    engaged: bool = False
    cut: bool = False
    events: List[PopEvent] = field(default_factory=list)


class RevLimiter:
    """Rev limiter state machine.

    Idle until throttle is pressed hard in gear at the limiter rpm,
    then runs a 14 Hz oscillator and cuts fuel for the first 45%
    of every cycle. Leaving the limiter zeroes the phase so the next
    engagement starts with a cut.
    """

    def __init__(
        self,
        config: LimiterConfig | None = None,
        rng: np.random.Generator | None = None,
    ):
        """Initialize limiter.

        Args:
            config: Limiter configuration. Uses defaults if None.
            rng: Random source for pop intensity and timing
        """
        self.config = config or LimiterConfig()
        self._rng = rng if rng is not None else np.random.default_rng()

        self._phase: float = 0.0
        self._cooldown: float = 0.0
        self._engaged: bool = False

    @property
    def phase(self) -> float:
        """Oscillator phase in [0, 1)."""
        return self._phase

    @property
    def cooldown(self) -> float:
        """Seconds until the next pop may fire."""
        return self._cooldown

    @property
    def engaged(self) -> bool:
        return self._engaged

    def should_engage(self, throttle: float, rpm: float, gear: Gear) -> bool:
        """Check the limiter entry condition."""
        return (
            throttle > self.config.min_throttle
            and rpm >= self.config.start_rpm
            and not Gear.coerce(gear).is_neutral
        )

    def update(self, dt: float, throttle: float, rpm: float, gear: Gear) -> LimiterOutput:
        """Advance the limiter one tick.

        Args:
            dt: Time step in seconds
            throttle: Smoothed throttle (0-1)
            rpm: Engine rpm at the start of the tick
            gear: Engaged gear

        Returns:
            Engagement, cut signal and any pops fired
        """
        self._cooldown = max(0.0, self._cooldown - dt)

        engaged = self.should_engage(throttle, rpm, gear)
        if engaged != self._engaged:
            logger.debug(f"Rev limiter {'engaged' if engaged else 'released'} at {rpm:.0f} rpm")
            if engaged:
                # Fresh engagement pops on its first cut
                self._cooldown = 0.0
        self._engaged = engaged

        if not engaged:
            self._phase = 0.0
            return LimiterOutput()

        self._phase += dt * self.config.frequency_hz
        if self._phase >= 1.0:
            self._phase %= 1.0

        output = LimiterOutput(engaged=True, cut=self._phase < self.config.cut_duty)

        if output.cut and self._cooldown == 0.0:
            output.events.append(PopEvent(
                intensity=float(self._rng.uniform(*self.config.pop_intensity_range)),
                source="limiter",
            ))
            self._cooldown = float(self._rng.uniform(*self.config.pop_cooldown_range))

        return output

    def effective_throttle(self, throttle: float, cut: bool) -> float:
        """Throttle actually delivered this tick."""
        return self.config.cut_throttle if cut else throttle

    def reset(self) -> None:
        """Reset limiter to idle."""
        self._phase = 0.0
        self._cooldown = 0.0
        self._engaged = False

    def get_state(self) -> dict:
        """Get limiter state for telemetry.

        Returns:
            Dictionary containing limiter state values
        """
        return {
            "engaged": self._engaged,
            "phase": self._phase,
            "cooldown": self._cooldown,
        }
