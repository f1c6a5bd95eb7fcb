"""
Neutral burst - Exhaust pops while revving in neutral.

Two independent pop sources, both armed only in neutral:
- Release burst: a decaying run of pops after lifting off at high rpm
- Crackle: short clusters of pops while holding high rpm
"""

from dataclasses import dataclass
from typing import List
import logging
import numpy as np

from revbox.car.shifter import Gear
from revbox.effects.events import PopEvent


logger = logging.getLogger(__name__)


@dataclass
class NeutralBurstConfig:
    """Neutral pop tuning."""
    redline_rpm: float = 8000.0

    # Release burst
    release_min_rpm: float = 5200.0
    release_initial_delay: float = 0.05
    release_base_count: int = 10
    release_extra_count: int = 10          # count = base + integer in [0, extra)
    release_delay_range: tuple[float, float] = (0.045, 0.085)
    release_intensity_base: float = 0.55
    release_intensity_gain: float = 0.55

    # Crackle while holding revs
    crackle_min_throttle: float = 0.35
    crackle_min_rpm: float = 4800.0
    crackle_max_pops: int = 3
    crackle_stagger_range: tuple[float, float] = (0.035, 0.07)
    crackle_cooldown_range: tuple[float, float] = (0.12, 0.26)
    crackle_intensity_base: float = 0.35
    crackle_intensity_gain: float = 0.75


class NeutralBurstGenerator:
    """Pop generator for free-revving in neutral.

    The release burst and the crackle keep separate timers and may
    both fire in the same tick.
    """

    def __init__(
        self,
        config: NeutralBurstConfig | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.config = config or NeutralBurstConfig()
        self._rng = rng if rng is not None else np.random.default_rng()

        self._release_burst: int = 0
        self._release_delay: float = 0.0
        self._crackle_timer: float = 0.0

    @property
    def release_burst(self) -> int:
        """Pops left in the current release burst."""
        return self._release_burst

    @property
    def release_delay(self) -> float:
        return self._release_delay

    @property
    def crackle_timer(self) -> float:
        return self._crackle_timer

    @property
    def active(self) -> bool:
        """Check if a release burst is still running."""
        return self._release_burst > 0

    def trigger_release(self, gear: Gear, rpm: float) -> bool:
        """Arm a release burst after the throttle is lifted.

        Args:
            gear: Engaged gear when the throttle was released
            rpm: Engine rpm when the throttle was released

        Returns:
            True if a burst was armed
        """
        if not Gear.coerce(gear).is_neutral or rpm < self.config.release_min_rpm:
            return False

        extra = int(self._rng.integers(0, self.config.release_extra_count))
        self._release_delay = self.config.release_initial_delay
        self._release_burst = self.config.release_base_count + extra
        logger.debug(f"Neutral release burst armed: {self._release_burst} pops at {rpm:.0f} rpm")
        return True

    def update(self, dt: float, gear: Gear, throttle: float, rpm: float) -> List[PopEvent]:
        """Advance both pop sources one tick.

        Args:
            dt: Time step in seconds
            gear: Engaged gear
            throttle: Smoothed throttle (0-1)
            rpm: Engine rpm after this tick's physics

        Returns:
            Pops fired this tick
        """
        events = self._update_crackle(dt, gear, throttle, rpm)
        events.extend(self._update_release(dt, rpm))
        return events

    def _update_crackle(self, dt: float, gear: Gear, throttle: float, rpm: float) -> List[PopEvent]:
        cfg = self.config
        self._crackle_timer = max(0.0, self._crackle_timer - dt)

        high_rev_neutral = (
            Gear.coerce(gear).is_neutral
            and throttle > cfg.crackle_min_throttle
            and rpm > cfg.crackle_min_rpm
        )
        if not high_rev_neutral or self._crackle_timer > 0.0:
            return []

        intensity = cfg.crackle_intensity_base + rpm / cfg.redline_rpm * cfg.crackle_intensity_gain
        count = 1 + int(self._rng.integers(0, cfg.crackle_max_pops))
        events = [
            PopEvent(
                intensity=intensity,
                delay=i * float(self._rng.uniform(*cfg.crackle_stagger_range)),
                source="crackle",
            )
            for i in range(count)
        ]
        self._crackle_timer = float(self._rng.uniform(*cfg.crackle_cooldown_range))
        return events

    def _update_release(self, dt: float, rpm: float) -> List[PopEvent]:
        cfg = self.config
        if self._release_delay > 0.0:
            self._release_delay = max(0.0, self._release_delay - dt)
            return []
        if self._release_burst <= 0:
            return []

        intensity = cfg.release_intensity_base + rpm / cfg.redline_rpm * cfg.release_intensity_gain
        self._release_burst -= 1
        self._release_delay = float(self._rng.uniform(*cfg.release_delay_range))
        return [PopEvent(intensity=intensity, source="release")]

    def reset(self) -> None:
        """Cancel any running burst and crackle cooldown."""
        self._release_burst = 0
        self._release_delay = 0.0
        self._crackle_timer = 0.0

    def get_state(self) -> dict:
        """Get generator state for telemetry.

        Returns:
            Dictionary containing burst state values
        """
        return {
            "release_burst": self._release_burst,
            "release_delay": self._release_delay,
            "crackle_timer": self._crackle_timer,
        }
