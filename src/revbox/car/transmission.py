"""
Transmission component - Drivetrain ratio and speed tables.

Simulates:
- Per-gear ratio and top-speed lookups
- Engine speed target from road speed (engaged gears)
- Free-revving engine target in neutral
"""

from dataclasses import dataclass, field
from typing import Dict
import numpy as np

from revbox.car.shifter import Gear


@dataclass
class TransmissionConfig:
    """Configuration for the arcade drivetrain.

    Default values give the hypercar tuning: short first gear,
    very tall fifth, slow reverse.
    """
    gear_ratios: Dict[Gear, float] = field(default_factory=lambda: {
        Gear.N: 0.0,
        Gear.FIRST: 3.6,
        Gear.SECOND: 2.2,
        Gear.THIRD: 1.5,
        Gear.FOURTH: 1.1,
        Gear.FIFTH: 0.9,
        Gear.REVERSE: 3.3,
    })

    # Top speed per gear (km/h); neutral is effectively unbounded
    max_speeds: Dict[Gear, float] = field(default_factory=lambda: {
        Gear.N: 999.0,
        Gear.FIRST: 120.0,
        Gear.SECOND: 200.0,
        Gear.THIRD: 290.0,
        Gear.FOURTH: 380.0,
        Gear.FIFTH: 520.0,
        Gear.REVERSE: 90.0,
    })

    # Engine rpm per unit of (speed * ratio) when a gear is engaged
    rpm_per_speed_ratio: float = 85.0

    # Fraction of the idle-to-redline span reachable when free-revving
    neutral_rev_fraction: float = 0.85


class DrivetrainModel:
    """Fixed engine/wheel coupling model.

    In neutral the engine revs freely with throttle. In any engaged
    gear engine speed is locked to road speed through the gear ratio.
    """

    def __init__(
        self,
        config: TransmissionConfig | None = None,
        idle_rpm: float = 950.0,
        redline_rpm: float = 8000.0,
    ):
        """Initialize drivetrain.

        Args:
            config: Transmission configuration. Uses hypercar defaults if None.
            idle_rpm: Lower engine speed bound
            redline_rpm: Upper engine speed bound
        """
        self.config = config or TransmissionConfig()
        self.idle_rpm = idle_rpm
        self.redline_rpm = redline_rpm

    def ratio(self, gear: Gear | str) -> float:
        """Gear ratio (0.0 for neutral or unknown gears)."""
        return self.config.gear_ratios.get(Gear.coerce(gear), 0.0)

    def max_speed(self, gear: Gear | str) -> float:
        """Top speed for a gear (neutral cap for unknown gears)."""
        gear = Gear.coerce(gear)
        return self.config.max_speeds.get(gear, self.config.max_speeds.get(Gear.N, 999.0))

    def target_rpm(self, gear: Gear | str, speed: float, throttle: float) -> float:
        """Engine speed the drivetrain is pulling toward.

        Args:
            gear: Engaged gear
            speed: Road speed
            throttle: Throttle (0-1) used for free-revving in neutral

        Returns:
            Target rpm clamped to [idle, redline]
        """
        gear = Gear.coerce(gear)
        if gear.is_neutral:
            span = self.redline_rpm - self.idle_rpm
            target = self.idle_rpm + throttle * span * self.config.neutral_rev_fraction
        else:
            target = self.idle_rpm + speed * self.ratio(gear) * self.config.rpm_per_speed_ratio
        return float(np.clip(target, self.idle_rpm, self.redline_rpm))

    def get_state(self, gear: Gear | str) -> dict:
        """Get drivetrain lookup values for a gear.

        Returns:
            Dictionary containing ratio and top speed
        """
        return {
            "gear": Gear.coerce(gear).value,
            "gear_ratio": self.ratio(gear),
            "max_speed": self.max_speed(gear),
        }
