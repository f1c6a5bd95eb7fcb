"""
Physics engine - Per-tick speed and engine speed integration.

Provides:
- Time step sanitizing
- Acceleration, drag and engine braking per gear
- Braking in any gear
- Rpm smoothing toward the drivetrain target
"""

from dataclasses import dataclass
import math
import numpy as np

from revbox.car.shifter import Gear
from revbox.car.transmission import DrivetrainModel


@dataclass
class PhysicsConfig:
    """Physics simulation configuration."""
    # Time step cap (avoids blow-ups on slow frames)
    max_dt: float = 0.04

    # Resistance
    drag: float = 0.045
    engine_brake: float = 0.09
    neutral_creep_decel: float = 0.7

    # Drive
    accel_base: float = 95.0
    accel_ratio_offset: float = 0.65
    accel_ratio_scale: float = 3.2

    # Brakes
    brake_force: float = 520.0
    brake_rpm_drop: float = 5200.0   # rpm per second while braking

    # Engine revving against the gear's speed ceiling
    redline_assist_window: float = 0.2
    redline_assist_throttle: float = 0.6
    redline_assist_factor: float = 0.06


@dataclass
class PhysicsResult:
    """State after one integration step."""
    speed: float
    rpm: float
    target_rpm: float
    at_speed_cap: bool = False


def clamp_dt(dt: float, max_dt: float = 0.04) -> float:
    """Clamp a frame time to [0, max_dt]; non-finite values become 0."""
    try:
        dt = float(dt)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(dt):
        return 0.0
    return min(max(dt, 0.0), max_dt)


class PhysicsIntegrator:
    """Arcade longitudinal dynamics.

    Speed follows a simple accel / drag / engine-brake balance per gear.
    Engine rpm is smoothed toward the drivetrain target by a fixed factor
    every tick; the factor is not scaled by dt, so rpm response depends
    on the frame rate.
    """

    def __init__(
        self,
        config: PhysicsConfig | None = None,
        drivetrain: DrivetrainModel | None = None,
        rpm_smoothing: float = 0.24,
    ):
        """Initialize integrator.

        Args:
            config: Physics configuration. Uses defaults if None.
            drivetrain: Drivetrain lookups and rpm targets
            rpm_smoothing: Per-tick rpm smoothing factor
        """
        self.config = config or PhysicsConfig()
        self.drivetrain = drivetrain or DrivetrainModel()
        self.rpm_smoothing = rpm_smoothing

    @property
    def idle_rpm(self) -> float:
        return self.drivetrain.idle_rpm

    @property
    def redline_rpm(self) -> float:
        return self.drivetrain.redline_rpm

    def acceleration(self, gear: Gear, throttle: float) -> float:
        """Drive acceleration for an engaged gear.

        Shorter gears (higher ratio) pull harder.
        """
        ratio = self.drivetrain.ratio(gear)
        cfg = self.config
        return throttle * cfg.accel_base * (cfg.accel_ratio_offset + ratio / cfg.accel_ratio_scale)

    def integrate_speed(
        self,
        speed: float,
        gear: Gear,
        throttle: float,
        braking: bool,
        dt: float,
    ) -> float:
        """Advance road speed one tick.

        Args:
            speed: Current speed
            gear: Engaged gear
            throttle: Effective throttle (after limiter)
            braking: Brake pedal held
            dt: Clamped time step

        Returns:
            New speed (never negative)
        """
        cfg = self.config
        gear = Gear.coerce(gear)

        if gear.is_neutral:
            speed = max(0.0, speed - (cfg.drag * speed + cfg.neutral_creep_decel) * dt)
        else:
            speed += self.acceleration(gear, throttle) * dt
            speed = min(speed, self.drivetrain.max_speed(gear))

            natural_decel = cfg.drag * speed + cfg.engine_brake * (1.0 - throttle) * speed
            speed = max(0.0, speed - natural_decel * dt)

        if braking:
            speed = max(0.0, speed - cfg.brake_force * dt)

        return speed

    def step(
        self,
        dt: float,
        gear: Gear,
        speed: float,
        rpm: float,
        effective_throttle: float,
        throttle: float,
        braking: bool,
    ) -> PhysicsResult:
        """Integrate one tick.

        Args:
            dt: Time step in seconds (clamped here)
            gear: Engaged gear
            speed: Road speed at the start of the tick
            rpm: Engine rpm at the start of the tick
            effective_throttle: Throttle after braking and limiter cut
            throttle: Smoothed pedal throttle (drives the redline assist)
            braking: Brake pedal held

        Returns:
            New speed and rpm
        """
        cfg = self.config
        dt = clamp_dt(dt, cfg.max_dt)
        gear = Gear.coerce(gear)

        speed = self.integrate_speed(speed, gear, effective_throttle, braking, dt)

        if braking:
            rpm = max(self.idle_rpm, rpm - cfg.brake_rpm_drop * dt)

        target = self.drivetrain.target_rpm(gear, speed, effective_throttle)
        rpm += (target - rpm) * self.rpm_smoothing

        cap = self.drivetrain.max_speed(gear)
        at_cap = not gear.is_neutral and speed >= cap - cfg.redline_assist_window
        if at_cap and throttle > cfg.redline_assist_throttle:
            rpm += (self.redline_rpm - rpm) * cfg.redline_assist_factor

        rpm = float(np.clip(rpm, self.idle_rpm, self.redline_rpm))
        return PhysicsResult(speed=speed, rpm=rpm, target_rpm=target, at_speed_cap=at_cap)
