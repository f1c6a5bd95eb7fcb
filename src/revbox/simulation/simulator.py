"""
Simulator - Per-frame drivetrain simulation and event generation.

Provides:
- Intent queue consumed once per tick
- Ordered update of shifter, engine, limiter, physics and pop generators
- Snapshot and event list for the audio and display layers
- Optional telemetry recording
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Union
import logging
import numpy as np

from revbox.car.engine import Engine, EngineConfig
from revbox.car.shifter import Direction, Gear, GearPosition, GearSelector
from revbox.car.transmission import DrivetrainModel, TransmissionConfig
from revbox.effects.events import PopEvent, ShiftEvent, shift_event_for
from revbox.effects.limiter import LimiterConfig, RevLimiter
from revbox.effects.neutral_burst import NeutralBurstConfig, NeutralBurstGenerator
from revbox.simulation.intents import Intent, IntentQueue
from revbox.simulation.physics import PhysicsConfig, PhysicsIntegrator, clamp_dt
from revbox.telemetry.recorder import TelemetryRecorder


logger = logging.getLogger(__name__)

Event = Union[ShiftEvent, PopEvent]


@dataclass
class SimulatorConfig:
    """Simulator configuration.

    Component configs left as None are built from the engine config so
    that rpm thresholds stay consistent across components.
    """
    engine: EngineConfig | None = None
    transmission: TransmissionConfig | None = None
    physics: PhysicsConfig | None = None
    limiter: LimiterConfig | None = None
    neutral_burst: NeutralBurstConfig | None = None

    # Throttle multiplier while braking in an engaged gear
    brake_throttle_factor: float = 0.15

    # Brake lamp only shows while actually slowing down
    brake_indicator_min_speed: float = 0.5

    # Random seed for pop timing/intensity (None for random)
    seed: int | None = None

    def __post_init__(self):
        """Fill in component defaults and validate."""
        self.engine = self.engine or EngineConfig()
        self.transmission = self.transmission or TransmissionConfig()
        self.physics = self.physics or PhysicsConfig()
        if self.limiter is None:
            self.limiter = LimiterConfig(start_rpm=self.engine.limiter_start_rpm)
        if self.neutral_burst is None:
            self.neutral_burst = NeutralBurstConfig(redline_rpm=self.engine.redline_rpm)

        if self.engine.idle_rpm <= 0 or self.engine.idle_rpm >= self.engine.redline_rpm:
            raise ValueError(
                f"idle_rpm must be in (0, redline_rpm), got {self.engine.idle_rpm}"
            )
        if not 0.0 < self.engine.rpm_smoothing <= 1.0:
            raise ValueError(f"rpm_smoothing must be in (0, 1], got {self.engine.rpm_smoothing}")
        if not 0.0 < self.engine.throttle_smoothing <= 1.0:
            raise ValueError(
                f"throttle_smoothing must be in (0, 1], got {self.engine.throttle_smoothing}"
            )
        if self.physics.max_dt <= 0:
            raise ValueError(f"max_dt must be positive, got {self.physics.max_dt}")
        if not 0.0 <= self.brake_throttle_factor <= 1.0:
            raise ValueError(
                f"brake_throttle_factor must be in [0, 1], got {self.brake_throttle_factor}"
            )


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the simulation after a tick."""
    gear: Gear = Gear.N
    rpm: float = 950.0
    speed: float = 0.0
    limiter_active: bool = False
    brake_indicator_active: bool = False

    # Extra state for the audio and display layers
    throttle: float = 0.0
    throttle_target: float = 0.0
    braking: bool = False
    muted: bool = False
    position: GearPosition = field(default_factory=GearPosition)
    time: float = 0.0
    frame: int = 0

    def get_telemetry(self) -> Dict[str, Any]:
        """Flatten snapshot into a telemetry dictionary."""
        return {
            "time": self.time,
            "frame": self.frame,
            "gear": self.gear.value,
            "rpm": self.rpm,
            "speed": self.speed,
            "throttle": self.throttle,
            "limiter_active": self.limiter_active,
            "braking": self.braking,
            "brake_indicator_active": self.brake_indicator_active,
        }


@dataclass
class TickResult:
    """Snapshot plus events produced by one tick."""
    snapshot: Snapshot
    events: List[Event] = field(default_factory=list)

    @property
    def pops(self) -> List[PopEvent]:
        return [e for e in self.events if isinstance(e, PopEvent)]

    @property
    def shifts(self) -> List[ShiftEvent]:
        return [e for e in self.events if isinstance(e, ShiftEvent)]


def _as_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class SimulationEngine:
    """Arcade drivetrain simulation.

    Owns all mutable simulation state. Inputs are queued as intents and
    applied at the start of the next tick (shifts first, then pedal and
    mute toggles). Each tick returns a snapshot and the events produced
    during that tick; nothing is buffered past the tick.

    Features:
    - H-pattern shifting with rpm drop on gear change
    - Free-revving neutral, speed-linked engaged gears
    - Rev limiter stutter and pops
    - Neutral release bursts and crackle
    - Injectable random source for deterministic tests

    Usage:
        sim = SimulationEngine(SimulatorConfig(seed=7))
        sim.shift("left")
        sim.shift("up")
        sim.throttle_hold()
        result = sim.tick(0.016)
        result.snapshot.rpm, result.events
    """

    def __init__(
        self,
        config: SimulatorConfig | None = None,
        rng: np.random.Generator | None = None,
        recorder: TelemetryRecorder | None = None,
    ):
        """Initialize simulation.

        Args:
            config: Simulator configuration. Uses defaults if None.
            rng: Random source shared by the pop generators. Seeded from
                config.seed if None.
            recorder: Telemetry recorder fed with every snapshot
        """
        self.config = config or SimulatorConfig()
        self._rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.recorder = recorder

        engine_cfg = self.config.engine
        self.selector = GearSelector()
        self.engine = Engine(engine_cfg)
        self.drivetrain = DrivetrainModel(
            self.config.transmission,
            idle_rpm=engine_cfg.idle_rpm,
            redline_rpm=engine_cfg.redline_rpm,
        )
        self.physics = PhysicsIntegrator(
            self.config.physics,
            drivetrain=self.drivetrain,
            rpm_smoothing=engine_cfg.rpm_smoothing,
        )
        self.limiter = RevLimiter(self.config.limiter, rng=self._rng)
        self.neutral_burst = NeutralBurstGenerator(self.config.neutral_burst, rng=self._rng)

        self._intents = IntentQueue()
        self._speed: float = 0.0
        self._braking: bool = False
        self._muted: bool = False
        self._cut: bool = False
        self._time: float = 0.0
        self._frame: int = 0
        self._snapshot = self._build_snapshot()

    @property
    def gear(self) -> Gear:
        """Currently engaged gear."""
        return self.selector.current_gear

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def rpm(self) -> float:
        return self.engine.rpm

    @property
    def braking(self) -> bool:
        return self._braking

    @property
    def muted(self) -> bool:
        return self._muted

    @property
    def time(self) -> float:
        """Simulated time in seconds."""
        return self._time

    @property
    def pending_intents(self) -> int:
        return len(self._intents)

    # Inbound intents

    def submit(self, intent: Intent | str) -> bool:
        """Queue an intent for the next tick."""
        return self._intents.push(intent)

    def shift(self, direction: Direction | str) -> bool:
        """Queue a knob move."""
        try:
            intent = Intent.for_direction(direction)
        except ValueError:
            logger.debug(f"Ignoring unknown shift direction: {direction!r}")
            return False
        return self.submit(intent)

    def throttle_hold(self) -> None:
        self.submit(Intent.THROTTLE_HOLD)

    def throttle_release(self) -> None:
        self.submit(Intent.THROTTLE_RELEASE)

    def brake_hold(self) -> None:
        self.submit(Intent.BRAKE_HOLD)

    def brake_release(self) -> None:
        self.submit(Intent.BRAKE_RELEASE)

    def toggle_mute(self) -> None:
        self.submit(Intent.MUTE_TOGGLE)

    # Tick

    def tick(self, dt: float, intents: Iterable[Intent | str] | None = None) -> TickResult:
        """Advance the simulation by one frame.

        Args:
            dt: Frame time in seconds (clamped to [0, max_dt])
            intents: Extra intents applied after any already queued

        Returns:
            Snapshot and events for this tick
        """
        step_dt = clamp_dt(dt, self.config.physics.max_dt)
        if step_dt != _as_float(dt):
            logger.debug(f"Clamped frame time {dt!r} to {step_dt:.3f}s")

        if intents is not None:
            self._intents.extend(intents)

        events: List[Event] = []
        for intent in self._intents.drain():
            events.extend(self._apply_intent(intent))

        gear = self.gear
        throttle = self.engine.smooth_throttle()

        # Braking suppresses drive in gear but still lets the engine rev in neutral
        if gear.is_neutral or not self._braking:
            drive_throttle = throttle
        else:
            drive_throttle = throttle * self.config.brake_throttle_factor

        limiter_out = self.limiter.update(step_dt, throttle, self.engine.rpm, gear)
        events.extend(limiter_out.events)
        effective_throttle = self.limiter.effective_throttle(drive_throttle, limiter_out.cut)

        result = self.physics.step(
            step_dt,
            gear,
            speed=self._speed,
            rpm=self.engine.rpm,
            effective_throttle=effective_throttle,
            throttle=throttle,
            braking=self._braking,
        )
        self._speed = result.speed
        self.engine.rpm = result.rpm

        events.extend(self.neutral_burst.update(step_dt, gear, throttle, self.engine.rpm))

        self._cut = limiter_out.cut
        self._time += step_dt
        self._frame += 1
        self._snapshot = self._build_snapshot()

        if self.recorder is not None:
            self.recorder.record(self._time, self._snapshot.get_telemetry())

        return TickResult(snapshot=self._snapshot, events=events)

    def run(self, dt: float, steps: int) -> List[TickResult]:
        """Tick a fixed number of frames with no new intents.

        Args:
            dt: Frame time in seconds
            steps: Number of ticks

        Returns:
            Results in tick order
        """
        return [self.tick(dt) for _ in range(steps)]

    def _apply_intent(self, intent: Intent) -> List[Event]:
        if intent.is_shift:
            if not self.selector.shift(intent.direction):
                return []
            gear = self.gear
            self.engine.on_gear_change()
            logger.debug(f"Gear changed to {gear.value} ({self.engine.rpm:.0f} rpm)")
            return [shift_event_for(gear)]

        if intent is Intent.THROTTLE_HOLD:
            self.engine.hold_throttle()
        elif intent is Intent.THROTTLE_RELEASE:
            self.engine.release_throttle()
            self.neutral_burst.trigger_release(self.gear, self.engine.rpm)
        elif intent is Intent.BRAKE_HOLD:
            self._braking = True
        elif intent is Intent.BRAKE_RELEASE:
            self._braking = False
        elif intent is Intent.MUTE_TOGGLE:
            self._muted = not self._muted
            logger.debug(f"Sound {'off' if self._muted else 'on'}")
        return []

    # State access

    def snapshot(self) -> Snapshot:
        """Latest snapshot (does not advance the simulation)."""
        return self._snapshot

    def _build_snapshot(self) -> Snapshot:
        return Snapshot(
            gear=self.gear,
            rpm=self.engine.rpm,
            speed=self._speed,
            limiter_active=self._cut,
            brake_indicator_active=self._braking
            and self._speed > self.config.brake_indicator_min_speed,
            throttle=self.engine.throttle,
            throttle_target=self.engine.throttle_target,
            braking=self._braking,
            muted=self._muted,
            position=self.selector.position,
            time=self._time,
            frame=self._frame,
        )

    def set_state(
        self,
        gear: Gear | str | None = None,
        speed: float | None = None,
        rpm: float | None = None,
    ) -> Snapshot:
        """Directly place the simulation (for initialization or special cases).

        Moving the knob here does not emit shift events or drop rpm.

        Args:
            gear: Gear to engage
            speed: Road speed (clamped to >= 0)
            rpm: Engine rpm (clamped to idle/redline)

        Returns:
            Updated snapshot
        """
        if gear is not None:
            self.selector.set_gear(Gear.coerce(gear))
        if speed is not None:
            self._speed = max(0.0, float(speed))
        if rpm is not None:
            self.engine.rpm = rpm
        self._snapshot = self._build_snapshot()
        return self._snapshot

    def reset(self) -> None:
        """Reset simulation to neutral, idle and stopped."""
        self.selector.reset()
        self.engine.reset()
        self.limiter.reset()
        self.neutral_burst.reset()
        self._intents.clear()
        self._speed = 0.0
        self._braking = False
        self._cut = False
        self._time = 0.0
        self._frame = 0
        self._snapshot = self._build_snapshot()

    def get_state(self) -> Dict[str, Any]:
        """Get complete simulation state.

        Returns:
            Dictionary containing simulation state
        """
        return {
            "time": self._time,
            "frame": self._frame,
            "speed": self._speed,
            "braking": self._braking,
            "muted": self._muted,
            "selector": self.selector.get_state(),
            "engine": self.engine.get_state(),
            "drivetrain": self.drivetrain.get_state(self.gear),
            "limiter": self.limiter.get_state(),
            "neutral_burst": self.neutral_burst.get_state(),
        }
