"""Basic tests for the revbox simulation module."""

import math

import pytest

from revbox.car.shifter import Gear
from revbox.effects.events import PopEvent, ShiftEvent
from revbox.simulation.intents import Intent, IntentQueue
from revbox.simulation.physics import PhysicsIntegrator, clamp_dt
from revbox.simulation.simulator import SimulationEngine, SimulatorConfig
from revbox.telemetry.recorder import TelemetryRecorder, RecorderConfig


class TestClampDt:
    """Test frame time sanitizing."""

    def test_passes_normal_dt(self):
        assert clamp_dt(0.02) == 0.02

    def test_caps_slow_frames(self):
        assert clamp_dt(0.5) == 0.04
        assert clamp_dt(0.5, max_dt=0.1) == 0.1

    def test_rejects_negative_and_garbage(self):
        assert clamp_dt(-0.01) == 0.0
        assert clamp_dt(float("nan")) == 0.0
        assert clamp_dt(float("inf")) == 0.0
        assert clamp_dt("fast") == 0.0
        assert clamp_dt(None) == 0.0


class TestPhysicsIntegrator:
    """Test per-tick integration."""

    def test_neutral_coasts_down(self):
        """Test neutral speed decays with drag plus creep."""
        physics = PhysicsIntegrator()
        result = physics.step(0.02, Gear.N, speed=50.0, rpm=950.0,
                              effective_throttle=1.0, throttle=1.0, braking=False)
        assert result.speed == pytest.approx(50.0 - (0.045 * 50.0 + 0.7) * 0.02)

    def test_neutral_floors_at_zero(self):
        physics = PhysicsIntegrator()
        result = physics.step(0.04, Gear.N, speed=0.01, rpm=950.0,
                              effective_throttle=0.0, throttle=0.0, braking=False)
        assert result.speed == 0.0

    def test_engaged_acceleration(self):
        """Test drive acceleration then drag in an engaged gear."""
        physics = PhysicsIntegrator()
        result = physics.step(0.02, Gear.FIRST, speed=0.0, rpm=950.0,
                              effective_throttle=1.0, throttle=1.0, braking=False)
        accelerated = 95.0 * (0.65 + 3.6 / 3.2) * 0.02
        expected = accelerated - 0.045 * accelerated * 0.02
        assert result.speed == pytest.approx(expected)

    def test_lower_gears_pull_harder(self):
        physics = PhysicsIntegrator()
        assert physics.acceleration(Gear.FIRST, 1.0) > physics.acceleration(Gear.FIFTH, 1.0)

    def test_engine_braking_off_throttle(self):
        """Test lifting off slows faster than holding partial throttle would."""
        physics = PhysicsIntegrator()
        coast = physics.integrate_speed(100.0, Gear.SECOND, 0.0, False, 0.02)
        assert coast == pytest.approx(100.0 - (0.045 + 0.09) * 100.0 * 0.02)

    def test_speed_capped_by_gear(self):
        """Test speed is cut to the gear's top speed."""
        physics = PhysicsIntegrator()
        result = physics.step(0.02, Gear.FIRST, speed=200.0, rpm=8000.0,
                              effective_throttle=1.0, throttle=1.0, braking=False)
        assert result.speed <= 120.0

    def test_brakes_work_in_neutral(self):
        """Test braking slows the car and drops rpm in any gear."""
        physics = PhysicsIntegrator()
        result = physics.step(0.02, Gear.N, speed=50.0, rpm=5000.0,
                              effective_throttle=0.0, throttle=0.0, braking=True)
        expected_speed = 50.0 - (0.045 * 50.0 + 0.7) * 0.02 - 520.0 * 0.02
        assert result.speed == pytest.approx(expected_speed)

        dropped = 5000.0 - 5200.0 * 0.02
        assert result.rpm == pytest.approx(dropped + (950.0 - dropped) * 0.24)

    def test_rpm_smoothing_ignores_dt(self):
        """Test rpm smoothing is a fixed fraction per tick."""
        physics = PhysicsIntegrator()
        short = physics.step(0.005, Gear.N, speed=0.0, rpm=950.0,
                             effective_throttle=1.0, throttle=1.0, braking=False)
        long = physics.step(0.04, Gear.N, speed=0.0, rpm=950.0,
                            effective_throttle=1.0, throttle=1.0, braking=False)
        assert short.rpm == pytest.approx(long.rpm)
        assert short.rpm == pytest.approx(950.0 + (6942.5 - 950.0) * 0.24)

    def test_redline_assist_at_speed_cap(self):
        """Test rpm is pulled toward redline at the gear's top speed."""
        physics = PhysicsIntegrator()
        result = physics.step(0.02, Gear.FIRST, speed=120.0, rpm=7000.0,
                              effective_throttle=1.0, throttle=1.0, braking=False)
        assert result.at_speed_cap
        smoothed = 7000.0 + (8000.0 - 7000.0) * 0.24
        assert result.rpm == pytest.approx(smoothed + (8000.0 - smoothed) * 0.06)

    def test_rpm_bounds(self):
        physics = PhysicsIntegrator()
        result = physics.step(0.04, Gear.FIRST, speed=0.0, rpm=950.0,
                              effective_throttle=0.0, throttle=0.0, braking=True)
        assert result.rpm == 950.0

    def test_unknown_gear_is_neutral(self):
        physics = PhysicsIntegrator()
        result = physics.step(0.02, "Z", speed=10.0, rpm=950.0,
                              effective_throttle=1.0, throttle=1.0, braking=False)
        assert result.speed < 10.0


class TestIntentQueue:
    """Test intent ordering."""

    def test_shifts_drain_first(self):
        """Test shifts are applied before pedal toggles."""
        queue = IntentQueue()
        queue.push(Intent.THROTTLE_RELEASE)
        queue.push(Intent.SHIFT_LEFT)
        queue.push(Intent.BRAKE_HOLD)
        queue.push(Intent.SHIFT_UP)

        assert queue.drain() == [
            Intent.SHIFT_LEFT,
            Intent.SHIFT_UP,
            Intent.THROTTLE_RELEASE,
            Intent.BRAKE_HOLD,
        ]
        assert len(queue) == 0

    def test_string_intents(self):
        queue = IntentQueue()
        assert queue.push("brake_hold")
        assert not queue.push("warp_drive")
        assert queue.drain() == [Intent.BRAKE_HOLD]

    def test_direction_lookup(self):
        assert Intent.for_direction("up") is Intent.SHIFT_UP
        assert Intent.SHIFT_DOWN.is_shift
        assert not Intent.MUTE_TOGGLE.is_shift


class TestSimulatorConfig:
    """Test configuration defaults and validation."""

    def test_component_defaults_follow_engine(self):
        from revbox.car.engine import EngineConfig

        config = SimulatorConfig(engine=EngineConfig(redline_rpm=9000.0, limiter_start_rpm=8700.0))
        assert config.limiter.start_rpm == 8700.0
        assert config.neutral_burst.redline_rpm == 9000.0

    def test_invalid_values_rejected(self):
        from revbox.car.engine import EngineConfig

        with pytest.raises(ValueError):
            SimulatorConfig(engine=EngineConfig(idle_rpm=9000.0))
        with pytest.raises(ValueError):
            SimulatorConfig(brake_throttle_factor=1.5)


class TestSimulationEngine:
    """Test the tick loop."""

    def test_initial_snapshot(self):
        sim = SimulationEngine(SimulatorConfig(seed=1))
        snapshot = sim.snapshot()
        assert snapshot.gear is Gear.N
        assert snapshot.rpm == 950.0
        assert snapshot.speed == 0.0
        assert not snapshot.limiter_active
        assert not snapshot.brake_indicator_active

    def test_intents_wait_for_tick(self):
        """Test intents only take effect on the next tick."""
        sim = SimulationEngine(SimulatorConfig(seed=1))
        sim.shift("left")
        sim.shift("up")
        assert sim.gear is Gear.N
        assert sim.pending_intents == 2

        result = sim.tick(0.02)
        assert result.snapshot.gear is Gear.FIRST
        assert sim.pending_intents == 0

    def test_shift_event_emitted_on_change(self):
        """Test shift events are edge-triggered with gear intensity."""
        sim = SimulationEngine(SimulatorConfig(seed=1))
        result = sim.tick(0.02, ["shift_left", "shift_up"])
        assert result.shifts == [ShiftEvent(Gear.FIRST, 1.0)]

        # Saturated move: no change, no event
        assert sim.tick(0.02, [Intent.SHIFT_UP]).shifts == []

        result = sim.tick(0.02, [Intent.SHIFT_RIGHT, Intent.SHIFT_RIGHT, Intent.SHIFT_DOWN,
                                 Intent.SHIFT_DOWN])
        assert [e.gear for e in result.shifts] == [Gear.THIRD, Gear.FIFTH, Gear.N, Gear.REVERSE]
        assert result.shifts[-1].intensity == 1.2
        assert result.shifts[-2].intensity == 0.7

    def test_gear_change_drops_rpm(self):
        sim = SimulationEngine(SimulatorConfig(seed=1))
        sim.set_state(gear="3", speed=0.0, rpm=6000.0)
        sim.shift("down")
        sim.shift("down")
        # Knob passes through neutral then into fourth: two drops before physics
        result = sim.tick(0.0)
        assert result.snapshot.gear is Gear.FOURTH
        dropped = max(950.0, 6000.0 * 0.7 * 0.7)
        assert result.snapshot.rpm == pytest.approx(dropped + (950.0 - dropped) * 0.24)

    def test_release_after_shift_in_same_tick(self):
        """Test a release queued before a shift sees the new gear."""
        sim = SimulationEngine(SimulatorConfig(seed=1))
        sim.set_state(rpm=6000.0)
        sim.throttle_release()
        sim.shift("left")
        sim.shift("up")
        sim.tick(0.02)
        assert sim.neutral_burst.release_burst == 0

    def test_release_in_neutral_arms_burst(self):
        sim = SimulationEngine(SimulatorConfig(seed=1))
        sim.set_state(rpm=6000.0)
        sim.throttle_release()
        sim.tick(0.02)
        assert 10 <= sim.neutral_burst.release_burst <= 19

    def test_brake_indicator(self):
        """Test brake lamp needs braking and a moving car."""
        sim = SimulationEngine(SimulatorConfig(seed=1))
        sim.brake_hold()
        assert not sim.tick(0.02).snapshot.brake_indicator_active

        sim.set_state(gear="2", speed=80.0)
        result = sim.tick(0.02)
        assert result.snapshot.braking
        assert result.snapshot.brake_indicator_active

    def test_brake_release_idempotent(self):
        """Test releasing the brake twice equals releasing once."""
        once = SimulationEngine(SimulatorConfig(seed=4))
        twice = SimulationEngine(SimulatorConfig(seed=4))
        for sim in (once, twice):
            sim.set_state(gear="2", speed=80.0, rpm=5000.0)
            sim.brake_hold()
            sim.tick(0.02)

        once.brake_release()
        twice.brake_release()
        twice.brake_release()
        assert once.tick(0.02).snapshot == twice.tick(0.02).snapshot

    def test_braking_suppresses_drive_in_gear(self):
        """Test braking scales throttle down in gear but not in neutral."""
        sim = SimulationEngine(SimulatorConfig(seed=2))
        sim.set_state(gear="2", speed=150.0, rpm=6000.0)
        sim.throttle_hold()
        sim.brake_hold()
        speeds = [r.snapshot.speed for r in sim.run(0.02, 5)]
        assert all(b < a for a, b in zip(speeds, speeds[1:]))

        neutral = SimulationEngine(SimulatorConfig(seed=2))
        neutral.throttle_hold()
        neutral.brake_hold()
        neutral.run(0.02, 60)
        assert neutral.rpm > 5000.0

    def test_limiter_cuts_in_gear(self):
        """Test holding throttle at redline in gear hits the limiter."""
        sim = SimulationEngine(SimulatorConfig(seed=9))
        sim.set_state(gear="1", speed=60.0, rpm=8000.0)
        sim.throttle_hold()
        results = sim.run(0.02, 60)

        assert any(r.snapshot.limiter_active for r in results)
        assert any(not r.snapshot.limiter_active for r in results)
        assert any(p.source == "limiter" for r in results for p in r.pops)

    def test_dt_clamped(self):
        """Test negative and oversized frame times are clamped."""
        sim = SimulationEngine(SimulatorConfig(seed=1))
        sim.tick(-1.0)
        assert sim.time == 0.0
        sim.tick(5.0)
        assert sim.time == pytest.approx(0.04)
        sim.tick(float("nan"))
        assert sim.time == pytest.approx(0.04)
        assert sim.snapshot().frame == 3

    def test_clamp_logged_only_when_changed(self, caplog):
        """Test in-range frame times of other numeric types are not reported as clamped."""
        sim = SimulationEngine(SimulatorConfig(seed=1))
        with caplog.at_level("DEBUG", logger="revbox.simulation.simulator"):
            sim.tick(0)
            sim.tick("0.02")
            assert "Clamped frame time" not in caplog.text

            sim.tick(float("nan"))
            assert "Clamped frame time" in caplog.text

    def test_unknown_inputs_ignored(self):
        sim = SimulationEngine(SimulatorConfig(seed=1))
        assert not sim.submit("launch_control")
        assert not sim.shift("diagonal")
        result = sim.tick(0.02)
        assert result.events == []

    def test_mute_toggle(self):
        sim = SimulationEngine(SimulatorConfig(seed=1))
        sim.toggle_mute()
        assert sim.tick(0.02).snapshot.muted
        sim.toggle_mute()
        assert not sim.tick(0.02).snapshot.muted

    def test_deterministic_with_seed(self):
        """Test equal seeds give equal event sequences."""
        def session(seed):
            sim = SimulationEngine(SimulatorConfig(seed=seed))
            sim.throttle_hold()
            events = []
            for r in sim.run(0.016, 120):
                events.extend(r.events)
            sim.throttle_release()
            for r in sim.run(0.016, 120):
                events.extend(r.events)
            return events

        first = session(21)
        assert first == session(21)
        assert all(isinstance(e, PopEvent) for e in first)
        assert len(first) > 10

    def test_recorder_receives_snapshots(self):
        recorder = TelemetryRecorder(RecorderConfig(sample_rate_hz=0))
        sim = SimulationEngine(SimulatorConfig(seed=1), recorder=recorder)
        sim.throttle_hold()
        sim.run(0.02, 25)
        assert recorder.get_channel("rpm").count == 25
        assert recorder.get_channel("rpm").last_value == pytest.approx(sim.rpm)

    def test_reset(self):
        sim = SimulationEngine(SimulatorConfig(seed=1))
        sim.set_state(gear="4", speed=200.0, rpm=7000.0)
        sim.brake_hold()
        sim.tick(0.02)
        sim.shift("up")
        sim.reset()

        snapshot = sim.snapshot()
        assert snapshot.gear is Gear.N
        assert snapshot.speed == 0.0
        assert snapshot.rpm == 950.0
        assert not snapshot.braking
        assert sim.pending_intents == 0
        assert sim.time == 0.0

    def test_state_dictionary(self):
        state = SimulationEngine().get_state()
        for key in ("selector", "engine", "drivetrain", "limiter", "neutral_burst"):
            assert key in state
        assert not math.isnan(state["speed"])
