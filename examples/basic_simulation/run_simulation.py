#!/usr/bin/env python3
"""
Basic Simulation Example

This example demonstrates how to:
1. Create a simulation and feed it driver intents
2. Rev the engine in neutral and lift off for a pop burst
3. Pull away in first and bounce off the rev limiter
4. Read dashboard and audio control values

Run with: python run_simulation.py
"""

from revbox import SimulationEngine, SimulatorConfig
from revbox.audio import AudioRenderer
from revbox.telemetry import TelemetryRecorder
from revbox.telemetry.dashboard import DashboardView


DT = 1 / 60


def main():
    print("=" * 60)
    print("revbox Basic Simulation Example")
    print("=" * 60)

    recorder = TelemetryRecorder()
    sim = SimulationEngine(SimulatorConfig(seed=42), recorder=recorder)
    audio = AudioRenderer()

    # Step 1: Rev in neutral
    print("\n1. Revving in neutral for 1.5 seconds...")
    sim.throttle_hold()
    pops = 0
    for _ in range(90):
        result = sim.tick(DT)
        audio.render(result)
        pops += len(result.pops)
    print(f"   RPM: {sim.rpm:.0f}, crackle pops: {pops}")

    # Step 2: Lift off
    print("\n2. Lifting off...")
    sim.throttle_release()
    pops = 0
    for _ in range(90):
        result = sim.tick(DT)
        audio.render(result)
        pops += len(result.pops)
    print(f"   RPM: {sim.rpm:.0f}, release pops: {pops}")

    # Step 3: First gear, full throttle
    print("\n3. First gear, full throttle for 2 seconds...")
    sim.shift("left")
    sim.shift("up")
    sim.throttle_hold()
    for step in range(120):
        result = sim.tick(DT)
        audio.render(result)
        for shift in result.shifts:
            print(f"   Shift -> {shift.gear.value} (intensity {shift.intensity})")
        if (step + 1) % 30 == 0:
            view = DashboardView.from_snapshot(result.snapshot)
            print(f"   t={result.snapshot.time:.2f}s  {view.speed_text} km/h  "
                  f"{view.rpm_text} rpm  redline={view.redline}  flash={view.flash}")

    # Step 4: Brake to a stop
    print("\n4. Braking...")
    sim.throttle_release()
    sim.brake_hold()
    while sim.speed > 0:
        audio.render(sim.tick(DT))
    print(f"   Stopped at t={sim.time:.2f}s, RPM {sim.rpm:.0f}")

    print("\n5. Session statistics:")
    print(f"   Limiter duty: {recorder.duty('limiter') * 100:.1f}%")
    print(f"   Peak speed: {recorder.get_channel('speed').max_value:.1f} km/h")
    if audio.last_tone is not None:
        tone = audio.last_tone
        print(f"   Last drone: {tone.osc1_hz:.0f} Hz / {tone.osc2_hz:.0f} Hz, "
              f"cutoff {tone.cutoff_hz:.0f} Hz, gain {tone.gain:.3f}")


if __name__ == "__main__":
    main()
