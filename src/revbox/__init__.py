"""
revbox - Arcade drivetrain simulation with exhaust-pop event generation.

This package provides a per-frame simulation of:
- An H-pattern gear selector and speed-linked engine
- Throttle, drag, engine braking and brakes
- Rev limiter stutter with pops
- Neutral release bursts and crackle
- Control values for an audio synthesizer and a dashboard
"""

__version__ = "0.1.0"

from revbox.simulation.simulator import SimulationEngine, SimulatorConfig, Snapshot, TickResult
from revbox.car.shifter import Gear
from revbox.effects.events import PopEvent, ShiftEvent

__all__ = [
    "SimulationEngine",
    "SimulatorConfig",
    "Snapshot",
    "TickResult",
    "Gear",
    "PopEvent",
    "ShiftEvent",
    "__version__",
]
