"""
Simulation module - Per-frame drivetrain simulation.

This module contains:
- SimulationEngine: Tick loop owning all simulation state
- PhysicsIntegrator: Speed and rpm integration
- Intent / IntentQueue: Discrete driver inputs
"""

from revbox.simulation.physics import PhysicsConfig, PhysicsIntegrator, PhysicsResult, clamp_dt
from revbox.simulation.intents import Intent, IntentQueue
from revbox.simulation.simulator import (
    SimulationEngine,
    SimulatorConfig,
    Snapshot,
    TickResult,
)

__all__ = [
    "PhysicsConfig",
    "PhysicsIntegrator",
    "PhysicsResult",
    "clamp_dt",
    "Intent",
    "IntentQueue",
    "SimulationEngine",
    "SimulatorConfig",
    "Snapshot",
    "TickResult",
]
