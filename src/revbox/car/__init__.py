"""
Car module - Arcade drivetrain components.

This module contains the car-side state:
- GearSelector: H-pattern knob position and gear lookup
- DrivetrainModel: Gear ratios, top speeds, engine speed targets
- Engine: Rpm bounds and throttle smoothing
"""

from revbox.car.shifter import (
    Direction,
    Gear,
    GearPosition,
    GearSelector,
    Lane,
    Row,
    gear_from,
)
from revbox.car.transmission import DrivetrainModel, TransmissionConfig
from revbox.car.engine import Engine, EngineConfig

__all__ = [
    "Direction",
    "Gear",
    "GearPosition",
    "GearSelector",
    "Lane",
    "Row",
    "gear_from",
    "DrivetrainModel",
    "TransmissionConfig",
    "Engine",
    "EngineConfig",
]
