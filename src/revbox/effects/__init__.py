"""
Effects module - Discrete sound events derived from engine state.

This module contains:
- RevLimiter: Duty-cycle fuel cut and limiter pops
- NeutralBurstGenerator: Release bursts and crackle in neutral
- ShiftEvent / PopEvent: Events handed to the audio layer
"""

from revbox.effects.events import PopEvent, ShiftEvent, shift_event_for
from revbox.effects.limiter import LimiterConfig, LimiterOutput, RevLimiter
from revbox.effects.neutral_burst import NeutralBurstConfig, NeutralBurstGenerator

__all__ = [
    "PopEvent",
    "ShiftEvent",
    "shift_event_for",
    "LimiterConfig",
    "LimiterOutput",
    "RevLimiter",
    "NeutralBurstConfig",
    "NeutralBurstGenerator",
]
