"""
Audio module - Control values for an external synthesizer.

This module contains:
- engine_tone: Drone pitch, brightness and volume from engine state
- AudioRenderer: Drone lifecycle, mute handling and event dispatch
- AudioBackend: Interface implemented by the actual synth
"""

from revbox.audio.parameters import AudioConfig, EngineTone, engine_tone, pop_gain, shift_gain
from revbox.audio.renderer import AudioBackend, AudioRenderer

__all__ = [
    "AudioConfig",
    "EngineTone",
    "engine_tone",
    "pop_gain",
    "shift_gain",
    "AudioBackend",
    "AudioRenderer",
]
