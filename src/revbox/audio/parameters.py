"""
Audio parameters - Synth control values derived from engine state.

Simulates:
- Two-oscillator engine drone pitch from rpm
- Low-pass brightness from rpm and throttle
- Drone volume from throttle, ducked while the limiter cuts
- Peak gains for shift and pop one-shots
"""

from dataclasses import dataclass
import numpy as np


@dataclass
class AudioConfig:
    """Engine tone mapping."""
    redline_rpm: float = 8000.0

    # Oscillators: base pitch = rpm / 60 * harmonic
    harmonic: float = 2.0
    osc1_range_hz: tuple[float, float] = (20.0, 290.0)
    osc2_ratio: float = 0.55
    osc2_range_hz: tuple[float, float] = (20.0, 240.0)

    # Low-pass filter
    cutoff_base_hz: float = 500.0
    cutoff_rpm_hz: float = 2600.0
    cutoff_throttle_hz: float = 1000.0
    cutoff_range_hz: tuple[float, float] = (500.0, 4200.0)

    # Drone volume
    gain_base: float = 0.055
    gain_throttle: float = 0.07
    gain_range: tuple[float, float] = (0.03, 0.16)
    limiter_gain: float = 0.02

    # One-shot peak gains (scaled by event intensity)
    shift_peak_gain: float = 0.22
    pop_peak_gain: float = 0.18

    # Cue played when sound is unlocked or unmuted
    unlock_shift_intensity: float = 0.6


@dataclass(frozen=True)
class EngineTone:
    """Target values for the engine drone."""
    osc1_hz: float
    osc2_hz: float
    cutoff_hz: float
    gain: float


def engine_tone(
    rpm: float,
    throttle: float,
    limiter_cut: bool = False,
    config: AudioConfig | None = None,
) -> EngineTone:
    """Compute drone targets for the current engine state.

    Args:
        rpm: Engine rpm
        throttle: Smoothed throttle (0-1)
        limiter_cut: Limiter cutting fuel this tick
        config: Tone mapping. Uses defaults if None.

    Returns:
        Oscillator pitches, filter cutoff and gain
    """
    cfg = config or AudioConfig()
    base = rpm / 60.0 * cfg.harmonic

    cutoff = (
        cfg.cutoff_base_hz
        + rpm / cfg.redline_rpm * cfg.cutoff_rpm_hz
        + throttle * cfg.cutoff_throttle_hz
    )
    if limiter_cut:
        gain = cfg.limiter_gain
    else:
        gain = float(np.clip(cfg.gain_base + throttle * cfg.gain_throttle, *cfg.gain_range))

    return EngineTone(
        osc1_hz=float(np.clip(base, *cfg.osc1_range_hz)),
        osc2_hz=float(np.clip(base * cfg.osc2_ratio, *cfg.osc2_range_hz)),
        cutoff_hz=float(np.clip(cutoff, *cfg.cutoff_range_hz)),
        gain=gain,
    )


def shift_gain(intensity: float, config: AudioConfig | None = None) -> float:
    """Peak gain for a shift one-shot."""
    cfg = config or AudioConfig()
    return cfg.shift_peak_gain * intensity


def pop_gain(intensity: float, config: AudioConfig | None = None) -> float:
    """Peak gain for a pop one-shot."""
    cfg = config or AudioConfig()
    return cfg.pop_peak_gain * intensity
