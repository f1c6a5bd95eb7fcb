"""
Engine component - Engine speed and throttle state.

Simulates:
- Bounded engine rpm (idle to redline)
- Throttle pedal smoothing toward an on/off target
- Rpm drop when the gear changes
"""

from dataclasses import dataclass
import numpy as np


@dataclass
class EngineConfig:
    """Configuration for the arcade engine.

    Default values give a high-revving hypercar feel.
    """
    # RPM limits
    idle_rpm: float = 950.0
    redline_rpm: float = 8000.0
    limiter_start_rpm: float = 7750.0

    # Per-tick smoothing factors (not scaled by dt)
    rpm_smoothing: float = 0.24
    throttle_smoothing: float = 0.16

    # Rpm kept after a gear change
    gear_change_rpm_factor: float = 0.70


class Engine:
    """Engine state holder.

    Keeps rpm inside its bounds and models the throttle pedal as an
    exponential approach toward the held/released target.
    """

    def __init__(self, config: EngineConfig | None = None):
        """Initialize engine with optional custom configuration.

        Args:
            config: Engine configuration. Uses hypercar defaults if None.
        """
        self.config = config or EngineConfig()

        self._rpm: float = self.config.idle_rpm
        self._throttle: float = 0.0
        self._throttle_target: float = 0.0

    @property
    def rpm(self) -> float:
        """Current engine RPM."""
        return self._rpm

    @rpm.setter
    def rpm(self, value: float) -> None:
        """Set engine RPM, clamped to valid range."""
        self._rpm = float(np.clip(value, self.config.idle_rpm, self.config.redline_rpm))

    @property
    def throttle(self) -> float:
        """Smoothed throttle position (0.0 to 1.0)."""
        return self._throttle

    @throttle.setter
    def throttle(self, value: float) -> None:
        self._throttle = float(np.clip(value, 0.0, 1.0))

    @property
    def throttle_target(self) -> float:
        """Throttle the pedal is moving toward (0.0 or 1.0)."""
        return self._throttle_target

    @property
    def throttle_held(self) -> bool:
        return self._throttle_target > 0.0

    @property
    def rpm_fraction(self) -> float:
        """Rpm as a fraction of redline."""
        return self._rpm / self.config.redline_rpm

    def hold_throttle(self) -> None:
        self._throttle_target = 1.0

    def release_throttle(self) -> None:
        self._throttle_target = 0.0

    def smooth_throttle(self) -> float:
        """Move throttle one step toward its target.

        Returns:
            New smoothed throttle
        """
        self._throttle += (self._throttle_target - self._throttle) * self.config.throttle_smoothing
        return self._throttle

    def on_gear_change(self) -> None:
        """Drop rpm when the clutch reconnects on a gear change."""
        self.rpm = max(self.config.idle_rpm, self._rpm * self.config.gear_change_rpm_factor)

    def reset(self) -> None:
        """Reset engine to initial state."""
        self._rpm = self.config.idle_rpm
        self._throttle = 0.0
        self._throttle_target = 0.0

    def get_state(self) -> dict:
        """Get current engine state for telemetry.

        Returns:
            Dictionary containing engine state values
        """
        return {
            "rpm": self._rpm,
            "throttle": self._throttle,
            "throttle_target": self._throttle_target,
            "rpm_fraction": self.rpm_fraction,
        }
