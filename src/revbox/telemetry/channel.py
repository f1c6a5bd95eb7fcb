"""
Telemetry channel - Bounded time series for one dashboard value.

Provides:
- Ring-buffered samples
- Statistics over the buffered window
- Recent-history queries for gauges and trace plots
"""

from collections import deque
from dataclasses import dataclass
from typing import Deque
import numpy as np


@dataclass
class ChannelConfig:
    """Configuration for a telemetry channel."""
    name: str = "unnamed"
    unit: str = ""
    min_value: float = float('-inf')
    max_value: float = float('inf')
    precision: int = 3
    buffer_size: int = 10000


class TelemetryChannel:
    """Single telemetry data channel.

    Keeps at most ``buffer_size`` samples; statistics cover the
    samples currently held, and ``total_count`` counts everything
    ever recorded.
    """

    def __init__(self, config: ChannelConfig | None = None, name: str = "channel"):
        """Initialize channel.

        Args:
            config: Channel configuration
            name: Channel name (used if config not provided)
        """
        if config is None:
            config = ChannelConfig(name=name)
        self.config = config

        self._times: Deque[float] = deque(maxlen=config.buffer_size)
        self._values: Deque[float] = deque(maxlen=config.buffer_size)
        self._total_count: int = 0

    @property
    def name(self) -> str:
        """Channel name."""
        return self.config.name

    @property
    def count(self) -> int:
        """Number of buffered samples."""
        return len(self._values)

    @property
    def total_count(self) -> int:
        """Number of samples recorded since the last clear."""
        return self._total_count

    @property
    def min_value(self) -> float:
        return min(self._values) if self._values else 0.0

    @property
    def max_value(self) -> float:
        return max(self._values) if self._values else 0.0

    @property
    def mean(self) -> float:
        return float(np.mean(self._values)) if self._values else 0.0

    @property
    def last_value(self) -> float:
        """Most recent value."""
        return self._values[-1] if self._values else 0.0

    def record(self, time: float, value: float) -> None:
        """Record a new value, clamped to the channel range.

        Args:
            time: Timestamp
            value: Value to record
        """
        value = float(np.clip(value, self.config.min_value, self.config.max_value))
        self._times.append(time)
        self._values.append(value)
        self._total_count += 1

    def get_values(self) -> np.ndarray:
        return np.array(self._values)

    def get_times(self) -> np.ndarray:
        return np.array(self._times)

    def get_last_n(self, n: int) -> np.ndarray:
        """Get the last N values (oldest first)."""
        if n <= 0:
            return np.array([])
        return np.array(self._values)[-n:]

    def get_window(self, seconds: float) -> tuple[np.ndarray, np.ndarray]:
        """Get samples from the trailing time window.

        Args:
            seconds: Window length ending at the latest sample

        Returns:
            Tuple of (times, values) arrays
        """
        if not self._times:
            return np.array([]), np.array([])
        times = np.array(self._times)
        values = np.array(self._values)
        mask = times >= times[-1] - seconds
        return times[mask], values[mask]

    def clear(self) -> None:
        """Clear all recorded data."""
        self._times.clear()
        self._values.clear()
        self._total_count = 0

    def get_state(self) -> dict:
        """Get channel state.

        Returns:
            Dictionary with channel statistics
        """
        precision = self.config.precision
        has_data = bool(self._values)
        return {
            "name": self.config.name,
            "unit": self.config.unit,
            "count": self.count,
            "min": round(self.min_value, precision) if has_data else None,
            "max": round(self.max_value, precision) if has_data else None,
            "mean": round(self.mean, precision) if has_data else None,
            "last": round(self.last_value, precision) if has_data else None,
        }
