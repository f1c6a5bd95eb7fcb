"""
Telemetry recorder - Snapshot history for the dashboard.

Provides:
- Standard drivetrain channels
- Sample-rate limited recording
- Limiter and brake duty statistics
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from revbox.car.shifter import Gear
from revbox.telemetry.channel import ChannelConfig, TelemetryChannel


# Gear symbols as channel values (R recorded as -1)
GEAR_INDEX = {
    Gear.REVERSE.value: -1,
    Gear.N.value: 0,
    Gear.FIRST.value: 1,
    Gear.SECOND.value: 2,
    Gear.THIRD.value: 3,
    Gear.FOURTH.value: 4,
    Gear.FIFTH.value: 5,
}

STANDARD_CHANNELS = {
    "rpm": ChannelConfig("rpm", "rpm", 0, 10000, 0),
    "speed": ChannelConfig("speed", "km/h", 0, 1000, 1),
    "throttle": ChannelConfig("throttle", "%", 0, 100, 1),
    "gear": ChannelConfig("gear", "", -1, 5, 0),
    "limiter": ChannelConfig("limiter", "", 0, 1, 0),
    "brake": ChannelConfig("brake", "", 0, 1, 0),
}

# Slack for accumulated frame times landing just short of the next sample
SAMPLE_EPSILON = 1e-9


@dataclass
class RecorderConfig:
    """Recorder configuration."""
    sample_rate_hz: float = 60.0     # 0 records every call
    channels: List[str] | None = None  # Channels to record (None = all)
    buffer_size: int = 36000


class TelemetryRecorder:
    """Records simulation snapshots over time.

    Fed with ``Snapshot.get_telemetry()`` dictionaries, one per tick.
    """

    def __init__(self, config: RecorderConfig | None = None):
        """Initialize recorder.

        Args:
            config: Recorder configuration
        """
        self.config = config or RecorderConfig()

        self._channels: Dict[str, TelemetryChannel] = {}
        self._setup_channels()

        self._next_sample_time: float | None = None
        if self.config.sample_rate_hz > 0:
            self._sample_interval = 1.0 / self.config.sample_rate_hz
        else:
            self._sample_interval = 0.0

    def _setup_channels(self) -> None:
        channel_names = self.config.channels or list(STANDARD_CHANNELS.keys())

        for name in channel_names:
            if name in STANDARD_CHANNELS:
                cfg = replace(STANDARD_CHANNELS[name], buffer_size=self.config.buffer_size)
            else:
                cfg = ChannelConfig(name=name, buffer_size=self.config.buffer_size)
            self._channels[name] = TelemetryChannel(cfg)

    @property
    def channels(self) -> Dict[str, TelemetryChannel]:
        return self._channels

    def get_channel(self, name: str) -> Optional[TelemetryChannel]:
        return self._channels.get(name)

    def record(self, time: float, telemetry: Dict[str, Any]) -> bool:
        """Record a telemetry frame.

        Args:
            time: Current simulation time
            telemetry: Snapshot telemetry dictionary

        Returns:
            True if the sample was recorded
        """
        if self._next_sample_time is not None and time < self._next_sample_time - SAMPLE_EPSILON:
            return False
        if self._next_sample_time is None or time - self._next_sample_time > self._sample_interval:
            self._next_sample_time = time + self._sample_interval
        else:
            self._next_sample_time += self._sample_interval

        channel_values = {
            "rpm": telemetry.get("rpm", 0.0),
            "speed": telemetry.get("speed", 0.0),
            "throttle": telemetry.get("throttle", 0.0) * 100,
            "gear": GEAR_INDEX.get(telemetry.get("gear"), 0),
            "limiter": float(telemetry.get("limiter_active", False)),
            "brake": float(telemetry.get("braking", False)),
        }
        for name, value in channel_values.items():
            if name in self._channels:
                self._channels[name].record(time, value)
        return True

    def get_current_values(self) -> Dict[str, float]:
        """Get most recent value from each channel."""
        return {name: ch.last_value for name, ch in self._channels.items()}

    def duty(self, name: str) -> float:
        """Fraction of buffered samples where a flag channel was on."""
        channel = self._channels.get(name)
        if channel is None or channel.count == 0:
            return 0.0
        return channel.mean

    def get_statistics(self) -> Dict[str, Dict[str, Any]]:
        return {name: ch.get_state() for name, ch in self._channels.items()}

    def clear(self) -> None:
        """Clear all recorded data."""
        for channel in self._channels.values():
            channel.clear()
        self._next_sample_time = None

    def get_state(self) -> dict:
        """Get recorder state.

        Returns:
            Dictionary containing recorder state
        """
        return {
            "sample_rate_hz": self.config.sample_rate_hz,
            "total_samples": sum(ch.count for ch in self._channels.values()),
            "channels": self.get_statistics(),
        }
