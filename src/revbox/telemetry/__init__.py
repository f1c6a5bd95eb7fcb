"""
Telemetry module - Snapshot history and dashboard values.

This module contains:
- TelemetryRecorder: Records snapshots over time
- TelemetryChannel: Individual data channel

DashboardView lives in revbox.telemetry.dashboard and is imported from
there, since it depends on the simulation snapshot.
"""

from revbox.telemetry.channel import ChannelConfig, TelemetryChannel
from revbox.telemetry.recorder import RecorderConfig, TelemetryRecorder

__all__ = [
    "ChannelConfig",
    "TelemetryChannel",
    "RecorderConfig",
    "TelemetryRecorder",
]
