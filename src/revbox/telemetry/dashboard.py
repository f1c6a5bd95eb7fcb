"""
Dashboard view - Display values derived from a snapshot.

Provides:
- Tachometer fraction and needle angle
- Rounded rpm / speed readouts
- Redline, limiter flash and brake indicators
- Shifter knob position
"""

from dataclasses import dataclass
import numpy as np

from revbox.car.shifter import LANE_X_PERCENT, ROW_Y_PERCENT
from revbox.simulation.simulator import Snapshot


@dataclass
class DashboardConfig:
    """Gauge layout."""
    redline_rpm: float = 8000.0
    limiter_start_rpm: float = 7750.0
    needle_min_deg: float = -120.0
    needle_sweep_deg: float = 240.0


@dataclass(frozen=True)
class DashboardView:
    """Everything the display layer draws for one frame."""
    gear_text: str
    rpm_text: str
    speed_text: str
    rpm_fraction: float
    needle_deg: float
    redline: bool
    flash: bool
    brake_on: bool
    knob_x_percent: float
    knob_y_percent: float
    muted: bool = False

    @property
    def sound_label(self) -> str:
        return f"Sound: {'OFF' if self.muted else 'ON'}"

    @classmethod
    def from_snapshot(
        cls,
        snapshot: Snapshot,
        config: DashboardConfig | None = None,
    ) -> "DashboardView":
        """Build the view for a snapshot.

        Args:
            snapshot: Simulation snapshot
            config: Gauge layout. Uses defaults if None.

        Returns:
            Dashboard view
        """
        config = config or DashboardConfig()
        rpm_fraction = float(np.clip(snapshot.rpm / config.redline_rpm, 0.0, 1.0))
        redline = snapshot.rpm >= config.limiter_start_rpm

        return cls(
            gear_text=snapshot.gear.value,
            rpm_text=str(round(snapshot.rpm)),
            speed_text=str(max(0, round(snapshot.speed))),
            rpm_fraction=rpm_fraction,
            needle_deg=config.needle_min_deg + rpm_fraction * config.needle_sweep_deg,
            redline=redline,
            flash=redline and snapshot.limiter_active,
            brake_on=snapshot.brake_indicator_active,
            knob_x_percent=LANE_X_PERCENT[snapshot.position.lane],
            knob_y_percent=ROW_Y_PERCENT[snapshot.position.row],
            muted=snapshot.muted,
        )
