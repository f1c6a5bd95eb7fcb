"""
Audio renderer - Drives a synth backend from simulation output.

Provides:
- Idempotent engine drone start/stop and mute handling
- Per-tick drone parameter updates
- Dispatch of shift and pop one-shots
"""

from typing import Iterable
import logging

from revbox.audio.parameters import AudioConfig, EngineTone, engine_tone, pop_gain, shift_gain
from revbox.effects.events import PopEvent, ShiftEvent


logger = logging.getLogger(__name__)


class AudioBackend:
    """Synth backend interface.

    The base class produces no sound; concrete backends override the
    methods they support.
    """

    def start_engine(self) -> None:
        pass

    def stop_engine(self) -> None:
        pass

    def set_engine_tone(self, tone: EngineTone) -> None:
        pass

    def play_shift(self, gain: float, delay: float = 0.0) -> None:
        pass

    def play_pop(self, gain: float, delay: float = 0.0) -> None:
        pass


class AudioRenderer:
    """Audio side of one simulated vehicle.

    Owns the drone on/off and mute flags. Starting, stopping and muting
    are idempotent, so repeated calls never reach the backend twice.
    Mute can be set directly or by the simulation; render() only applies
    the snapshot flag when it changes.
    Everything is silent while muted.

    Usage:
        renderer = AudioRenderer(backend)
        renderer.unlock()
        result = sim.tick(dt)
        renderer.render(result)
    """

    def __init__(self, backend: AudioBackend | None = None, config: AudioConfig | None = None):
        """Initialize renderer.

        Args:
            backend: Synth backend. Uses a silent backend if None.
            config: Tone mapping. Uses defaults if None.
        """
        self.backend = backend or AudioBackend()
        self.config = config or AudioConfig()

        self._muted: bool = False
        self._engine_on: bool = False
        self._last_tone: EngineTone | None = None
        self._snapshot_muted: bool = False

    @property
    def muted(self) -> bool:
        return self._muted

    @property
    def engine_on(self) -> bool:
        return self._engine_on

    @property
    def last_tone(self) -> EngineTone | None:
        """Most recent drone targets sent to the backend."""
        return self._last_tone

    def start(self) -> bool:
        """Start the engine drone.

        Returns:
            True if the drone was started by this call
        """
        if self._engine_on or self._muted:
            return False
        self.backend.start_engine()
        self._engine_on = True
        logger.debug("Engine drone started")
        return True

    def stop(self) -> bool:
        """Stop the engine drone.

        Returns:
            True if the drone was stopped by this call
        """
        if not self._engine_on:
            return False
        self.backend.stop_engine()
        self._engine_on = False
        logger.debug("Engine drone stopped")
        return True

    def unlock(self) -> None:
        """Start sound after a user gesture and play the ready cue."""
        if self._muted:
            return
        self.start()
        self.backend.play_shift(shift_gain(self.config.unlock_shift_intensity, self.config))

    def set_muted(self, muted: bool) -> None:
        """Apply a mute state.

        Unmuting restarts the drone and plays the ready cue.
        """
        if muted == self._muted:
            return
        self._muted = muted
        if muted:
            self.stop()
        else:
            self.unlock()

    def toggle_mute(self) -> bool:
        """Flip mute state.

        Returns:
            New mute state
        """
        self.set_muted(not self._muted)
        return self._muted

    def render(self, result) -> None:
        """Apply one tick of simulation output.

        Args:
            result: TickResult from SimulationEngine.tick
        """
        snapshot = result.snapshot
        # Follow the simulation only when its mute flag flips
        if snapshot.muted != self._snapshot_muted:
            self._snapshot_muted = snapshot.muted
            self.set_muted(snapshot.muted)
        if self._muted:
            return

        if snapshot.throttle_target > 0.0:
            self.start()

        if self._engine_on:
            self._last_tone = engine_tone(
                snapshot.rpm,
                snapshot.throttle,
                limiter_cut=snapshot.limiter_active,
                config=self.config,
            )
            self.backend.set_engine_tone(self._last_tone)

        self.dispatch(result.events)

    def dispatch(self, events: Iterable) -> int:
        """Send one-shot events to the backend.

        Args:
            events: Shift and pop events

        Returns:
            Number of one-shots played
        """
        if self._muted:
            return 0

        played = 0
        for event in events:
            if isinstance(event, ShiftEvent):
                self.backend.play_shift(shift_gain(event.intensity, self.config))
            elif isinstance(event, PopEvent):
                self.backend.play_pop(pop_gain(event.intensity, self.config), event.delay)
            else:
                continue
            played += 1
        return played
