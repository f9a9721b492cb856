"""Rotation tween: moves the dial from one absolute angle to another."""

from typing import Callable, Optional
from dataclasses import dataclass, field
from enum import Enum, auto

from raffle.animation.easing import Easing, interpolate


class PlayState(Enum):
    """Tween playback state."""

    STOPPED = auto()
    PLAYING = auto()
    FINISHED = auto()


@dataclass
class RotationTween:
    """Eased interpolation of the dial angle over a fixed duration.

    Attributes:
        start: Rotation at the beginning, in degrees
        end: Rotation at the end, in degrees
        duration: Total duration in milliseconds
        easing: Easing applied over the whole tween
        on_complete: Callback when the tween reaches ``end``
    """

    start: float
    end: float
    duration: float = 5000.0
    easing: Easing | str = Easing.WHEEL_SPIN
    on_complete: Optional[Callable[["RotationTween"], None]] = None

    _state: PlayState = field(default=PlayState.STOPPED, repr=False)
    _current_time: float = field(default=0.0, repr=False)

    def play(self) -> "RotationTween":
        """Start playback from the beginning."""
        self._current_time = 0.0
        self._state = PlayState.PLAYING
        return self

    def stop(self) -> "RotationTween":
        """Stop playback where it is."""
        if self._state == PlayState.PLAYING:
            self._state = PlayState.STOPPED
        return self

    @property
    def state(self) -> PlayState:
        return self._state

    @property
    def progress(self) -> float:
        """Normalized progress (0.0 to 1.0)."""
        if self.duration <= 0:
            return 1.0
        return min(1.0, self._current_time / self.duration)

    @property
    def is_playing(self) -> bool:
        return self._state == PlayState.PLAYING

    @property
    def is_finished(self) -> bool:
        return self._state == PlayState.FINISHED

    @property
    def value(self) -> float:
        """Current rotation."""
        return interpolate(self.start, self.end, self.progress, self.easing)

    def update(self, delta_ms: float) -> float:
        """Advance the tween and return the current rotation.

        Args:
            delta_ms: Time elapsed since last update in milliseconds
        """
        if self._state != PlayState.PLAYING:
            return self.value

        self._current_time += delta_ms
        if self._current_time >= self.duration:
            self._current_time = self.duration
            self._state = PlayState.FINISHED
            if self.on_complete:
                self.on_complete(self)

        return self.value
