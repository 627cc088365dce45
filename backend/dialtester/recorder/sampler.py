"""
Dial sampler: maps pointer positions on the slider track to values and
throttles how often samples are persisted.
"""
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional, Protocol

from dialtester.core.config import settings
from dialtester.core.logging import get_logger
from dialtester.models.database.data_points import MIN_VALUE, MAX_VALUE
from dialtester.recorder.timer import SessionTimer, TimerState
from dialtester.services.statistics import round_half_up

logger = get_logger(__name__)


@dataclass(frozen=True)
class TrackBounds:
    """Horizontal extent of the slider track in pixels."""
    left: float
    width: float


@dataclass(frozen=True)
class Sample:
    """One locally buffered sample; ``timestamp_ms`` is relative to session start."""
    timestamp_ms: int
    value: int


@dataclass(frozen=True)
class DataPointWrite:
    """A data point insert waiting to be delivered."""
    session_id: str
    value: int
    timestamp: datetime


class WriteSink(Protocol):
    def submit(self, write: DataPointWrite) -> bool:
        ...


def position_to_value(x: float, left: float, width: float) -> int:
    """
    Convert a pointer x coordinate to a dial value.

    The position is clamped to the track, so anything left of it reads
    -100 and anything right of it reads +100. A degenerate track maps to 0.
    """
    if width <= 0:
        return 0
    percentage = max(0.0, min(1.0, (x - left) / width))
    value = int(round_half_up((percentage - 0.5) * (MAX_VALUE - MIN_VALUE)))
    return max(MIN_VALUE, min(MAX_VALUE, value))


class Throttle:
    """Minimum-interval gate for a side-effecting action."""

    def __init__(self, interval_ms: int):
        self.interval_ms = interval_ms
        self._last_ms: Optional[int] = None

    def ready(self, now: float) -> bool:
        """Return True and arm the gate if ``interval_ms`` elapsed since the last pass.

        Args:
            now: Current wall-clock time in seconds
        """
        now_ms = round(now * 1000)
        if self._last_ms is not None and now_ms - self._last_ms < self.interval_ms:
            return False
        self._last_ms = now_ms
        return True


@dataclass
class DialSampler:
    """
    Samples the dial for one recording session.

    Every accepted pointer event is appended to ``samples``; only those
    passing the throttle are handed to the write sink, which delivers them
    without the sampler waiting on the network.
    """
    session_id: str
    timer: SessionTimer
    sink: WriteSink
    started_at: float
    throttle_ms: int = settings.SAMPLE_THROTTLE_MS
    clock: Callable[[], float] = time.time
    samples: List[Sample] = field(default_factory=list)
    current_value: int = 0
    dragging: bool = False
    dispatched: int = 0

    def __post_init__(self):
        self._throttle = Throttle(self.throttle_ms)

    @property
    def accepting(self) -> bool:
        return self.timer.state == TimerState.RECORDING

    def press(self, x: float, track: TrackBounds) -> Optional[int]:
        """Start a drag and sample the press position."""
        self.dragging = True
        return self._sample(x, track)

    def move(self, x: float, track: TrackBounds) -> Optional[int]:
        """Sample a pointer or touch move; ignored unless dragging."""
        if not self.dragging:
            return None
        return self._sample(x, track)

    def release(self) -> None:
        """End the drag."""
        self.dragging = False

    def values(self) -> List[int]:
        return [sample.value for sample in self.samples]

    def _sample(self, x: float, track: TrackBounds) -> Optional[int]:
        if not self.accepting:
            return None

        value = position_to_value(x, track.left, track.width)
        now = self.clock()
        self.current_value = value
        self.samples.append(Sample(timestamp_ms=round((now - self.started_at) * 1000), value=value))

        if self._throttle.ready(now):
            write = DataPointWrite(
                session_id=self.session_id,
                value=value,
                timestamp=datetime.fromtimestamp(now, tz=timezone.utc),
            )
            if self.sink.submit(write):
                self.dispatched += 1

        return value
