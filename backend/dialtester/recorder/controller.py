"""
Recorder: owns the state of the one session a client is recording.
"""
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from dialtester.core.config import settings
from dialtester.core.exceptions import InvalidStateError, ValidationError
from dialtester.core.logging import get_logger
from dialtester.models.schemas.sessions import SessionStats
from dialtester.recorder.gateway_client import GatewayClient
from dialtester.recorder.sampler import DialSampler, Sample, TrackBounds
from dialtester.recorder.timer import SessionTimer, TimerState
from dialtester.recorder.write_queue import WriteQueue
from dialtester.services.statistics import compute_stats

logger = get_logger(__name__)


@dataclass
class RecordingState:
    """Everything belonging to the session currently recording."""
    session_id: str
    email: str
    timer: SessionTimer
    sampler: DialSampler

    @property
    def paused(self) -> bool:
        return self.timer.state == TimerState.PAUSED


@dataclass(frozen=True)
class CompletedRecording:
    """Summary handed back when a session is completed."""
    session_id: str
    email: str
    data_point_count: int
    elapsed_seconds: int
    elapsed: str
    stats: SessionStats
    samples: List[Sample]


class Recorder:
    """
    Drives one recording session at a time.

    A UI layer calls ``start``, feeds pointer events to ``press``/``move``/
    ``release``, toggles pause and finally calls ``complete``. Failures of
    ``start`` and ``complete`` propagate so the UI can alert the user and
    let them retry; failures of individual data point writes never do.
    """

    def __init__(
        self,
        gateway: GatewayClient,
        write_queue: Optional[WriteQueue] = None,
        clock: Callable[[], float] = time.time,
        throttle_ms: int = settings.SAMPLE_THROTTLE_MS,
        tick_seconds: float = settings.TIMER_TICK_SECONDS,
        auto_tick: bool = True,
    ):
        self.gateway = gateway
        self.write_queue = write_queue or WriteQueue(gateway)
        self.clock = clock
        self.throttle_ms = throttle_ms
        self.tick_seconds = tick_seconds
        self.auto_tick = auto_tick
        self.state: Optional[RecordingState] = None

    @property
    def is_recording(self) -> bool:
        return self.state is not None

    async def start(self, email: str) -> RecordingState:
        """
        Create a session on the gateway and begin recording.

        Args:
            email: Participant identifier

        Returns:
            The new recording state

        Raises:
            ValidationError: If the email is blank
            InvalidStateError: If a session is already recording
            GatewayError: If the gateway rejects or fails the request
        """
        if self.state is not None:
            raise InvalidStateError("A session is already recording")
        if not email or not email.strip():
            raise ValidationError("Please enter your email address")

        session = await self.gateway.create_session(email.strip())
        await self.write_queue.start()

        timer = SessionTimer(tick_seconds=self.tick_seconds, auto_tick=self.auto_tick)
        sampler = DialSampler(
            session_id=session.id,
            timer=timer,
            sink=self.write_queue,
            started_at=self.clock(),
            throttle_ms=self.throttle_ms,
            clock=self.clock,
        )
        timer.start()

        self.state = RecordingState(session_id=session.id, email=session.email, timer=timer, sampler=sampler)
        get_logger(__name__, session_id=session.id).info(f"Recording started for {session.email}")
        return self.state

    def toggle_pause(self) -> bool:
        """
        Pause a recording session or resume a paused one.

        Returns:
            True if the session is now paused
        """
        state = self._require_state()
        if state.paused:
            state.timer.resume()
        else:
            state.timer.pause()
        return state.paused

    def press(self, x: float, track: TrackBounds) -> Optional[int]:
        if self.state is None:
            return None
        return self.state.sampler.press(x, track)

    def move(self, x: float, track: TrackBounds) -> Optional[int]:
        if self.state is None:
            return None
        return self.state.sampler.move(x, track)

    def release(self) -> None:
        if self.state is not None:
            self.state.sampler.release()

    async def complete(self) -> CompletedRecording:
        """
        Complete the session on the gateway and clear the recording state.

        Outstanding writes are flushed first. If the gateway call fails the
        session stays active so ``complete`` can be retried.

        Raises:
            InvalidStateError: If no session is recording
            GatewayError: If the gateway rejects or fails the request
        """
        state = self._require_state()
        await self.write_queue.drain()

        await self.gateway.complete_session(state.session_id)

        state.timer.complete()
        state.sampler.release()
        values = state.sampler.values()
        summary = CompletedRecording(
            session_id=state.session_id,
            email=state.email,
            data_point_count=len(values),
            elapsed_seconds=state.timer.elapsed_seconds,
            elapsed=state.timer.formatted,
            stats=compute_stats(values),
            samples=list(state.sampler.samples),
        )
        self.state = None

        logger.info(
            f"Session {summary.session_id} completed with {summary.data_point_count} data points",
            extra={"session_id": summary.session_id},
        )
        return summary

    async def close(self) -> None:
        """Stop an active session's ticker, then flush and stop the write worker."""
        if self.state is not None:
            self.state.timer.stop()
        await self.write_queue.close()

    def _require_state(self) -> RecordingState:
        if self.state is None:
            raise InvalidStateError("No session is recording")
        return self.state
