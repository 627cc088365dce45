"""
Session timer: elapsed-seconds counter driven by a one-second tick.
"""
import asyncio
import enum
from typing import Optional

from dialtester.core.config import settings
from dialtester.core.exceptions import InvalidStateError
from dialtester.core.logging import get_logger

logger = get_logger(__name__)


class TimerState(str, enum.Enum):
    """Recording lifecycle."""
    IDLE = "idle"
    RECORDING = "recording"
    PAUSED = "paused"
    COMPLETED = "completed"


_TRANSITIONS = {
    "start": ({TimerState.IDLE}, TimerState.RECORDING),
    "pause": ({TimerState.RECORDING}, TimerState.PAUSED),
    "resume": ({TimerState.PAUSED}, TimerState.RECORDING),
    "complete": ({TimerState.RECORDING, TimerState.PAUSED}, TimerState.COMPLETED),
}


def format_elapsed(seconds: int) -> str:
    """Render seconds as zero-padded ``MM:SS``; minutes past 99 are not wrapped."""
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


class SessionTimer:
    """
    Counts elapsed seconds while recording.

    With ``auto_tick`` the timer runs an asyncio task calling ``tick()``
    every ``tick_seconds`` while in RECORDING; pausing cancels the task
    without resetting the counter.
    """

    def __init__(self, tick_seconds: float = settings.TIMER_TICK_SECONDS, auto_tick: bool = True):
        self.tick_seconds = tick_seconds
        self.auto_tick = auto_tick
        self.state = TimerState.IDLE
        self.elapsed_seconds = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def formatted(self) -> str:
        return format_elapsed(self.elapsed_seconds)

    @property
    def ticking(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        self._transition("start")
        self._start_ticker()

    def pause(self) -> None:
        self._transition("pause")
        self._stop_ticker()

    def resume(self) -> None:
        self._transition("resume")
        self._start_ticker()

    def complete(self) -> None:
        """Freeze the counter; the timer cannot be restarted."""
        self._transition("complete")
        self._stop_ticker()

    def stop(self) -> None:
        """Cancel the ticker without changing state or the counter."""
        self._stop_ticker()

    def tick(self) -> None:
        """Advance the counter by one second if recording."""
        if self.state == TimerState.RECORDING:
            self.elapsed_seconds += 1

    def _transition(self, action: str) -> None:
        allowed, target = _TRANSITIONS[action]
        if self.state not in allowed:
            raise InvalidStateError(f"Cannot {action} a timer that is {self.state.value}")
        logger.debug(f"Timer {self.state.value} -> {target.value}")
        self.state = target

    def _start_ticker(self) -> None:
        if not self.auto_tick:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def _stop_ticker(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.tick_seconds)
            self.tick()
