"""Simulated multi-stage progress in front of one real async operation.

The sequencer walks an ordered list of timed stages purely for display, then
awaits the terminal operation. The stage walk does not track real progress:
the terminal operation is only started once the last stage has elapsed, and
its outcome alone decides whether the sequence ends COMPLETE or falls back
to IDLE.

State machine::

    IDLE --start--> RUNNING(0) --d0--> RUNNING(1) ... RUNNING(K-1)
    RUNNING(K-1) --dK-1, terminal ok--> COMPLETE
    RUNNING(K-1) --dK-1, terminal fails--> IDLE (+ error event)
    COMPLETE --reset--> IDLE
    RUNNING(*) --cancel--> IDLE

Only one run may be in flight; ``start`` while running raises
:class:`SequenceInProgressError`, and ``start`` from COMPLETE raises
:class:`SequenceNotResetError` until ``reset`` has been called.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence

from cfr_analytics.core.errors.sequencer import (
    SequenceInProgressError,
    SequenceNotResetError,
)

logger = logging.getLogger(__name__)

COMPLETED_LABEL = "Analysis completed successfully!"


@dataclass(frozen=True)
class Stage:
    """One display step: a label shown for ``duration`` seconds."""

    label: str
    duration: float


class SequencePhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"


@dataclass(frozen=True)
class ProgressState:
    """Observable progress.

    ``index`` is -1 while idle, 0..K-1 while running and K once complete.
    """

    index: int
    label: str
    phase: SequencePhase

    @property
    def is_running(self) -> bool:
        return self.phase is SequencePhase.RUNNING

    @property
    def is_complete(self) -> bool:
        return self.phase is SequencePhase.COMPLETE


IDLE_STATE = ProgressState(index=-1, label="", phase=SequencePhase.IDLE)


class ProgressListener(Protocol):
    """Receives sequencer events. Both methods are optional in practice;
    :meth:`ProgressSequencer.subscribe` accepts plain callables too."""

    def on_state(self, state: ProgressState) -> None: ...

    def on_error(self, error: BaseException) -> None: ...


SleepFunc = Callable[[float], Awaitable[Any]]
TerminalOperation = Callable[[], Awaitable[Any]]


class _CallableListener:
    def __init__(
        self,
        on_state: Callable[[ProgressState], None],
        on_error: Optional[Callable[[BaseException], None]] = None,
    ):
        self._on_state = on_state
        self._on_error = on_error

    def on_state(self, state: ProgressState) -> None:
        self._on_state(state)

    def on_error(self, error: BaseException) -> None:
        if self._on_error is not None:
            self._on_error(error)


class ProgressSequencer:
    """Drives the staged progress state machine.

    Args:
        stages: Ordered, non-empty list of stages
        terminal: Zero-argument coroutine function for the real operation
        sleep: Awaitable sleep used between stages (injectable for tests)
    """

    def __init__(
        self,
        stages: Sequence[Stage],
        terminal: TerminalOperation,
        sleep: Optional[SleepFunc] = None,
    ):
        if not stages:
            raise ValueError("ProgressSequencer requires at least one stage")
        self.stages: tuple[Stage, ...] = tuple(stages)
        self._terminal = terminal
        self._sleep: SleepFunc = sleep or asyncio.sleep
        self._state = IDLE_STATE
        self._listeners: list[ProgressListener] = []
        self._task: Optional[asyncio.Task] = None
        self.history: list[ProgressState] = [IDLE_STATE]
        self.result: Any = None
        self.last_error: Optional[BaseException] = None

    @property
    def state(self) -> ProgressState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state.phase is SequencePhase.RUNNING

    def subscribe(
        self,
        listener: Any,
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> Callable[[], None]:
        """Register a listener and return a function that removes it.

        ``listener`` is either an object with ``on_state``/``on_error`` or a
        callable taking a :class:`ProgressState` (with ``on_error`` passed
        separately).
        """
        if not hasattr(listener, "on_state"):
            listener = _CallableListener(listener, on_error)
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self) -> "asyncio.Task[Any]":
        """Schedule :meth:`run` as a task on the running loop."""
        if self.is_running or (self._task is not None and not self._task.done()):
            raise SequenceInProgressError()
        if self._state.phase is SequencePhase.COMPLETE:
            raise SequenceNotResetError()
        # Enter RUNNING synchronously so a second start() in the same tick is rejected
        self._enter_stage(0)
        self._task = asyncio.ensure_future(self._run_stages())
        return self._task

    async def run(self) -> Any:
        """Run the full sequence and return the terminal result.

        Raises:
            SequenceInProgressError: If a run is already in flight.
            SequenceNotResetError: If the last run completed and was not reset.
            Exception: Whatever the terminal operation raised; the sequencer
                is back in IDLE by then and listeners have seen the error.
        """
        return await self.start()

    def cancel(self) -> bool:
        """Cancel an in-flight run. Returns True if something was cancelled."""
        if self._task is None or self._task.done():
            return False
        self._task.cancel()
        self._set_state(IDLE_STATE)
        return True

    def reset(self) -> None:
        """Return a completed sequence to IDLE."""
        if self.is_running:
            raise SequenceInProgressError("Cannot reset while a progress sequence is running")
        self.result = None
        self.last_error = None
        self.history = []
        self._set_state(IDLE_STATE)

    async def _run_stages(self) -> Any:
        try:
            for index, stage in enumerate(self.stages):
                if index > 0:
                    self._enter_stage(index)
                await self._sleep(stage.duration)
            result = await self._terminal()
        except asyncio.CancelledError:
            logger.info("Progress sequence cancelled at stage %d", self._state.index)
            if self._state.phase is not SequencePhase.IDLE:
                self._set_state(IDLE_STATE)
            raise
        except Exception as e:
            logger.error("Terminal operation failed: %s", e)
            self.last_error = e
            self._set_state(IDLE_STATE)
            self._emit_error(e)
            raise

        self.result = result
        self._set_state(
            ProgressState(index=len(self.stages), label=COMPLETED_LABEL, phase=SequencePhase.COMPLETE)
        )
        return result

    def _enter_stage(self, index: int) -> None:
        stage = self.stages[index]
        logger.debug("Stage %d/%d: %s", index + 1, len(self.stages), stage.label)
        self._set_state(ProgressState(index=index, label=stage.label, phase=SequencePhase.RUNNING))

    def _set_state(self, state: ProgressState) -> None:
        self._state = state
        self.history.append(state)
        for listener in list(self._listeners):
            try:
                listener.on_state(state)
            except Exception:
                logger.exception("Progress listener failed on state %s", state)

    def _emit_error(self, error: BaseException) -> None:
        for listener in list(self._listeners):
            handler = getattr(listener, "on_error", None)
            if handler is None:
                continue
            try:
                handler(error)
            except Exception:
                logger.exception("Progress listener failed on error event")


def stages_from_config(settings: Sequence[Any]) -> list[Stage]:
    """Convert configured ``StageSetting`` entries into stages."""
    return [Stage(label=s.label, duration=s.duration) for s in settings]
