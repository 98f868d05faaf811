# tribunal/session.py
import asyncio
import threading
from typing import Callable, List, Optional

from tribunal.errors import ClaimInProgressError, EmptyClaimError
from tribunal.schema import (
    DEFAULT_FAILURE_REASON,
    StepStatus,
    StepView,
    TribunalState,
    Verdict,
)
from tribunal.sequencer import StepSequencer
from utils.logger import setup_logger

logger = setup_logger("TribunalSession")

Listener = Callable[[TribunalState], None]


class _Run:
    """Handle given to the sequencer for one generation of the session."""

    def __init__(self, session: "TribunalSession", generation: int):
        self._session = session
        self.generation = generation

    def is_stale(self) -> bool:
        return self._session._generation != self.generation

    def mark(self, index: int, status: StepStatus) -> bool:
        def apply(session):
            session._set_status(index, status)
        return self._session._commit(self.generation, apply)

    def fail(self, index: int, reason: str) -> bool:
        def apply(session):
            session._set_status(index, StepStatus.FAILED)
            session._failure_reason = reason
        return self._session._commit(self.generation, apply)

    def publish(self, verdict: Verdict) -> bool:
        def apply(session):
            if session._verdict is not None:
                raise RuntimeError("verdict already published for this run")
            if any(not step.status.is_terminal for step in session._steps):
                raise RuntimeError("verdict published before every step was terminal")
            session._verdict = verdict
        return self._session._commit(self.generation, apply)

    def abort(self, reason: str) -> bool:
        """Force a HALT: first unfinished step fails, the rest are skipped."""
        def apply(session):
            failed = False
            for index, step in enumerate(session._steps):
                if step.status.is_terminal:
                    failed = failed or step.status is StepStatus.FAILED
                    continue
                session._set_status(index, StepStatus.SKIPPED if failed else StepStatus.FAILED)
                if not failed:
                    session._failure_reason = reason
                failed = True
            if session._verdict is None:
                session._verdict = Verdict.HALT
        return self._session._commit(self.generation, apply)


class TribunalSession:
    """
    Owns the state of one tribunal over successive claims.

    Each accepted claim starts a new run with fresh pending steps. Submitting a
    different claim while a run is in flight supersedes it: the generation
    counter moves on and anything the old run tries to commit afterwards is
    dropped. Presentation code reads snapshots via current_state() or
    subscribe(); it never mutates the session.
    """

    def __init__(self, sequencer: StepSequencer):
        self.sequencer = sequencer
        self._lock = threading.Lock()
        self._generation = 0
        self._claim: Optional[str] = None
        self._steps: List[StepView] = list(sequencer.initial_steps())
        self._verdict: Optional[Verdict] = None
        self._failure_reason: Optional[str] = None
        self._task: Optional[asyncio.Task] = None
        self._listeners: List[Listener] = []

    # -- read side -------------------------------------------------------

    def _snapshot(self) -> TribunalState:
        return TribunalState(
            claim=self._claim,
            generation=self._generation,
            steps=tuple(self._steps),
            verdict=self._verdict,
            failure_reason=self._failure_reason,
        )

    def current_state(self) -> TribunalState:
        with self._lock:
            return self._snapshot()

    def is_running(self) -> bool:
        with self._lock:
            return self._is_running_locked()

    def _is_running_locked(self) -> bool:
        return (
            self._claim is not None
            and self._verdict is None
            and self._task is not None
            and not self._task.done()
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _notify(self, state: TribunalState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Listener {listener!r} raised: {e}")

    # -- write side ------------------------------------------------------

    def _set_status(self, index: int, status: StepStatus) -> None:
        step = self._steps[index]
        if step.status.is_terminal:
            raise RuntimeError(f"step '{step.id}' is already {step.status.value}")
        self._steps[index] = StepView(step.id, step.label, status)

    def _commit(self, generation: int, apply: Callable[["TribunalSession"], None]) -> bool:
        with self._lock:
            if generation != self._generation:
                return False
            apply(self)
            state = self._snapshot()
        self._notify(state)
        return True

    def start(self, claim: str) -> asyncio.Task:
        """
        Accept `claim` and schedule a run on the running event loop.

        Raises EmptyClaimError for a blank claim and ClaimInProgressError when
        the same claim is still under review. Neither changes any state.
        """
        if claim is None or not str(claim).strip():
            raise EmptyClaimError()
        loop = asyncio.get_running_loop()

        with self._lock:
            if self._is_running_locked() and self._claim == claim:
                raise ClaimInProgressError(claim)
            superseded = self._is_running_locked()
            self._generation += 1
            generation = self._generation
            self._claim = claim
            self._steps = list(self.sequencer.initial_steps())
            self._verdict = None
            self._failure_reason = None
            run = _Run(self, generation)
            self._task = loop.create_task(self._drive(claim, run))
            task = self._task
            state = self._snapshot()

        if superseded:
            logger.info(f"Run {generation - 1} superseded by run {generation}")
        logger.info(f"Run {generation} started for claim: {claim!r}")
        self._notify(state)
        return task

    def submit_claim(self, claim: str) -> None:
        self.start(claim)

    async def run(self, claim: str) -> TribunalState:
        """Start a run and wait for it; returns the session state afterwards."""
        await self.start(claim)
        return self.current_state()

    async def _drive(self, claim: str, run: _Run) -> Optional[Verdict]:
        try:
            return await self.sequencer.run(claim, run)
        except Exception as e:
            logger.exception(f"Run {run.generation} crashed: {e}")
            run.abort(DEFAULT_FAILURE_REASON)
            return Verdict.HALT if not run.is_stale() else None
