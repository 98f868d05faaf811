# tribunal/sequencer.py
"""
Ordered, fail-closed step execution.

Steps run one at a time in their declared order. The first failure switches the
sequencer into skip mode: every later step is marked skipped and its evaluator
is never called. The verdict is derived only once every step is terminal.
"""
from typing import List, Optional, Protocol, Sequence, Tuple

from tribunal.errors import EvaluatorFault
from tribunal.schema import (
    DEFAULT_FAILURE_REASON,
    StepDefinition,
    StepOutcome,
    StepStatus,
    StepView,
    Verdict,
)
from utils.logger import setup_logger

logger = setup_logger("StepSequencer")


class RunHandle(Protocol):
    """Write access to one run's state, owned by the session."""

    def is_stale(self) -> bool: ...

    def mark(self, index: int, status: StepStatus) -> bool: ...

    def fail(self, index: int, reason: str) -> bool: ...

    def publish(self, verdict: Verdict) -> bool: ...


def derive_verdict(statuses: Sequence[StepStatus]) -> Verdict:
    if any(status is StepStatus.FAILED for status in statuses):
        return Verdict.HALT
    return Verdict.PROCEED


class StepSequencer:
    def __init__(self, definitions: Sequence[StepDefinition]):
        ids = [definition.id for definition in definitions]
        duplicates = sorted({step_id for step_id in ids if ids.count(step_id) > 1})
        if duplicates:
            raise ValueError(f"Duplicate step ids: {', '.join(duplicates)}")
        self._definitions: Tuple[StepDefinition, ...] = tuple(definitions)

    @property
    def definitions(self) -> Tuple[StepDefinition, ...]:
        return self._definitions

    @property
    def step_ids(self) -> List[str]:
        return [definition.id for definition in self._definitions]

    def initial_steps(self) -> Tuple[StepView, ...]:
        return tuple(StepView(d.id, d.label) for d in self._definitions)

    async def _evaluate(self, definition: StepDefinition, claim: str) -> StepOutcome:
        """Run one evaluator; any fault comes back as a failed outcome."""
        try:
            outcome = await definition.evaluator(claim)
            if not isinstance(outcome, StepOutcome) or \
                    outcome.status not in (StepStatus.COMPLETED, StepStatus.FAILED):
                raise TypeError(f"expected a completed or failed StepOutcome, got {outcome!r}")
            return outcome
        except Exception as e:
            fault = EvaluatorFault(definition.id, e)
            logger.error(str(fault))
            return StepOutcome.failed(f"{definition.label} failed unexpectedly.")

    async def run(self, claim: str, run: RunHandle) -> Optional[Verdict]:
        """
        Drive every step for `claim`, committing through `run`.

        Returns the published verdict, or None if the run was superseded
        before it finished. A superseded run commits nothing further.
        """
        statuses = [StepStatus.PENDING] * len(self._definitions)
        failed = False

        for index, definition in enumerate(self._definitions):
            if failed:
                statuses[index] = StepStatus.SKIPPED
                run.mark(index, StepStatus.SKIPPED)
                logger.info(f"[{definition.id}] skipped due to earlier failure")
                continue

            if not run.mark(index, StepStatus.RUNNING):
                return None
            logger.info(f"[{definition.id}] {definition.label}: running")

            outcome = await self._evaluate(definition, claim)

            if run.is_stale():
                logger.info(f"[{definition.id}] result discarded, run superseded")
                return None

            if outcome.status is StepStatus.COMPLETED:
                statuses[index] = StepStatus.COMPLETED
                run.mark(index, StepStatus.COMPLETED)
                logger.info(f"[{definition.id}] completed")
            else:
                reason = outcome.reason or DEFAULT_FAILURE_REASON
                statuses[index] = StepStatus.FAILED
                run.fail(index, reason)
                failed = True
                logger.warning(f"[{definition.id}] FAILED | Reason: {reason}")

        verdict = derive_verdict(statuses)
        if not run.publish(verdict):
            return None
        logger.info(f"Verdict: {verdict.value}")
        return verdict
