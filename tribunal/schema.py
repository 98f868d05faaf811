# tribunal/schema.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

DEFAULT_WITNESS_REASON = "Critical risk detected by adversarial witness."
INVALID_JSON_REASON = "Model returned invalid JSON format."
DEFAULT_FAILURE_REASON = "Critical assumption collapsed under adversarial scrutiny."


class StepStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"  # evaluator in flight, display only
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self in (StepStatus.COMPLETED, StepStatus.FAILED, StepStatus.SKIPPED)


class WitnessVerdict(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"


class Verdict(str, Enum):
    PROCEED = "PROCEED"
    HALT = "HALT"


@dataclass(frozen=True)
class ParsedVerdict:
    verdict: WitnessVerdict
    reason: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.verdict is WitnessVerdict.PASS


@dataclass(frozen=True)
class StepOutcome:
    status: StepStatus  # COMPLETED or FAILED
    reason: Optional[str] = None

    @classmethod
    def completed(cls) -> "StepOutcome":
        return cls(StepStatus.COMPLETED)

    @classmethod
    def failed(cls, reason: Optional[str] = None) -> "StepOutcome":
        return cls(StepStatus.FAILED, reason)


Evaluator = Callable[[str], Awaitable[StepOutcome]]


@dataclass(frozen=True)
class StepDefinition:
    id: str
    label: str
    evaluator: Evaluator


@dataclass(frozen=True)
class StepView:
    id: str
    label: str
    status: StepStatus = StepStatus.PENDING

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "label": self.label, "status": self.status.value}


@dataclass(frozen=True)
class TribunalState:
    """Read model handed to the presentation layer."""
    claim: Optional[str] = None
    generation: int = 0
    steps: Tuple[StepView, ...] = field(default_factory=tuple)
    verdict: Optional[Verdict] = None
    failure_reason: Optional[str] = None

    def status_of(self, step_id: str) -> StepStatus:
        for step in self.steps:
            if step.id == step_id:
                return step.status
        raise KeyError(step_id)

    @property
    def statuses(self) -> List[StepStatus]:
        return [step.status for step in self.steps]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "steps": [step.to_dict() for step in self.steps],
            "verdict": self.verdict.value if self.verdict else None,
            "failureReason": self.failure_reason,
        }
