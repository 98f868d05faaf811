import time
from types import SimpleNamespace

from tribunal.schema import StepDefinition, StepOutcome


def make_completion(content):
    message = SimpleNamespace(role="assistant", content=content)
    return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])


class FakeCompletions:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


class FakeClient:
    def __init__(self, result=None, error=None):
        self.completions = FakeCompletions(result, error)
        self.chat = SimpleNamespace(completions=self.completions)


class FakeEngine:
    """Stands in for LLMEngine: returns a canned completion or raises."""

    def __init__(self, content=None, error=None, delay=0.0, timeout=5.0):
        self.content = content
        self.error = error
        self.delay = delay
        self.timeout = timeout
        self.claims = []

    def request_adversarial_review(self, claim):
        self.claims.append(claim)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return make_completion(self.content)


class RecordingEvaluator:
    """Async evaluator that counts calls and returns a fixed outcome."""

    def __init__(self, outcome=None, error=None):
        self.outcome = outcome or StepOutcome.completed()
        self.error = error
        self.calls = []

    async def __call__(self, claim):
        self.calls.append(claim)
        if self.error is not None:
            raise self.error
        return self.outcome


def make_steps(*evaluators):
    return [
        StepDefinition(f"step{i}", f"Step {i}", evaluator)
        for i, evaluator in enumerate(evaluators, start=1)
    ]
