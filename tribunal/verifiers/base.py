from abc import ABC, abstractmethod
from tribunal.schema import StepOutcome

class BaseEvaluator(ABC):
    name = "Evaluator"

    async def __call__(self, claim: str) -> StepOutcome:
        return await self.evaluate(claim)

    @abstractmethod
    async def evaluate(self, claim: str) -> StepOutcome:
        pass
