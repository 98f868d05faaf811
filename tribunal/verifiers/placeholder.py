import asyncio
from typing import Optional
from configs.config import Config
from tribunal.verifiers.base import BaseEvaluator
from tribunal.schema import StepOutcome
from utils.logger import setup_logger

logger = setup_logger("PlaceholderEvaluator")

class PlaceholderEvaluator(BaseEvaluator):
    """
    No-op check. Waits a nominal delay and always completes.

    Stands in for steps that have no real evaluator yet (reasoning, assumption
    extraction, evidence alignment, consistency scan).
    """

    def __init__(self, name: str, delay: Optional[float] = None):
        self.name = name
        self.delay = Config.PLACEHOLDER_DELAY if delay is None else delay

    async def evaluate(self, claim: str) -> StepOutcome:
        logger.debug(f"{self.name}: placeholder check ({self.delay}s)")
        await asyncio.sleep(self.delay)
        return StepOutcome.completed()
