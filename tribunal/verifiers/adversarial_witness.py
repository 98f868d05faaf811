import asyncio
from typing import Optional
from tribunal.verifiers.base import BaseEvaluator
from tribunal.schema import StepOutcome
from tribunal.errors import OracleTimeoutError, TransportError
from tribunal.llm_engine import LLMEngine
from tribunal import verdict_parser
from utils.logger import setup_logger

logger = setup_logger("AdversarialWitness")

ORACLE_TIMEOUT_REASON = "oracle timeout"

class AdversarialWitness(BaseEvaluator):
    name = "AdversarialWitness"

    def __init__(self, engine: Optional[LLMEngine] = None, timeout: Optional[float] = None):
        self.llm = engine or LLMEngine()
        self.timeout = self.llm.timeout if timeout is None else timeout

    async def evaluate(self, claim: str) -> StepOutcome:
        logger.info(f"Adversarial review: \"{claim}\"")

        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(self.llm.request_adversarial_review, claim),
                timeout=self.timeout
            )
        except (asyncio.TimeoutError, OracleTimeoutError):
            logger.warning(f"TIMEOUT: oracle did not answer within {self.timeout}s")
            return StepOutcome.failed(ORACLE_TIMEOUT_REASON)
        except TransportError as e:
            return StepOutcome.failed(str(e))
        except Exception as e:
            logger.error(f"Oracle request failed: {e}")
            return StepOutcome.failed(f"Oracle request failed: {e}")

        raw_content = verdict_parser.extract_content(response)
        logger.debug(f"Oracle content: {raw_content!r}")

        result = verdict_parser.parse(raw_content)
        if result.passed:
            logger.info("Witness verdict: PASS")
            return StepOutcome.completed()

        logger.info(f"Witness verdict: FAIL | Reason: {result.reason}")
        return StepOutcome.failed(result.reason)
