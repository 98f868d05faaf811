from typing import Optional
from tribunal.schema import StepDefinition
from tribunal.sequencer import StepSequencer
from tribunal.session import TribunalSession
from tribunal.verifiers.base import BaseEvaluator
from tribunal.verifiers.adversarial_witness import AdversarialWitness
from tribunal.verifiers.placeholder import PlaceholderEvaluator

ADVERSARIAL_STEP_ID = "adversarial"

# (id, label) in execution order
STEP_LABELS = [
    ("reasoning", "Primary Reasoning"),
    ("assumption", "Assumption Extraction"),
    (ADVERSARIAL_STEP_ID, "Adversarial Attack"),
    ("evidence", "Evidence Alignment"),
    ("consistency", "Consistency Scan"),
]


def build_sequencer(witness: Optional[BaseEvaluator] = None,
                    placeholder_delay: Optional[float] = None) -> StepSequencer:
    witness = witness or AdversarialWitness()
    definitions = []
    for step_id, label in STEP_LABELS:
        if step_id == ADVERSARIAL_STEP_ID:
            evaluator = witness
        else:
            evaluator = PlaceholderEvaluator(label, delay=placeholder_delay)
        definitions.append(StepDefinition(step_id, label, evaluator))
    return StepSequencer(definitions)


def build_session(witness: Optional[BaseEvaluator] = None,
                  placeholder_delay: Optional[float] = None) -> TribunalSession:
    return TribunalSession(build_sequencer(witness, placeholder_delay))
