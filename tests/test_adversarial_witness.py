import asyncio

import pytest

from conftest import FakeEngine
from tribunal.errors import OracleTimeoutError, TransportError
from tribunal.schema import (
    DEFAULT_WITNESS_REASON,
    INVALID_JSON_REASON,
    StepOutcome,
    StepStatus,
)
from tribunal.verifiers.adversarial_witness import ORACLE_TIMEOUT_REASON, AdversarialWitness


def evaluate(engine, claim="claim", timeout=None):
    witness = AdversarialWitness(engine, timeout=timeout)
    return asyncio.run(witness.evaluate(claim))


def test_pass_maps_to_completed():
    engine = FakeEngine('{"adversarial_verdict": "PASS"}')
    assert evaluate(engine, "The sky is blue.") == StepOutcome.completed()
    assert engine.claims == ["The sky is blue."]


def test_fail_maps_to_failed_with_reason():
    engine = FakeEngine('```json\n{"adversarial_verdict": "FAIL", "failure_reason": "Unsubstantiated health claim"}\n```')
    assert evaluate(engine) == StepOutcome.failed("Unsubstantiated health claim")


@pytest.mark.parametrize("content, reason", [
    ("Sure, PASS!", INVALID_JSON_REASON),
    ("", INVALID_JSON_REASON),
    (None, INVALID_JSON_REASON),
    ('{"adversarial_verdict": "MAYBE"}', DEFAULT_WITNESS_REASON),
])
def test_bad_payload_fails_closed(content, reason):
    assert evaluate(FakeEngine(content)) == StepOutcome.failed(reason)


def test_transport_error_fails_with_its_message():
    engine = FakeEngine(error=TransportError("Oracle error: 500 - Internal Server Error", status_code=500))
    outcome = evaluate(engine)
    assert outcome.status is StepStatus.FAILED
    assert outcome.reason == "Oracle error: 500 - Internal Server Error"


def test_client_side_timeout_fails_with_timeout_reason():
    engine = FakeEngine(error=OracleTimeoutError())
    assert evaluate(engine) == StepOutcome.failed(ORACLE_TIMEOUT_REASON)


def test_slow_oracle_is_cut_off():
    engine = FakeEngine('{"adversarial_verdict": "PASS"}', delay=0.5)
    assert evaluate(engine, timeout=0.05) == StepOutcome.failed(ORACLE_TIMEOUT_REASON)


def test_unexpected_exception_fails_closed():
    engine = FakeEngine(error=RuntimeError("socket exploded"))
    outcome = evaluate(engine)
    assert outcome.status is StepStatus.FAILED
    assert "socket exploded" in outcome.reason


def test_one_request_per_evaluation():
    engine = FakeEngine(error=TransportError("Connection to oracle failed."))
    evaluate(engine)
    assert len(engine.claims) == 1


def test_timeout_defaults_to_engine_timeout():
    witness = AdversarialWitness(FakeEngine(timeout=12.5))
    assert witness.timeout == 12.5
