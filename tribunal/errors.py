# tribunal/errors.py
from typing import Optional


class TribunalError(Exception):
    """Base class for every error raised inside the tribunal."""


class ValidationError(TribunalError):
    """Raised by TribunalSession.start() when a submission is refused."""


class EmptyClaimError(ValidationError):
    """Raised when the submitted claim is empty or blank."""

    def __init__(self) -> None:
        super().__init__("Claim must not be empty.")


class ClaimInProgressError(ValidationError):
    """Raised when the claim already under review is submitted again."""

    def __init__(self, claim: str) -> None:
        super().__init__(f"Claim is already under review: {claim!r}")
        self.claim = claim


class ParseError(TribunalError):
    """Raised when an oracle payload cannot be decoded."""


class TransportError(TribunalError):
    """Raised for network or HTTP failures talking to the oracle."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.original_error = original_error


class OracleTimeoutError(TransportError):
    """Raised when the oracle does not answer within the configured timeout."""

    def __init__(self, original_error: Optional[Exception] = None) -> None:
        super().__init__("oracle timeout", original_error=original_error)


class EvaluatorFault(TribunalError):
    """An evaluator raised or returned something other than a StepOutcome."""

    def __init__(self, step_id: str, original_error: Optional[BaseException] = None) -> None:
        super().__init__(f"Evaluator for step '{step_id}' faulted: {original_error}")
        self.step_id = step_id
        self.original_error = original_error


__all__ = [
    "TribunalError",
    "ValidationError",
    "EmptyClaimError",
    "ClaimInProgressError",
    "ParseError",
    "TransportError",
    "OracleTimeoutError",
    "EvaluatorFault",
]
