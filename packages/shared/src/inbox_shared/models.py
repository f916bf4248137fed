"""Pydantic base models shared across components.

These serve as the contract types that flow between workflows and activities.
Using Pydantic gives us automatic validation at component boundaries — a
malformed payload from Chatwoot or the Evolution gateway fails at the adapter
instead of leaking untyped data into the reconciliation engine.
"""

from enum import StrEnum

from pydantic import BaseModel


class ErrorKind(StrEnum):
    """Why an operation did not succeed.

    Expected failures are reported through this field on a result object,
    never raised. Callers show a message and let the operator retry manually.
    """

    SOURCE_UNAVAILABLE = "source_unavailable"
    CONFLICTING_IDENTITY = "conflicting_identity"
    TIMEOUT = "timeout"
    VALIDATION_ERROR = "validation_error"
    IN_FLIGHT = "in_flight"
    FAILED = "failed"


class PlatformResult(BaseModel):
    """Standard result envelope returned by activities and engine entry points.

    Every public operation returns this (or a subclass) so callers have a
    consistent interface for checking success/failure without catching
    exceptions for expected business failures.
    """

    success: bool
    message: str
    error_kind: ErrorKind | None = None
    data: dict[str, str | int | float | bool | None] | None = None


class PreconditionViolation(ValueError):
    """Raised when an engine entry point is called with an item it can't act on.

    This is a programming error in the caller (e.g. asking to pair an item with
    no gateway instance behind it), not an operational failure.
    """
