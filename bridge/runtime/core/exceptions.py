"""
Custom exception classes.

Invocation-scoped errors are reported back to the Runtime API and the loop
continues; RuntimeTransportError is loop-scoped and ends the process.
"""

import traceback
from typing import Any, Dict, List, Optional


class BridgeError(Exception):
    """Base exception class for the runtime bridge."""

    error_type = "BridgeError"

    def to_payload(self) -> Dict[str, Any]:
        """Render the Runtime API error document."""
        return {
            "errorMessage": str(self),
            "errorType": self.error_type,
            "stackTrace": self._stack_trace(),
        }

    def _stack_trace(self) -> List[str]:
        origin = self.__cause__ or self
        return [line.rstrip("\n") for line in traceback.format_tb(origin.__traceback__)]


class InvocationError(BridgeError):
    """Base class for failures scoped to a single invocation."""

    error_type = "InvocationError"


class UnsupportedFormat(InvocationError):
    """Raised when an event is not one of the supported schema variants."""

    error_type = "UnsupportedFormat"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Unsupported event format: {reason}")


class DecodeError(InvocationError):
    """Raised when an event's fields or body cannot be decoded."""

    error_type = "DecodeError"


class EncodingError(InvocationError):
    """Raised when a response cannot be represented in the target schema."""

    error_type = "EncodingError"


class HandlerError(InvocationError):
    """Raised when the external handler fails. The cause is passed through as-is."""

    error_type = "HandlerError"

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"{type(cause).__name__}: {cause}")


class RuntimeTransportError(BridgeError):
    """Raised when the Runtime API itself cannot be reached or misbehaves."""

    error_type = "RuntimeTransportError"

    def __init__(self, detail: str, status_code: Optional[int] = None):
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)


class HandlerLoadError(BridgeError):
    """Raised when the configured handler cannot be imported or adapted."""

    error_type = "ImportModuleError"

    def __init__(self, target: str, cause: BaseException):
        self.target = target
        self.cause = cause
        super().__init__(f"Unable to load handler {target!r}: {cause}")
