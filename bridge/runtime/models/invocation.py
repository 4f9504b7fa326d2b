"""
Invocation models.

One Invocation exists per loop iteration and is discarded once its result
has been reported.
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class InvocationContext(BaseModel):
    """
    Metadata the Runtime API attaches to an invocation.

    The deadline is handed to the handler; honoring it is the handler's job.
    """

    request_id: str
    deadline_ms: int = 0
    invoked_function_arn: Optional[str] = None
    trace_id: Optional[str] = None
    client_context: Optional[str] = None
    cognito_identity: Optional[str] = None

    @property
    def deadline(self) -> datetime:
        return datetime.fromtimestamp(self.deadline_ms / 1000, tz=timezone.utc)

    def remaining_time_ms(self) -> int:
        """Milliseconds left before the host terminates the invocation (never negative)."""
        return max(0, self.deadline_ms - int(time.time() * 1000))


class Invocation(BaseModel):
    context: InvocationContext
    event: Any = Field(default_factory=dict)

    @property
    def request_id(self) -> str:
        return self.context.request_id

    def log_extra(self) -> Dict[str, Any]:
        return {
            "aws_request_id": self.context.request_id,
            "remaining_time_ms": self.context.remaining_time_ms(),
        }
