"""
Handler capability.

The runtime core depends only on this interface: deliver one CanonicalRequest
with its invocation context (which carries the deadline), receive one
CanonicalResponse.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from bridge.runtime.models.canonical import CanonicalRequest, CanonicalResponse
from bridge.runtime.models.invocation import InvocationContext

HandlerFunc = Callable[[CanonicalRequest, InvocationContext], Awaitable[CanonicalResponse]]


class Handler(ABC):
    @abstractmethod
    async def handle(
        self, request: CanonicalRequest, context: InvocationContext
    ) -> CanonicalResponse:
        """
        Produce a response for one request.

        Any exception raised here is reported as a HandlerError for this
        invocation only.
        """
        pass


class FunctionHandler(Handler):
    """Adapts a plain `async def fn(request, context)` to the Handler interface."""

    def __init__(self, func: HandlerFunc):
        self.func = func

    async def handle(
        self, request: CanonicalRequest, context: InvocationContext
    ) -> CanonicalResponse:
        return await self.func(request, context)

    def __repr__(self) -> str:
        return f"FunctionHandler({getattr(self.func, '__qualname__', self.func)!r})"
