"""
Services package.

Provides the handler capability, the Runtime API client and the runtime loop.
handler_loader is imported directly; it depends on the adapters, which depend on this package.
"""

from .handler import FunctionHandler, Handler
from .runtime_client import RuntimeApiClient
from .runtime_loop import RuntimeLoop

__all__ = [
    "FunctionHandler",
    "Handler",
    "RuntimeApiClient",
    "RuntimeLoop",
]
