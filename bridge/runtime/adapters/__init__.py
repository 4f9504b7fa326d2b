"""
Handler adapters.

Wrap web frameworks so they can serve as the runtime's Handler.
"""

from .asgi import AsgiHandler, build_scope

__all__ = [
    "AsgiHandler",
    "build_scope",
]
