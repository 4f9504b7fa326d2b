"""
Handler loading.

Resolves the configured `module:attribute` target and adapts it to the
Handler interface.
"""

import importlib
import inspect
import logging
from typing import Any

from bridge.runtime.adapters.asgi import AsgiHandler
from bridge.runtime.core.exceptions import HandlerLoadError

from .handler import FunctionHandler, Handler

logger = logging.getLogger("bridge.handler_loader")


def adapt_handler(target: Any) -> Handler:
    """
    Wrap `target` in the matching Handler.

    - Handler instances are used as-is
    - `async def fn(request, context)` is wrapped in FunctionHandler
    - any other callable is treated as an ASGI application
    """
    if isinstance(target, Handler):
        return target
    if inspect.iscoroutinefunction(target) and len(inspect.signature(target).parameters) == 2:
        return FunctionHandler(target)
    if callable(target):
        return AsgiHandler(target)
    raise TypeError(f"{target!r} is neither a Handler, a handler function nor an ASGI app")


def load_handler(target: str) -> Handler:
    """
    Import and adapt the handler named by `target` ("package.module:attr.path").

    Raises:
        HandlerLoadError: the module or attribute is missing, or the object cannot be adapted
    """
    module_name, _, attr_path = target.partition(":")
    if not module_name or not attr_path:
        raise HandlerLoadError(target, ValueError("expected 'module:attribute'"))

    try:
        obj: Any = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            obj = getattr(obj, attr)
        handler = adapt_handler(obj)
    except Exception as e:
        raise HandlerLoadError(target, e) from e

    logger.info(f"Loaded handler {target} as {handler!r}")
    return handler
