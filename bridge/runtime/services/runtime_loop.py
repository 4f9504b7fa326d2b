"""
Runtime Loop

Polls the Runtime API for invocations and drives each one through
detect -> decode -> handle -> encode -> report, strictly one at a time.

Invocation-scoped failures are reported and the loop continues; a
RuntimeTransportError propagates out of `run()` so the process can exit and
the host can replace the instance.
"""

import asyncio
import logging
import os
from typing import Any, Dict, Optional

from bridge.common.core.request_context import (
    clear_request_context,
    set_request_id,
    set_trace_id,
)
from bridge.runtime.core.exceptions import EncodingError, HandlerError, InvocationError
from bridge.runtime.core.format_detector import SchemaVariant, detect_format
from bridge.runtime.core.request_decoder import decode_request
from bridge.runtime.core.response_encoder import ResponseEncoderRegistry
from bridge.runtime.models.canonical import CanonicalResponse
from bridge.runtime.models.invocation import Invocation

from .handler import Handler
from .runtime_client import RuntimeApiClient

logger = logging.getLogger("bridge.runtime_loop")

# Read by X-Ray aware SDKs, as in the managed runtimes.
TRACE_ENV = "_X_AMZN_TRACE_ID"


class RuntimeLoop:
    """
    States: Idle -> Polling -> Decoding -> Invoking -> Encoding -> Reporting -> Idle.
    """

    def __init__(
        self,
        runtime_client: RuntimeApiClient,
        handler: Handler,
        encoder: ResponseEncoderRegistry,
    ):
        self.runtime_client = runtime_client
        self.handler = handler
        self.encoder = encoder
        self.state = "IDLE"

    async def run(self, max_invocations: Optional[int] = None) -> None:
        """
        Process invocations until the host terminates the process.

        Args:
            max_invocations: stop after this many invocations (None = forever)

        Raises:
            RuntimeTransportError: the Runtime API could not be reached
        """
        handled = 0
        logger.info(f"Runtime loop started with handler {self.handler!r}")
        while max_invocations is None or handled < max_invocations:
            self.state = "POLLING"
            invocation = await self.runtime_client.next_invocation()
            await self.process(invocation)
            handled += 1

    async def process(self, invocation: Invocation) -> None:
        """Handle one invocation and report its outcome."""
        self._enter(invocation)
        try:
            try:
                payload = await self._invoke(invocation)
            except InvocationError as e:
                await self._report_error(invocation, e)
            except Exception as e:
                logger.exception(f"Unexpected error in runtime loop: {e}")
                error = InvocationError(f"Internal Processing Error: {e}")
                error.__cause__ = e
                await self._report_error(invocation, error)
            else:
                self.state = "REPORTING"
                await self.runtime_client.post_response(invocation.request_id, payload)
                logger.info(
                    "Invocation completed",
                    extra={**invocation.log_extra(), "status_code": payload.get("statusCode")},
                )
        finally:
            self._leave()

    async def _invoke(self, invocation: Invocation) -> Dict[str, Any]:
        self.state = "DECODING"
        variant: SchemaVariant = detect_format(invocation.event)
        request = decode_request(invocation.event, variant)

        self.state = "INVOKING"
        try:
            response = await self.handler.handle(request, invocation.context)
        except asyncio.CancelledError as e:
            # Cancellation raised inside the handler (e.g. a leaked cancel scope) is a
            # handler failure; only cancellation of the loop task itself propagates.
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            raise HandlerError(e) from e
        except Exception as e:
            raise HandlerError(e) from e

        self.state = "ENCODING"
        if not isinstance(response, CanonicalResponse):
            raise EncodingError(
                f"Handler returned {type(response).__name__}, expected CanonicalResponse"
            )
        return self.encoder.encode(response, variant)

    async def _report_error(self, invocation: Invocation, error: InvocationError) -> None:
        logger.error(
            f"Invocation failed: {error}",
            exc_info=isinstance(error, HandlerError),
            extra={**invocation.log_extra(), "error_type": error.error_type},
        )
        self.state = "REPORTING"
        await self.runtime_client.post_error(invocation.request_id, error)

    def _enter(self, invocation: Invocation) -> None:
        set_request_id(invocation.request_id)
        trace_id = invocation.context.trace_id
        if trace_id:
            set_trace_id(trace_id)
            os.environ[TRACE_ENV] = trace_id

    def _leave(self) -> None:
        clear_request_context()
        os.environ.pop(TRACE_ENV, None)
        self.state = "IDLE"
