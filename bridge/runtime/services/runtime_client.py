"""
Runtime API Client

Talks to the Lambda Runtime API (the control plane of the execution environment):
polls for the next invocation and reports results, errors and init failures.

Reference: https://docs.aws.amazon.com/lambda/latest/dg/runtimes-api.html
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import httpx

from bridge.runtime.config import RuntimeConfig
from bridge.runtime.core.exceptions import BridgeError, RuntimeTransportError
from bridge.runtime.models.invocation import Invocation, InvocationContext

logger = logging.getLogger("bridge.runtime_client")

HEADER_REQUEST_ID = "Lambda-Runtime-Aws-Request-Id"
HEADER_DEADLINE_MS = "Lambda-Runtime-Deadline-Ms"
HEADER_FUNCTION_ARN = "Lambda-Runtime-Invoked-Function-Arn"
HEADER_TRACE_ID = "Lambda-Runtime-Trace-Id"
HEADER_CLIENT_CONTEXT = "Lambda-Runtime-Client-Context"
HEADER_COGNITO_IDENTITY = "Lambda-Runtime-Cognito-Identity"
HEADER_ERROR_TYPE = "Lambda-Runtime-Function-Error-Type"

# The next-invocation call blocks until work arrives; only connecting is bounded.
NEXT_INVOCATION_TIMEOUT = httpx.Timeout(None, connect=5.0)
REPORT_TIMEOUT = httpx.Timeout(30.0)


class RuntimeApiClient:
    def __init__(self, client: httpx.AsyncClient, config: RuntimeConfig):
        """
        Args:
            client: Shared httpx.AsyncClient
            config: RuntimeConfig instance
        """
        self.client = client
        self.config = config
        self.base_url = config.runtime_api_base_url

    async def next_invocation(self) -> Invocation:
        """
        Block until the Runtime API hands out the next invocation.

        Raises:
            RuntimeTransportError: the Runtime API is unreachable or answered nonsense
        """
        response = await self._request(
            "GET", f"{self.base_url}/invocation/next", timeout=NEXT_INVOCATION_TIMEOUT
        )
        if response.status_code != 200:
            raise RuntimeTransportError(
                f"Unexpected status from next invocation: {response.status_code}",
                status_code=response.status_code,
            )

        headers = response.headers
        request_id = headers.get(HEADER_REQUEST_ID)
        if not request_id:
            raise RuntimeTransportError(f"Next invocation is missing {HEADER_REQUEST_ID}")

        try:
            event = json.loads(response.content) if response.content else {}
        except json.JSONDecodeError as e:
            raise RuntimeTransportError(f"Invocation payload is not JSON: {e}") from e

        try:
            deadline_ms = int(headers.get(HEADER_DEADLINE_MS, "0"))
        except ValueError:
            logger.warning(
                f"Ignoring malformed {HEADER_DEADLINE_MS}",
                extra={"aws_request_id": request_id, "value": headers.get(HEADER_DEADLINE_MS)},
            )
            deadline_ms = 0

        context = InvocationContext(
            request_id=request_id,
            deadline_ms=deadline_ms,
            invoked_function_arn=headers.get(HEADER_FUNCTION_ARN),
            trace_id=headers.get(HEADER_TRACE_ID),
            client_context=headers.get(HEADER_CLIENT_CONTEXT),
            cognito_identity=headers.get(HEADER_COGNITO_IDENTITY),
        )
        return Invocation(context=context, event=event)

    async def post_response(self, request_id: str, payload: Dict[str, Any]) -> None:
        """Report a successful invocation result."""
        await self._report(f"{self.base_url}/invocation/{request_id}/response", payload, request_id)

    async def post_error(self, request_id: str, error: BridgeError) -> None:
        """Report an invocation failure."""
        await self._report(
            f"{self.base_url}/invocation/{request_id}/error",
            error.to_payload(),
            request_id,
            headers={HEADER_ERROR_TYPE: f"Runtime.{error.error_type}"},
        )

    async def post_init_error(self, error: BridgeError) -> None:
        """Report a failure that happened before the first invocation."""
        await self._report(
            f"{self.base_url}/init/error",
            error.to_payload(),
            None,
            headers={HEADER_ERROR_TYPE: f"Runtime.{error.error_type}"},
        )

    async def _report(
        self,
        url: str,
        payload: Dict[str, Any],
        request_id: Optional[str],
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        response = await self._request(
            "POST",
            url,
            content=json.dumps(payload).encode("utf-8"),
            headers={"Content-Type": "application/json", **(headers or {})},
            timeout=REPORT_TIMEOUT,
        )
        if response.status_code >= 400:
            # 4xx are scoped to this report (e.g. 413 payload too large); the loop goes on.
            logger.error(
                f"Runtime API rejected report with status {response.status_code}",
                extra={
                    "aws_request_id": request_id,
                    "target_url": url,
                    "status_code": response.status_code,
                    "response_body": response.text[:500],
                },
            )

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Send a request, retrying transport failures and 5xx answers.

        Raises:
            RuntimeTransportError: retries exhausted
        """
        max_retries = self.config.RUNTIME_MAX_RETRIES
        last_error = ""
        status_code: Optional[int] = None

        for attempt in range(max_retries + 1):
            if attempt:
                delay = min(
                    self.config.RUNTIME_RETRY_BACKOFF_BASE * (2 ** (attempt - 1)),
                    self.config.RUNTIME_RETRY_BACKOFF_MAX,
                )
                logger.warning(
                    f"Retrying Runtime API call in {delay:.2f}s ({attempt}/{max_retries})",
                    extra={"target_url": url, "error_detail": last_error},
                )
                await asyncio.sleep(delay)

            try:
                response = await self.client.request(method, url, **kwargs)
            except httpx.TransportError as e:
                last_error = f"{type(e).__name__}: {e}"
                status_code = None
                continue

            if response.status_code >= 500:
                last_error = f"HTTP {response.status_code}: {response.text[:200]}"
                status_code = response.status_code
                continue
            return response

        logger.error(
            "Runtime API unreachable",
            extra={"target_url": url, "error_detail": last_error, "retries": max_retries},
        )
        raise RuntimeTransportError(
            f"Runtime API call {method} {url} failed after {max_retries + 1} attempts: {last_error}",
            status_code=status_code,
        )
