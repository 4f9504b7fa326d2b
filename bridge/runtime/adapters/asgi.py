"""
ASGI adapter.

Runs an ASGI 3 application (FastAPI, Starlette, ...) as a Handler: one
CanonicalRequest becomes one HTTP scope, and the messages the app sends back
are collected into a CanonicalResponse. Lifespan events are not sent.
"""

import asyncio
import logging
from typing import List, Optional, Tuple
from urllib.parse import quote, unquote, urlencode

from starlette.types import ASGIApp, Message, Scope

from bridge.runtime.models.canonical import CanonicalRequest, CanonicalResponse, HeaderList
from bridge.runtime.models.invocation import InvocationContext
from bridge.runtime.services.handler import Handler

logger = logging.getLogger("bridge.adapters.asgi")


def _encode_header_value(value: str) -> bytes:
    try:
        return value.encode("latin-1")
    except UnicodeEncodeError:
        return value.encode("utf-8")


def build_scope(request: CanonicalRequest, context: InvocationContext) -> Scope:
    """
    Build an ASGI HTTP scope from a CanonicalRequest.
    """
    headers: List[Tuple[bytes, bytes]] = [
        (name.lower().encode("latin-1"), _encode_header_value(value))
        for name, value in request.headers
    ]

    path = unquote(request.path) if request.path_encoded else request.path
    raw_path = request.path.encode("utf-8") if request.path_encoded else None

    scheme = request.get_header("x-forwarded-proto", "https")
    host = request.get_header("host") or request.source.domain_name or "localhost"
    default_port = 443 if scheme == "https" else 80
    port = int(request.get_header("x-forwarded-port") or default_port)

    if request.raw_query is not None:
        query_string = request.raw_query.encode("utf-8")
    else:
        query_string = urlencode(request.query, quote_via=quote).encode("ascii")

    client: Optional[Tuple[str, int]] = None
    if request.source.source_ip:
        client = (request.source.source_ip, 0)

    return {
        "type": "http",
        "asgi": {"version": "3.0", "spec_version": "2.3"},
        "http_version": "1.1",
        "method": request.method.upper(),
        "scheme": scheme,
        "path": path,
        "raw_path": raw_path,
        "root_path": "",
        "query_string": query_string,
        "headers": headers,
        "client": client,
        "server": (host.split(":", 1)[0], port),
        "aws.context": context,
        "aws.source": request.source,
    }


class AsgiHandler(Handler):
    def __init__(self, app: ASGIApp):
        self.app = app

    async def handle(
        self, request: CanonicalRequest, context: InvocationContext
    ) -> CanonicalResponse:
        scope = build_scope(request, context)
        response_complete = asyncio.Event()
        body_delivered = False

        status_code: Optional[int] = None
        headers: HeaderList = []
        chunks: List[bytes] = []

        async def receive() -> Message:
            nonlocal body_delivered
            if not body_delivered:
                body_delivered = True
                return {"type": "http.request", "body": request.body, "more_body": False}
            # Disconnect only once the response is complete, so streaming responses
            # listening for it are not cut short.
            await response_complete.wait()
            return {"type": "http.disconnect"}

        async def send(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers.extend(
                    (name.decode("latin-1"), value.decode("latin-1"))
                    for name, value in message.get("headers", [])
                )
            elif message["type"] == "http.response.body":
                chunks.append(message.get("body", b""))
                if not message.get("more_body", False):
                    response_complete.set()

        try:
            await self.app(scope, receive, send)
        finally:
            response_complete.set()

        if status_code is None:
            raise RuntimeError("ASGI application returned without starting a response")

        logger.debug(f"ASGI app answered {request.method} {scope['path']} with {status_code}")
        return CanonicalResponse(status_code=status_code, headers=headers, body=b"".join(chunks))

    def __repr__(self) -> str:
        return f"AsgiHandler({self.app!r})"
