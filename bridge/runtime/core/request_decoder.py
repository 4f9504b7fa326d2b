"""
Where: bridge/runtime/core/request_decoder.py
What: Decode a classified invocation event into a CanonicalRequest.
Why: Each schema spreads the same request over different fields; handlers see one shape.
"""

import base64
import binascii
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from urllib.parse import unquote

from pydantic import ValidationError

from bridge.runtime.models.aws_v1 import APIGatewayProxyEvent
from bridge.runtime.models.aws_v2 import HttpApiEventV2
from bridge.runtime.models.canonical import CanonicalRequest, HeaderList, RequestSource

from .exceptions import DecodeError
from .format_detector import SchemaVariant
from .headers import split_header_value

logger = logging.getLogger("bridge.request_decoder")


def decode_body(body: Optional[str], is_base64: bool) -> bytes:
    """
    Turn an event body into raw bytes.

    Raises:
        DecodeError: the body claims base64 but is not valid base64
    """
    if body is None:
        return b""
    if is_base64:
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"Invalid base64-encoded body: {e}") from e
    try:
        return body.encode("utf-8")
    except UnicodeEncodeError as e:
        raise DecodeError(f"Body is not encodable as UTF-8: {e}") from e


def merge_single_and_multi(
    single: Optional[Dict[str, str]],
    multi: Optional[Dict[str, List[str]]],
    case_insensitive: bool = False,
) -> HeaderList:
    """
    Rebuild one ordered multimap from the REST API's dual representation.

    The multi-value map is authoritative; the single-value map only fills in
    keys the multi-value map lacks.
    """
    multi = multi or {}
    pairs: HeaderList = []
    seen = set()
    for key, values in multi.items():
        if not values:
            continue
        seen.add(key.lower() if case_insensitive else key)
        pairs.extend((key, value) for value in values)

    for key, value in (single or {}).items():
        if (key.lower() if case_insensitive else key) not in seen:
            pairs.append((key, value))
    return pairs


def parse_raw_query(raw_query: str) -> HeaderList:
    """Split a raw query string on `&`/`=`, keeping order and duplicates."""
    pairs: HeaderList = []
    for segment in raw_query.split("&"):
        if not segment:
            continue
        key, _, value = segment.partition("=")
        pairs.append((unquote(key), unquote(value)))
    return pairs


class RequestDecoder(ABC):
    @abstractmethod
    def decode(self, event: Dict[str, Any]) -> CanonicalRequest:
        """
        Build a CanonicalRequest from a classified event.
        """
        pass


class RestApiV1Decoder(RequestDecoder):
    """API Gateway V1 (REST API) proxy event decoder."""

    def decode(self, event: Dict[str, Any]) -> CanonicalRequest:
        try:
            model = APIGatewayProxyEvent.model_validate(event)
        except ValidationError as e:
            raise DecodeError(f"Invalid REST API event: {e}") from e

        query = merge_single_and_multi(
            model.queryStringParameters, model.multiValueQueryStringParameters
        )
        headers = merge_single_and_multi(
            model.headers, model.multiValueHeaders, case_insensitive=True
        )

        ctx = model.requestContext
        source = RequestSource(
            source_ip=ctx.identity.sourceIp,
            user_agent=ctx.identity.userAgent,
            stage=ctx.stage,
            request_id=ctx.requestId,
            domain_name=ctx.domainName,
            path_parameters=model.pathParameters or {},
            stage_variables=model.stageVariables or {},
            request_context=event.get("requestContext") or {},
        )

        # The path is already URL-decoded by the gateway.
        return CanonicalRequest(
            method=model.httpMethod,
            path=model.path,
            query=query,
            headers=headers,
            body=decode_body(model.body, model.isBase64Encoded),
            source=source,
        )


class HttpApiV2Decoder(RequestDecoder):
    """HTTP API payload format 2.0 event decoder."""

    def decode(self, event: Dict[str, Any]) -> CanonicalRequest:
        try:
            model = HttpApiEventV2.model_validate(event)
        except ValidationError as e:
            raise DecodeError(f"Invalid HTTP API 2.0 event: {e}") from e

        headers: HeaderList = []
        existing_cookies: List[str] = []
        for name, value in (model.headers or {}).items():
            if name.lower() == "cookie":
                existing_cookies.append(value)
                continue
            headers.extend((name, member) for member in split_header_value(name, value))

        # Cookies arrive as their own array; fold them back into one Cookie header.
        cookies = existing_cookies + list(model.cookies or [])
        if cookies:
            headers.append(("cookie", "; ".join(cookies)))

        ctx = model.requestContext
        source = RequestSource(
            source_ip=ctx.http.sourceIp,
            user_agent=ctx.http.userAgent,
            stage=ctx.stage,
            request_id=ctx.requestId,
            domain_name=ctx.domainName,
            path_parameters=model.pathParameters or {},
            stage_variables=model.stageVariables or {},
            request_context=event.get("requestContext") or {},
        )

        # rawPath is passed through without re-decoding.
        return CanonicalRequest(
            method=ctx.http.method,
            path=model.rawPath,
            path_encoded=True,
            raw_query=model.rawQueryString,
            query=parse_raw_query(model.rawQueryString),
            headers=headers,
            body=decode_body(model.body, model.isBase64Encoded),
            source=source,
        )


_DECODERS: Dict[SchemaVariant, RequestDecoder] = {
    SchemaVariant.REST_API_V1: RestApiV1Decoder(),
    SchemaVariant.HTTP_API_V2: HttpApiV2Decoder(),
}


def decode_request(event: Dict[str, Any], variant: SchemaVariant) -> CanonicalRequest:
    """
    Decode a classified event.

    Raises:
        DecodeError: malformed body encoding or structurally invalid fields
    """
    request = _DECODERS[variant].decode(event)
    logger.debug(
        f"Decoded {variant.value} request: {request.method} {request.path}",
        extra={"variant": variant.value, "body_size": len(request.body)},
    )
    return request
