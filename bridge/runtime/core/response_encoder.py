"""
Where: bridge/runtime/core/response_encoder.py
What: Encode a CanonicalResponse into the response document of a schema variant.
Why: The gateway answers a malformed or incomplete response with an opaque 502,
     so every required field is always emitted and header values are checked here.
"""

import base64
import fnmatch
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from bridge.runtime.models.aws_v1 import APIGatewayProxyResponse
from bridge.runtime.models.aws_v2 import HttpApiResponseV2
from bridge.runtime.models.canonical import CanonicalResponse, HeaderList

from .exceptions import EncodingError
from .format_detector import SchemaVariant
from .headers import group_headers, is_valid_header_name, is_valid_header_value

logger = logging.getLogger("bridge.response_encoder")


class BodyCodec:
    """
    Decides whether a body travels as text or as base64.

    Text is chosen only when the Content-Type matches the allow-list and the
    body is valid UTF-8; everything else, including a missing Content-Type,
    is base64-encoded.
    """

    def __init__(self, text_content_types: Sequence[str]):
        self.patterns = [p.strip().lower() for p in text_content_types if p.strip()]

    def is_text_type(self, content_type: str) -> bool:
        media_type = content_type.split(";", 1)[0].strip().lower()
        if not media_type:
            return False
        return any(fnmatch.fnmatchcase(media_type, pattern) for pattern in self.patterns)

    def encode(self, body: bytes, content_type: str) -> Tuple[str, bool]:
        """
        Returns:
            (body text, isBase64Encoded)
        """
        if not body:
            return "", False
        if self.is_text_type(content_type):
            try:
                return body.decode("utf-8"), False
            except UnicodeDecodeError:
                logger.debug(f"Body declared as {content_type} is not UTF-8; using base64")
        return base64.b64encode(body).decode("ascii"), True


def validate_response(response: CanonicalResponse) -> None:
    """
    Raises:
        EncodingError: status code or a header cannot go on the wire
    """
    if not 100 <= response.status_code <= 599:
        raise EncodingError(f"Invalid status code: {response.status_code}")
    for name, value in response.headers:
        if not is_valid_header_name(name):
            raise EncodingError(f"Invalid header name: {name!r}")
        if not is_valid_header_value(value):
            raise EncodingError(f"Invalid characters in value of header {name!r}")


def _without(pairs: Iterable[Tuple[str, str]], name: str) -> HeaderList:
    key = name.lower()
    return [(k, v) for k, v in pairs if k.lower() != key]


class ResponseEncoder(ABC):
    def __init__(self, codec: BodyCodec):
        self.codec = codec

    @abstractmethod
    def encode(self, response: CanonicalResponse) -> Dict[str, Any]:
        pass

    def _body(self, response: CanonicalResponse) -> Tuple[str, bool]:
        return self.codec.encode(response.body, response.get_header("content-type") or "")


class RestApiV1Encoder(ResponseEncoder):
    """
    REST API proxy response.

    `headers` keeps the last value per name, `multiValueHeaders` keeps all of
    them. Set-Cookie only ever appears in `multiValueHeaders`.
    """

    def encode(self, response: CanonicalResponse) -> Dict[str, Any]:
        multi_headers = group_headers(response.headers)
        single_headers = {
            name: values[-1]
            for name, values in group_headers(_without(response.headers, "set-cookie")).items()
        }
        body, is_base64 = self._body(response)

        return APIGatewayProxyResponse(
            statusCode=response.status_code,
            headers=single_headers,
            multiValueHeaders=multi_headers,
            body=body,
            isBase64Encoded=is_base64,
        ).to_payload()


class HttpApiV2Encoder(ResponseEncoder):
    """
    HTTP API 2.0 response.

    Repeated headers are comma-joined; Set-Cookie values move to `cookies`.
    """

    def encode(self, response: CanonicalResponse) -> Dict[str, Any]:
        cookies: List[str] = response.header_values("set-cookie")
        headers = {
            name: ",".join(values)
            for name, values in group_headers(_without(response.headers, "set-cookie")).items()
        }
        body, is_base64 = self._body(response)

        return HttpApiResponseV2(
            statusCode=response.status_code,
            headers=headers,
            cookies=cookies,
            body=body,
            isBase64Encoded=is_base64,
        ).to_payload()


class ResponseEncoderRegistry:
    """Holds one encoder per variant, sharing a single BodyCodec."""

    def __init__(self, text_content_types: Sequence[str]):
        codec = BodyCodec(text_content_types)
        self._encoders: Dict[SchemaVariant, ResponseEncoder] = {
            SchemaVariant.REST_API_V1: RestApiV1Encoder(codec),
            SchemaVariant.HTTP_API_V2: HttpApiV2Encoder(codec),
        }

    def encode(self, response: CanonicalResponse, variant: SchemaVariant) -> Dict[str, Any]:
        """
        Raises:
            EncodingError: the response cannot be represented in the target schema
        """
        validate_response(response)
        return self._encoders[variant].encode(response)
