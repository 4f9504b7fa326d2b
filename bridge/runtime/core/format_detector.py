"""
Where: bridge/runtime/core/format_detector.py
What: Classify a raw invocation event into a supported schema variant.
Why: An unrecognized shape must fail loudly; a wrong guess decodes a corrupt request.
"""

import logging
from enum import Enum
from typing import Any

from .exceptions import UnsupportedFormat

logger = logging.getLogger("bridge.format_detector")

# REST API proxy events carry each map twice: single-value and multi-value.
_REST_DUAL_FIELDS = {"multiValueHeaders", "multiValueQueryStringParameters"}


class SchemaVariant(str, Enum):
    REST_API_V1 = "RestApiV1"
    HTTP_API_V2 = "HttpApiV2"


def detect_format(event: Any) -> SchemaVariant:
    """
    Decide which schema produced `event`.

    Rules are applied in order:
      1. version "2.0" -> HttpApiV2
      2. requestContext.elb present -> rejected (Application Load Balancer)
      3. httpMethod plus a dual single/multi-value map -> RestApiV1
      4. anything else (including version "1.0") -> rejected

    Raises:
        UnsupportedFormat: the event is not one of the supported variants
    """
    if not isinstance(event, dict):
        raise UnsupportedFormat(f"event must be a JSON object, got {type(event).__name__}")

    version = event.get("version")
    if version == "2.0":
        return SchemaVariant.HTTP_API_V2

    request_context = event.get("requestContext")
    if isinstance(request_context, dict) and "elb" in request_context:
        raise UnsupportedFormat("Application Load Balancer events are not supported")

    if version is None and "httpMethod" in event and _REST_DUAL_FIELDS & event.keys():
        return SchemaVariant.REST_API_V1

    if version is not None:
        raise UnsupportedFormat(f"payload format version {version!r} is not supported")

    logger.debug("Unrecognized event keys", extra={"event_keys": sorted(event)[:20]})
    raise UnsupportedFormat("event is neither a REST API nor an HTTP API 2.0 proxy event")
