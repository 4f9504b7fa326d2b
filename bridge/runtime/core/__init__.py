"""
Core logic package.

Provides the event/response translation layer and its error taxonomy.
"""

from .exceptions import (
    BridgeError,
    DecodeError,
    EncodingError,
    HandlerError,
    HandlerLoadError,
    InvocationError,
    RuntimeTransportError,
    UnsupportedFormat,
)
from .format_detector import SchemaVariant, detect_format
from .mode import running_in_lambda
from .request_decoder import decode_request
from .response_encoder import ResponseEncoderRegistry

__all__ = [
    "BridgeError",
    "DecodeError",
    "EncodingError",
    "HandlerError",
    "HandlerLoadError",
    "InvocationError",
    "RuntimeTransportError",
    "UnsupportedFormat",
    "SchemaVariant",
    "detect_format",
    "running_in_lambda",
    "decode_request",
    "ResponseEncoderRegistry",
]
