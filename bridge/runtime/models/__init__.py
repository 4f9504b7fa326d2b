"""
Data model definitions package.

Aggregates Pydantic models for use in other modules.
"""

from .aws_v1 import APIGatewayProxyEvent, APIGatewayProxyResponse
from .aws_v2 import HttpApiEventV2, HttpApiResponseV2
from .canonical import CanonicalRequest, CanonicalResponse, RequestSource
from .invocation import Invocation, InvocationContext

__all__ = [
    "APIGatewayProxyEvent",
    "APIGatewayProxyResponse",
    "HttpApiEventV2",
    "HttpApiResponseV2",
    "CanonicalRequest",
    "CanonicalResponse",
    "RequestSource",
    "Invocation",
    "InvocationContext",
]
