# bridge/runtime/models/aws_v2.py

"""
Pydantic models for AWS API Gateway HTTP API payload format version 2.0.

Reference: https://docs.aws.amazon.com/apigateway/latest/developerguide/http-api-develop-integrations-lambda.html
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class HttpApiHttpContext(BaseModel):
    """requestContext.http object."""

    method: str
    path: Optional[str] = None
    protocol: Optional[str] = None
    sourceIp: Optional[str] = None
    userAgent: Optional[str] = None


class HttpApiRequestContext(BaseModel):
    """HTTP API Request Context object."""

    http: HttpApiHttpContext
    requestId: Optional[str] = None
    stage: Optional[str] = None
    domainName: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class HttpApiEventV2(BaseModel):
    """HTTP API (payload format 2.0) Event Structure."""

    version: str
    routeKey: Optional[str] = None
    rawPath: str
    rawQueryString: str = ""
    cookies: Optional[List[str]] = None
    headers: Optional[Dict[str, str]] = None
    pathParameters: Optional[Dict[str, str]] = None
    stageVariables: Optional[Dict[str, str]] = None
    requestContext: HttpApiRequestContext
    body: Optional[str] = None
    isBase64Encoded: bool = False


class HttpApiResponseV2(BaseModel):
    """HTTP API (payload format 2.0) Response Structure."""

    statusCode: int
    headers: Dict[str, str]
    cookies: List[str] = Field(default_factory=list)
    body: str
    isBase64Encoded: bool

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump()
