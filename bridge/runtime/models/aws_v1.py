# bridge/runtime/models/aws_v1.py

"""
Pydantic models for AWS API Gateway v1 (REST API) proxy integration.

Reference: https://docs.aws.amazon.com/apigateway/latest/developerguide/set-up-lambda-proxy-integrations.html#api-gateway-simple-proxy-for-lambda-input-format

The event models validate what the gateway sends; the response model is
dumped with every field the gateway requires.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiGatewayIdentity(BaseModel):
    """API Gateway Identity object."""

    sourceIp: Optional[str] = None
    userAgent: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class ApiGatewayRequestContext(BaseModel):
    """API Gateway Request Context object."""

    identity: ApiGatewayIdentity = Field(default_factory=ApiGatewayIdentity)
    requestId: Optional[str] = None
    stage: Optional[str] = None
    domainName: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class APIGatewayProxyEvent(BaseModel):
    """
    AWS API Gateway Proxy Integration (v1) Event Structure

    Null maps are accepted; the gateway sends `null` when a request has no
    query string or no path parameters.
    """

    resource: Optional[str] = None
    path: str
    httpMethod: str
    headers: Optional[Dict[str, str]] = None
    multiValueHeaders: Optional[Dict[str, List[str]]] = None
    queryStringParameters: Optional[Dict[str, str]] = None
    multiValueQueryStringParameters: Optional[Dict[str, List[str]]] = None
    pathParameters: Optional[Dict[str, str]] = None
    stageVariables: Optional[Dict[str, str]] = None
    requestContext: ApiGatewayRequestContext = Field(default_factory=ApiGatewayRequestContext)
    body: Optional[str] = None
    isBase64Encoded: bool = False


class APIGatewayProxyResponse(BaseModel):
    """AWS API Gateway Proxy Integration (v1) Response Structure."""

    statusCode: int
    headers: Dict[str, str]
    multiValueHeaders: Dict[str, List[str]]
    body: str
    isBase64Encoded: bool

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump()
