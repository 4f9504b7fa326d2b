import copy

import pytest

from bridge.runtime.config import RuntimeConfig
from bridge.runtime.core.mode import running_in_lambda

RUNTIME_API = "127.0.0.1:9001"
RUNTIME_BASE = f"http://{RUNTIME_API}/2018-06-01/runtime"

REST_V1_EVENT = {
    "resource": "/{proxy+}",
    "path": "/hello",
    "httpMethod": "GET",
    "headers": {"Host": "example.execute-api.us-east-1.amazonaws.com", "Accept": "text/html"},
    "multiValueHeaders": {
        "Host": ["example.execute-api.us-east-1.amazonaws.com"],
        "Accept": ["text/html"],
    },
    "queryStringParameters": {"name": "a"},
    "multiValueQueryStringParameters": {"name": ["a", "b"]},
    "pathParameters": {"proxy": "hello"},
    "stageVariables": None,
    "requestContext": {
        "resourcePath": "/{proxy+}",
        "httpMethod": "GET",
        "stage": "prod",
        "requestId": "c6af9ac6-7b61-11e6-9a41-93e8deadbeef",
        "domainName": "example.execute-api.us-east-1.amazonaws.com",
        "identity": {"sourceIp": "203.0.113.7", "userAgent": "curl/8.4.0"},
    },
    "body": None,
    "isBase64Encoded": False,
}

HTTP_V2_EVENT = {
    "version": "2.0",
    "routeKey": "$default",
    "rawPath": "/x",
    "rawQueryString": "q=1&q=2&z=%2Fslash",
    "cookies": ["a=1", "b=2"],
    "headers": {
        "host": "abc123.execute-api.us-east-1.amazonaws.com",
        "accept": "text/html,application/json",
        "x-forwarded-proto": "https",
    },
    "requestContext": {
        "accountId": "123456789012",
        "apiId": "abc123",
        "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        "http": {
            "method": "POST",
            "path": "/x",
            "protocol": "HTTP/1.1",
            "sourceIp": "198.51.100.1",
            "userAgent": "agent",
        },
        "requestId": "JKJaXmPLvHcESHA=",
        "stage": "$default",
    },
    "body": "hello",
    "isBase64Encoded": False,
}


@pytest.fixture
def rest_v1_event():
    return copy.deepcopy(REST_V1_EVENT)


@pytest.fixture
def http_v2_event():
    return copy.deepcopy(HTTP_V2_EVENT)


@pytest.fixture
def runtime_config():
    return RuntimeConfig(
        _env_file=None,
        AWS_LAMBDA_RUNTIME_API=RUNTIME_API,
        RUNTIME_MAX_RETRIES=2,
        RUNTIME_RETRY_BACKOFF_BASE=0.001,
        RUNTIME_RETRY_BACKOFF_MAX=0.002,
    )


@pytest.fixture
def fresh_mode():
    """The mode flag is cached per process; reset it around tests that change the env."""
    running_in_lambda.cache_clear()
    yield running_in_lambda
    running_in_lambda.cache_clear()


@pytest.fixture
def runtime_base():
    return RUNTIME_BASE
