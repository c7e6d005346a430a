"""
Shared pytest fixtures.
"""

import json

import pytest

from apibuilder import ApiBuilder, ResponseResolver


@pytest.fixture
def api(monkeypatch):
    """An ApiBuilder unaffected by APIBUILDER_* variables in the environment."""
    monkeypatch.delenv("APIBUILDER_LOG_LEVEL", raising=False)
    monkeypatch.delenv("APIBUILDER_EXPOSE_ERROR_TYPE", raising=False)
    return ApiBuilder()


@pytest.fixture
def resolver():
    return ResponseResolver()


@pytest.fixture
def proxy_event():
    """Factory for API Gateway REST (v1) proxy events."""

    def make_event(method="GET", path="/", headers=None, body=None, query=None, is_base64=False):
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        return {
            "resource": path,
            "path": path,
            "httpMethod": method,
            "headers": headers,
            "multiValueHeaders": None,
            "queryStringParameters": query,
            "multiValueQueryStringParameters": None,
            "pathParameters": None,
            "stageVariables": {"lambdaVersion": "latest"},
            "requestContext": {"stage": "latest", "requestId": "req-123"},
            "body": body,
            "isBase64Encoded": is_base64,
        }

    return make_event
