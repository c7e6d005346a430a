"""
Adapters for running ApiBuilder applications on event-driven platforms.

Adapters convert between external platform formats and the internal
``Request`` / ``ResolvedResponse`` models. The adapter only writes resolved
values onto the platform's response shape; all response decisions are made by
the resolver.
"""

import base64
import binascii
import json
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional
from urllib.parse import parse_qsl

from .content_renderers import media_type_of
from .exceptions import RouteNotFoundError
from .models import Failure, HTTPMethod, MultiValueHeaders, Request, ResolvedResponse
from .route_config import NOT_FOUND_ROUTE_CONFIG

if TYPE_CHECKING:
    from .application import ApiBuilder

logger = logging.getLogger(__name__)


class Adapter(ABC):
    """
    Abstract base class for synchronous event adapters.

    Use this base class for platforms that deliver one event per invocation,
    such as AWS Lambda.
    """

    @abstractmethod
    def handle_event(self, event: Any, context: Optional[Any] = None) -> Any:
        """
        Handle an external event and return the appropriate response format.

        Args:
            event: The external event (e.g., AWS Lambda event)
            context: Optional context (e.g., AWS Lambda context)

        Returns:
            Response in the format expected by the external system
        """
        pass

    @abstractmethod
    def convert_to_request(self, event: Any, context: Optional[Any] = None) -> Request:
        """
        Convert an external event to a Request object.

        Raises:
            ValueError: If the event uses an unsupported HTTP method
        """
        pass

    @abstractmethod
    def convert_from_response(self, response: ResolvedResponse, event: Any, context: Optional[Any] = None) -> Any:
        """
        Convert a ResolvedResponse to the format expected by the external system.
        """
        pass


class AwsApiGatewayAdapter(Adapter):
    """
    Adapter for AWS API Gateway Lambda proxy integration events.

    This adapter handles events from:
    - API Gateway REST APIs (v1) - payload format 1.0
    - API Gateway HTTP APIs (v2) - payload format 2.0
    - Lambda Function URLs (v2 format)

    Version detection is automatic: v2 events carry ``version: "2.0"``.
    """

    def __init__(self, app: "ApiBuilder"):
        self.app = app

    def handle_event(self, event: Dict[str, Any], context: Optional[Any] = None) -> Dict[str, Any]:
        """
        Handle an AWS API Gateway event.

        Args:
            event: AWS API Gateway event dictionary
            context: AWS Lambda context (optional)

        Returns:
            AWS API Gateway response dictionary
        """
        try:
            request = self.convert_to_request(event, context)
        except ValueError as e:
            logger.warning(f"Rejecting event: {e}")
            method, path = self._method_and_path(event)
            response = self.app.resolver.resolve(
                Failure(RouteNotFoundError(method, path)),
                NOT_FOUND_ROUTE_CONFIG,
            )
            return self.convert_from_response(response, event, context)

        response = self.app.execute(request)
        return self.convert_from_response(response, event, context)

    def convert_to_request(self, event: Dict[str, Any], context: Optional[Any] = None) -> Request:
        """
        Convert AWS event to Request object.

        Headers are kept case-insensitive, query parameters take their first
        value, and the body is base64-decoded and parsed according to its
        Content-Type (JSON and form bodies become dicts, anything else text).
        """
        method_name, path = self._method_and_path(event)
        try:
            method = HTTPMethod(method_name.upper())
        except ValueError as e:
            raise ValueError(f"Unsupported HTTP method {method_name!r}") from e
        if method == HTTPMethod.ANY:
            raise ValueError("ANY is not a request method")

        headers = self._extract_headers_from_event(event)
        if event.get("cookies"):
            # v2 delivers cookies separately from headers
            headers.add("cookie", "; ".join(event["cookies"]))

        raw_body = self._decode_body_from_event(event)

        request_context = dict(event.get("requestContext") or {})
        if context is not None:
            request_context.setdefault("awsRequestId", getattr(context, "aws_request_id", None))

        return Request(
            method=method,
            path=path,
            headers=headers,
            body=self._parse_body(raw_body, headers.get("Content-Type")),
            raw_body=raw_body,
            query_params=self._extract_query_params_from_event(event),
            path_params=self._extract_path_params_from_event(event),
            stage_variables=dict(event.get("stageVariables") or {}),
            context=request_context,
        )

    def convert_from_response(self, response: ResolvedResponse, event: Dict[str, Any], context: Optional[Any] = None) -> Dict[str, Any]:
        """
        Convert a ResolvedResponse to the API Gateway proxy response format.

        The resolved values are written verbatim; Content-Type is added from
        ``response.content_type``.
        """
        return {
            "statusCode": response.status_code,
            "headers": dict(response.header_items()),
            "body": response.body,
            "isBase64Encoded": False,
        }

    def _method_and_path(self, event: Dict[str, Any]):
        if event.get("version") == "2.0":
            http_context = (event.get("requestContext") or {}).get("http") or {}
            return http_context.get("method", "GET"), event.get("rawPath", "/")
        return event.get("httpMethod", "GET"), event.get("path", "/")

    def _extract_headers_from_event(self, event: Dict[str, Any]) -> MultiValueHeaders:
        """
        Extract headers from AWS event.

        Prefers ``multiValueHeaders`` when present, falling back to ``headers``.
        """
        headers = MultiValueHeaders()

        if event.get("multiValueHeaders"):
            for key, values in event["multiValueHeaders"].items():
                for value in values or []:
                    if value is not None:
                        headers.add(key, str(value))
        elif event.get("headers"):
            for key, value in event["headers"].items():
                if value is not None:
                    headers.add(key, str(value))

        return headers

    def _extract_query_params_from_event(self, event: Dict[str, Any]) -> Dict[str, str]:
        """Extract query parameters, taking the first value of repeated ones."""
        if event.get("multiValueQueryStringParameters"):
            return {
                k: v[0]
                for k, v in event["multiValueQueryStringParameters"].items()
                if v and v[0] is not None
            }
        if event.get("queryStringParameters"):
            return {k: v for k, v in event["queryStringParameters"].items() if v is not None}
        return {}

    def _extract_path_params_from_event(self, event: Dict[str, Any]) -> Dict[str, str]:
        if event.get("pathParameters"):
            return {k: v for k, v in event["pathParameters"].items() if v is not None}
        return {}

    def _decode_body_from_event(self, event: Dict[str, Any]) -> Optional[str]:
        """Extract the body, decoding base64 when the event says it is encoded."""
        body = event.get("body")
        if body is None:
            return None

        if event.get("isBase64Encoded", False):
            try:
                return base64.b64decode(body).decode("utf-8")
            except (binascii.Error, UnicodeDecodeError):
                logger.warning("Body is not base64-encoded UTF-8 text, passing it through undecoded")
                return body
        return body

    def _parse_body(self, raw_body: Optional[str], content_type: Optional[str]) -> Any:
        if not raw_body:
            return raw_body

        media_type = media_type_of(content_type or "")
        if media_type == "application/json" or media_type.endswith("+json"):
            try:
                return json.loads(raw_body)
            except json.JSONDecodeError:
                logger.warning("Request body is not valid JSON, passing it through as text")
                return raw_body
        if media_type == "application/x-www-form-urlencoded":
            return dict(parse_qsl(raw_body, keep_blank_values=True))
        return raw_body
