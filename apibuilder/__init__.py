"""
Response resolution for serverless APIs behind AWS API Gateway.

Routes declare static response configuration (status codes, content types,
headers) when they are registered; handlers may return or raise an
``ApiResponse`` to override it at runtime. The resolver reconciles both into a
single response, and the gateway response registry customises the responses
API Gateway produces on its own.
"""

from http import HTTPStatus

from .adapters import Adapter, AwsApiGatewayAdapter
from .application import ApiBuilder
from .content_renderers import (
    BodySerializer,
    ContentRenderer,
    HTMLRenderer,
    JSONRenderer,
    PassThroughRenderer,
    PlainTextRenderer,
    XMLRenderer,
)
from .error_models import ErrorResponse
from .exceptions import ApiBuilderError, ConfigurationError, RouteNotFoundError, SerializationError
from .gateway_responses import GatewayResponseEntry, GatewayResponseRegistry, GatewayResponseType
from .headers import AllowedHeaders, FixedHeaders, expand_header_shortcuts, materialize_headers
from .models import ApiResponse, Failure, HTTPMethod, OutcomeKind, Request, ResolvedResponse, Success
from .resolver import ResponseResolver, resolve
from .route_config import ResponseSpec, RouteConfig
from .settings import Settings

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "ApiBuilder",
    "ApiResponse",
    "Request",
    "ResolvedResponse",
    "Success",
    "Failure",
    "OutcomeKind",
    "HTTPMethod",
    "HTTPStatus",
    "RouteConfig",
    "ResponseSpec",
    "FixedHeaders",
    "AllowedHeaders",
    "ResponseResolver",
    "resolve",
    "materialize_headers",
    "expand_header_shortcuts",
    "BodySerializer",
    "ContentRenderer",
    "JSONRenderer",
    "PlainTextRenderer",
    "HTMLRenderer",
    "XMLRenderer",
    "PassThroughRenderer",
    "ErrorResponse",
    "GatewayResponseType",
    "GatewayResponseEntry",
    "GatewayResponseRegistry",
    "ApiBuilderError",
    "ConfigurationError",
    "SerializationError",
    "RouteNotFoundError",
    "Adapter",
    "AwsApiGatewayAdapter",
    "Settings",
]
