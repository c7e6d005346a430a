"""
Main application class for the API builder.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .content_renderers import BodySerializer, ContentRenderer
from .exceptions import ConfigurationError, RouteNotFoundError
from .gateway_responses import GatewayResponseEntry, GatewayResponseRegistry, GatewayResponseType
from .headers import FixedHeaders
from .invocation import accepts_request, invoke_handler
from .models import Failure, HTTPMethod, MultiValueHeaders, Request, ResolvedResponse
from .resolver import ResponseResolver
from .route_config import NOT_FOUND_ROUTE_CONFIG, RouteConfig
from .settings import Settings, configure_logging

# Set up logger for this module
logger = logging.getLogger(__name__)

API_CONFIG_VERSION = 4


def normalize_path(path: str) -> str:
    """Ensure a single leading slash and no trailing slash (except for the root)."""
    return "/" + path.strip("/")


class RouteHandler:
    """Represents a registered route, its handler and its static configuration."""

    def __init__(self, method: HTTPMethod, path: str, handler: Callable, config: RouteConfig):
        self.method = method
        self.path = path
        self.handler = handler
        self.config = config
        try:
            self.path_pattern = re.compile(self._compile_path_pattern(path))
        except re.error as e:
            raise ConfigurationError(f"Invalid path template {path!r}: {e}", original_exception=e) from e
        self.pass_request = accepts_request(handler)

    def _compile_path_pattern(self, path: str) -> str:
        """Convert path with {param} (or greedy {param+}) syntax to a regular expression."""
        parts = []
        position = 0
        for match in re.finditer(r"\{(\w+)(\+?)\}", path):
            parts.append(re.escape(path[position:match.start()]))
            name, greedy = match.groups()
            parts.append(f"(?P<{name}>.+)" if greedy else f"(?P<{name}>[^/]+)")
            position = match.end()
        parts.append(re.escape(path[position:]))
        return "^" + "".join(parts) + "$"

    def match(self, path: str) -> Optional[Dict[str, str]]:
        """Return path parameters if the path matches this route."""
        match = self.path_pattern.match(path)
        if match is None:
            return None
        return match.groupdict()

    def __repr__(self):
        return f"RouteHandler({self.method.value} {self.path})"


class ApiBuilder:
    """Registers routes and resolves their responses.

    Example::

        api = ApiBuilder()

        @api.get("/greeting", success={"contentType": "text/plain"})
        def greeting(request):
            return "hi"

        @api.post("/orders", success=201, error=403)
        def create_order(request):
            return {"id": 42}

        # AWS Lambda entry point
        def handler(event, context):
            return api.proxy_router(event, context)
    """

    def __init__(self, log_level: Optional[str] = None, expose_error_type: Optional[bool] = None):
        self.settings = Settings.resolve(log_level=log_level, expose_error_type=expose_error_type)
        configure_logging(self.settings)

        self._routes: List[RouteHandler] = []
        self._serializer = BodySerializer(expose_error_type=self.settings.expose_error_type)
        self._resolver = ResponseResolver(self._serializer)
        self._gateway_responses = GatewayResponseRegistry()
        self._adapter = None

    @property
    def resolver(self) -> ResponseResolver:
        return self._resolver

    @property
    def gateway_responses(self) -> GatewayResponseRegistry:
        return self._gateway_responses

    @property
    def routes(self) -> List[RouteHandler]:
        return list(self._routes)

    def add_content_renderer(self, renderer: ContentRenderer):
        """Register a renderer, making its media type available to routes."""
        self._serializer.add_renderer(renderer)

    def route(
        self,
        method: Union[str, HTTPMethod],
        path: str,
        success: Any = None,
        error: Any = None,
        api_key_required: bool = False,
    ):
        """Register a handler for a method and path.

        Args:
            method: HTTP method, or ``ANY`` to match every method
            path: Path template, e.g. ``/users/{user_id}``
            success: Status code or mapping configuring successful responses
            error: Status code or mapping configuring error responses
            api_key_required: Published to the deployment configuration

        Raises:
            ConfigurationError: If the configuration is invalid, uses an
                unregistered content type, or the route already exists
        """
        try:
            http_method = HTTPMethod(method.upper() if isinstance(method, str) else method)
        except ValueError as e:
            raise ConfigurationError(f"Unsupported HTTP method: {method!r}", original_exception=e) from e

        config = RouteConfig.build(success=success, error=error, api_key_required=api_key_required)
        self._check_content_types(config, path)

        def decorator(func: Callable):
            self._add_route(RouteHandler(http_method, normalize_path(path), func, config))
            return func

        return decorator

    def get(self, path: str, **options):
        return self.route(HTTPMethod.GET, path, **options)

    def post(self, path: str, **options):
        return self.route(HTTPMethod.POST, path, **options)

    def put(self, path: str, **options):
        return self.route(HTTPMethod.PUT, path, **options)

    def delete(self, path: str, **options):
        return self.route(HTTPMethod.DELETE, path, **options)

    def patch(self, path: str, **options):
        return self.route(HTTPMethod.PATCH, path, **options)

    def head(self, path: str, **options):
        return self.route(HTTPMethod.HEAD, path, **options)

    def options(self, path: str, **options):
        return self.route(HTTPMethod.OPTIONS, path, **options)

    def any(self, path: str, **options):
        return self.route(HTTPMethod.ANY, path, **options)

    def _check_content_types(self, config: RouteConfig, path: str) -> None:
        for kind, spec in (("success", config.success), ("error", config.error)):
            content_types = [spec.content_type]
            if isinstance(spec.headers, FixedHeaders):
                header_type = MultiValueHeaders(spec.headers.values).get("Content-Type")
                if header_type:
                    content_types.append(header_type)
            for content_type in content_types:
                if not self._serializer.is_registered(content_type):
                    raise ConfigurationError(
                        f"Route {path} uses unregistered {kind} content type {content_type!r}; "
                        f"registered types are {', '.join(self._serializer.media_types)}"
                    )

    def _add_route(self, route: RouteHandler) -> None:
        for existing in self._routes:
            if existing.method == route.method and existing.path == route.path:
                raise ConfigurationError(f"Route {route.method.value} {route.path} is already registered")
        self._routes.append(route)
        logger.info(f"Registered {route.method.value} {route.path}")

    def register_gateway_response(
        self,
        response_type: Union[str, GatewayResponseType],
        status_code: Optional[int] = None,
        response_parameters: Optional[Mapping[str, str]] = None,
        response_templates: Optional[Mapping[str, str]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ) -> GatewayResponseEntry:
        """Customise a response API Gateway generates without calling the API.

        Example::

            api.register_gateway_response(
                "DEFAULT_4XX",
                status_code=411,
                headers={"x-response-claudia": "yes"},
            )
        """
        return self._gateway_responses.register(
            response_type,
            status_code=status_code,
            response_parameters=response_parameters,
            response_templates=response_templates,
            headers=headers,
        )

    def api_config(self) -> Dict[str, Any]:
        """Describe routes and gateway responses for the deployment step."""
        routes: Dict[str, Dict[str, Any]] = {}
        for route in self._routes:
            routes.setdefault(route.path, {})[route.method.value] = route.config.describe()

        config: Dict[str, Any] = {"version": API_CONFIG_VERSION, "routes": routes}
        if len(self._gateway_responses):
            config["customResponses"] = self._gateway_responses.to_native()
        return config

    def _find_route(self, method: HTTPMethod, path: str) -> Optional[Tuple[RouteHandler, Dict[str, str]]]:
        fallback = None
        for route in self._routes:
            if route.method not in (method, HTTPMethod.ANY):
                continue
            params = route.match(path)
            if params is None:
                continue
            if route.method == method:
                return route, params
            if fallback is None:
                fallback = (route, params)
        return fallback

    def execute(self, request: Request) -> ResolvedResponse:
        """Route a request, invoke its handler and resolve the response."""
        path = normalize_path(request.path)
        found = self._find_route(request.method, path)
        if found is None:
            logger.debug(f"No route for {request.method.value} {path}")
            return self._resolver.resolve(
                Failure(RouteNotFoundError(request.method.value, path)),
                NOT_FOUND_ROUTE_CONFIG,
            )

        route, params = found
        if params:
            request.path_params = {**request.path_params, **params}

        outcome, dynamic = invoke_handler(route.handler, request, pass_request=route.pass_request)
        return self._resolver.resolve(outcome, route.config, dynamic)

    def proxy_router(self, event: Dict[str, Any], context: Optional[Any] = None) -> Dict[str, Any]:
        """AWS Lambda entry point for API Gateway proxy integration events."""
        if self._adapter is None:
            from .adapters import AwsApiGatewayAdapter
            self._adapter = AwsApiGatewayAdapter(self)
        return self._adapter.handle_event(event, context)
