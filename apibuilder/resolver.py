"""
Response resolution.

Combines the settled outcome of a handler, the static configuration of its
route, and an optional ``ApiResponse`` built by the handler into a single
``ResolvedResponse``.

Precedence, highest first:

* status code: ``ApiResponse.http_code``, the route's code, then 200 / 500
* content type: a Content-Type header on the ``ApiResponse``, a fixed
  Content-Type header on the route, the route's ``content_type``, then
  ``application/json``
* headers: the ``ApiResponse`` headers over the route's fixed headers
"""

import logging
from typing import Any, Dict, Optional

from .content_renderers import DEFAULT_CONTENT_TYPE, BodySerializer, to_text
from .exceptions import SerializationError
from .headers import AllowedHeaders, FixedHeaders, materialize_headers
from .models import ApiResponse, Failure, MultiValueHeaders, Outcome, OutcomeKind, ResolvedResponse, Success
from .route_config import DEFAULT_ROUTE_CONFIG, ResponseSpec, RouteConfig

logger = logging.getLogger(__name__)

DEFAULT_STATUS_CODES = {
    OutcomeKind.SUCCESS: 200,
    OutcomeKind.ERROR: 500,
}

INTERNAL_ERROR_BODY = '{"errorMessage": "Internal server error"}'


def is_redirect(status_code: int) -> bool:
    return 300 <= status_code <= 399


class ResponseResolver:
    """Resolves handler outcomes into responses.

    The resolver holds no per-request state; one instance serves every request
    of an application.
    """

    def __init__(self, serializer: Optional[BodySerializer] = None):
        self.serializer = serializer or BodySerializer()

    def resolve(
        self,
        outcome: Outcome,
        route_config: Optional[RouteConfig] = None,
        dynamic: Any = None,
    ) -> ResolvedResponse:
        """Resolve an outcome into a complete response.

        Never raises: a value that cannot be serialized is reported through the
        route's error branch instead.

        Args:
            outcome: The settled handler outcome
            route_config: Static configuration of the route (defaults apply when None)
            dynamic: An ApiResponse produced by the handler, or a plain value
                that replaces the body

        Returns:
            ResolvedResponse
        """
        route_config = route_config or DEFAULT_ROUTE_CONFIG
        try:
            return self._resolve(outcome, route_config, dynamic)
        except Exception as e:
            if isinstance(e, SerializationError):
                logger.warning(f"Could not serialize {outcome.kind.value} response: {e}")
            else:
                logger.error(f"Unexpected error resolving {outcome.kind.value} response: {e}", exc_info=True)
            return self._resolve_secondary_failure(route_config, e)

    def _resolve_secondary_failure(self, route_config: RouteConfig, cause: Exception) -> ResolvedResponse:
        message = cause.message if isinstance(cause, SerializationError) else "Response could not be generated"
        try:
            return self._resolve(Failure(SerializationError(message)), route_config, None)
        except Exception as e:
            logger.error(f"Error branch failed while reporting a secondary failure: {e}", exc_info=True)
            return ResolvedResponse(
                status_code=500,
                content_type=DEFAULT_CONTENT_TYPE,
                headers={},
                body=INTERNAL_ERROR_BODY,
            )

    def _resolve(self, outcome: Outcome, route_config: RouteConfig, dynamic: Any) -> ResolvedResponse:
        kind = outcome.kind
        spec = route_config.branch(kind)

        structured = dynamic if isinstance(dynamic, ApiResponse) else None
        if structured is not None:
            raw_value = structured.body
        elif dynamic is not None:
            raw_value = dynamic
        else:
            raw_value = outcome.value if isinstance(outcome, Success) else outcome.error

        status_code = self._status_code(kind, spec, structured)
        content_type = self._content_type(spec, structured)
        headers = self._headers(spec, structured)

        if kind == OutcomeKind.SUCCESS and is_redirect(status_code):
            body = ""
            if raw_value is not None:
                headers["Location"] = to_text(raw_value)
        else:
            body = self.serializer.serialize(raw_value, content_type, kind)

        logger.debug(f"Resolved {kind.value} outcome to {status_code} {content_type}")
        return ResolvedResponse(
            status_code=status_code,
            content_type=content_type,
            headers=headers.to_dict(),
            body=body,
        )

    def _status_code(self, kind: OutcomeKind, spec: ResponseSpec, structured: Optional[ApiResponse]) -> int:
        if structured is not None and structured.http_code is not None:
            return int(structured.http_code)
        if spec.code is not None:
            return spec.code
        return DEFAULT_STATUS_CODES[kind]

    def _content_type(self, spec: ResponseSpec, structured: Optional[ApiResponse]) -> str:
        if structured is not None:
            dynamic_type = MultiValueHeaders(structured.headers).get("Content-Type")
            if dynamic_type:
                return dynamic_type
        if isinstance(spec.headers, FixedHeaders):
            static_type = MultiValueHeaders(spec.headers.values).get("Content-Type")
            if static_type:
                return static_type
        return spec.content_type

    def _headers(self, spec: ResponseSpec, structured: Optional[ApiResponse]) -> MultiValueHeaders:
        runtime: Dict[str, str] = structured.headers if structured is not None else {}
        headers = MultiValueHeaders(materialize_headers(spec.headers, runtime))
        headers.discard("Content-Type")

        # Location is reserved for the resolver; keep the one the handler set
        # unless the route only allows other names
        location = MultiValueHeaders(runtime).get("Location")
        if isinstance(spec.headers, AllowedHeaders) and not any(
            name.lower() == "location" for name in spec.headers.names
        ):
            location = None
        if location is not None:
            headers["Location"] = str(location)
        return headers


_default_resolver = ResponseResolver()


def resolve(outcome: Outcome, route_config: Optional[RouteConfig] = None, dynamic: Any = None) -> ResolvedResponse:
    """Resolve an outcome with the default renderers."""
    return _default_resolver.resolve(outcome, route_config, dynamic)
