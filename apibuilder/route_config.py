"""
Static response configuration attached to a route at registration time.

Each route carries one ``ResponseSpec`` per outcome kind. A spec may be given
as a bare status code or as a structured mapping::

    @api.post("/orders", success=201, error={"code": 403, "contentType": "text/plain"})

Both forms are normalised into ``ResponseSpec`` once, when the route is
registered, so request handling never has to inspect configuration shapes.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .content_renderers import DEFAULT_CONTENT_TYPE
from .exceptions import ConfigurationError
from .headers import AllowedHeaders, FixedHeaders, normalize_header_declaration
from .models import OutcomeKind

logger = logging.getLogger(__name__)


class ResponseSpec(BaseModel):
    """How one outcome kind of a route is rendered."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    code: Optional[int] = Field(None, ge=100, le=599, description="Status code, or None for the default")
    content_type: str = Field(DEFAULT_CONTENT_TYPE, alias="contentType", min_length=1)
    headers: Optional[Union[FixedHeaders, AllowedHeaders]] = None

    @field_validator("headers", mode="before")
    @classmethod
    def _normalize_headers(cls, value: Any) -> Any:
        return normalize_header_declaration(value)

    def describe(self) -> Dict[str, Any]:
        """Plain representation published to the deployment collaborator."""
        description: Dict[str, Any] = {"contentType": self.content_type}
        if self.code is not None:
            description["code"] = self.code
        if isinstance(self.headers, FixedHeaders):
            description["headers"] = dict(self.headers.values)
        elif isinstance(self.headers, AllowedHeaders):
            description["headers"] = list(self.headers.names)
        return description


def normalize_response_spec(declaration: Any) -> Union[ResponseSpec, Dict[str, Any]]:
    """Normalise a bare code or structured mapping.

    Codes and mappings are returned as dicts for pydantic to validate;
    anything else is rejected here.
    """
    if declaration is None:
        return ResponseSpec()
    if isinstance(declaration, ResponseSpec):
        return declaration
    if isinstance(declaration, bool):
        raise ConfigurationError(f"Status code must be an integer, got {declaration!r}")
    if isinstance(declaration, int):
        return {"code": declaration}
    if isinstance(declaration, Mapping):
        return dict(declaration)
    raise ConfigurationError(
        f"Response configuration must be a status code or a mapping, got {type(declaration).__name__}"
    )


class RouteConfig(BaseModel):
    """Complete static configuration of a route."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    success: ResponseSpec = Field(default_factory=ResponseSpec)
    error: ResponseSpec = Field(default_factory=ResponseSpec)
    api_key_required: bool = Field(False, alias="apiKeyRequired")

    @field_validator("success", "error", mode="before")
    @classmethod
    def _normalize_spec(cls, value: Any) -> Any:
        return normalize_response_spec(value)

    @classmethod
    def build(cls, success: Any = None, error: Any = None, api_key_required: bool = False) -> "RouteConfig":
        """Validate and normalise a route configuration.

        Raises:
            ConfigurationError: If any part of the configuration is invalid
        """
        try:
            return cls(success=success, error=error, api_key_required=api_key_required)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid route configuration: {e}", original_exception=e) from e

    @classmethod
    def from_options(cls, options: Optional[Mapping]) -> "RouteConfig":
        """Validate an options mapping such as ``{"success": 201, "apiKeyRequired": True}``."""
        if options is None:
            return DEFAULT_ROUTE_CONFIG
        if isinstance(options, RouteConfig):
            return options
        try:
            return cls.model_validate(dict(options))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid route configuration: {e}", original_exception=e) from e

    def branch(self, kind: OutcomeKind) -> ResponseSpec:
        """The ResponseSpec that applies to an outcome kind."""
        if kind == OutcomeKind.ERROR:
            return self.error
        return self.success

    def describe(self) -> Dict[str, Any]:
        description: Dict[str, Any] = {
            "success": self.success.describe(),
            "error": self.error.describe(),
        }
        if self.api_key_required:
            description["apiKeyRequired"] = True
        return description


DEFAULT_ROUTE_CONFIG = RouteConfig()

# Used for requests that match no registered route
NOT_FOUND_ROUTE_CONFIG = RouteConfig(error=404)
