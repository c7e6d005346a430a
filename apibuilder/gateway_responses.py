"""
Customisation of responses generated by API Gateway itself.

Gateway responses (missing authentication token, invalid API key, throttling
and so on) are produced by the platform before any application code runs, so
they cannot go through the response resolver. Instead they are registered
during configuration and handed to the deployment step::

    api.register_gateway_response(
        "DEFAULT_4XX",
        status_code=411,
        headers={"x-response-claudia": "yes"},
    )
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError
from .headers import expand_header_shortcuts

logger = logging.getLogger(__name__)

HEADER_PARAMETER_PREFIX = "gatewayresponse.header."


class GatewayResponseType(str, Enum):
    """Response categories API Gateway allows to be customised."""

    ACCESS_DENIED = "ACCESS_DENIED"
    API_CONFIGURATION_ERROR = "API_CONFIGURATION_ERROR"
    AUTHORIZER_CONFIGURATION_ERROR = "AUTHORIZER_CONFIGURATION_ERROR"
    AUTHORIZER_FAILURE = "AUTHORIZER_FAILURE"
    BAD_REQUEST_BODY = "BAD_REQUEST_BODY"
    BAD_REQUEST_PARAMETERS = "BAD_REQUEST_PARAMETERS"
    DEFAULT_4XX = "DEFAULT_4XX"
    DEFAULT_5XX = "DEFAULT_5XX"
    EXPIRED_TOKEN = "EXPIRED_TOKEN"
    INTEGRATION_FAILURE = "INTEGRATION_FAILURE"
    INTEGRATION_TIMEOUT = "INTEGRATION_TIMEOUT"
    INVALID_API_KEY = "INVALID_API_KEY"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    MISSING_AUTHENTICATION_TOKEN = "MISSING_AUTHENTICATION_TOKEN"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    REQUEST_TOO_LARGE = "REQUEST_TOO_LARGE"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    THROTTLED = "THROTTLED"
    UNAUTHORIZED = "UNAUTHORIZED"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    WAF_FILTERED = "WAF_FILTERED"


class GatewayResponseEntry(BaseModel):
    """A stored gateway response override, with header shortcuts already expanded."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    response_type: GatewayResponseType = Field(..., alias="responseType")
    status_code: Optional[int] = Field(None, alias="statusCode", ge=100, le=599)
    response_parameters: Dict[str, str] = Field(default_factory=dict, alias="responseParameters")
    response_templates: Dict[str, str] = Field(default_factory=dict, alias="responseTemplates")

    def to_native(self) -> Dict[str, Any]:
        """The shape API Gateway expects, omitting unset fields."""
        native: Dict[str, Any] = {}
        if self.status_code is not None:
            native["statusCode"] = self.status_code
        if self.response_parameters:
            native["responseParameters"] = dict(self.response_parameters)
        if self.response_templates:
            native["responseTemplates"] = dict(self.response_templates)
        return native


class GatewayResponseRegistry:
    """Keyed store of gateway response overrides.

    Populated while the API is configured and only read afterwards.
    """

    def __init__(self):
        self._entries: Dict[GatewayResponseType, GatewayResponseEntry] = {}

    def register(
        self,
        response_type: Union[str, GatewayResponseType],
        status_code: Optional[int] = None,
        response_parameters: Optional[Mapping[str, str]] = None,
        response_templates: Optional[Mapping[str, str]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ) -> GatewayResponseEntry:
        """Register an override for one gateway response type.

        Header shortcuts are expanded into ``gatewayresponse.header.<Name>``
        parameters. Parameters passed directly win over expanded shortcuts.
        Registering the same type again replaces the earlier entry.

        Raises:
            ConfigurationError: If the type is unknown or the entry is invalid
        """
        try:
            key = GatewayResponseType(response_type)
        except ValueError as e:
            raise ConfigurationError(f"Unknown gateway response type: {response_type!r}", original_exception=e) from e

        parameters = expand_header_shortcuts(headers, HEADER_PARAMETER_PREFIX)
        parameters.update(response_parameters or {})

        try:
            entry = GatewayResponseEntry(
                response_type=key,
                status_code=status_code,
                response_parameters=parameters,
                response_templates=dict(response_templates or {}),
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid gateway response {key.value}: {e}", original_exception=e) from e

        if key in self._entries:
            logger.info(f"Replacing gateway response {key.value}")
        self._entries[key] = entry
        return entry

    def get(self, response_type: Union[str, GatewayResponseType]) -> Optional[GatewayResponseEntry]:
        try:
            return self._entries.get(GatewayResponseType(response_type))
        except ValueError:
            return None

    def resolve_all(self) -> List[GatewayResponseEntry]:
        """All registered entries, in registration order."""
        return list(self._entries.values())

    def to_native(self) -> Dict[str, Dict[str, Any]]:
        """Entries keyed by response type in the platform's configuration shape."""
        return {entry.response_type.value: entry.to_native() for entry in self._entries.values()}

    def __len__(self):
        return len(self._entries)

    def __contains__(self, response_type: object) -> bool:
        try:
            return GatewayResponseType(response_type) in self._entries
        except ValueError:
            return False
