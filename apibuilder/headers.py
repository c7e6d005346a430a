"""
Header declarations and their materialization into concrete header maps.

A route declares response headers in one of two styles:

* a mapping of fixed values, ``{"X-Version": "2"}``
* a list of names whose values the handler supplies at runtime,
  ``["X-Request-Id"]``

Declarations are normalised once, when the route is registered, into
``FixedHeaders`` or ``AllowedHeaders``.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from .exceptions import ConfigurationError
from .models import MultiValueHeaders

logger = logging.getLogger(__name__)

# Set by the resolver itself, never copied from runtime headers
RESERVED_HEADERS = frozenset({"content-type", "location"})

# Values that API Gateway evaluates instead of treating as literals
_EXPRESSION_PREFIXES = ("method.request.", "context.", "stageVariables.")


@dataclass(frozen=True)
class FixedHeaders:
    """Header values fixed at registration time."""

    values: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class AllowedHeaders:
    """Header names whose values are taken from the dynamic response."""

    names: Tuple[str, ...] = ()


HeaderDeclaration = Optional[Union[FixedHeaders, AllowedHeaders]]


def _header_value(name: str, value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ConfigurationError(f"Header {name!r} must have a string value, got {type(value).__name__}")
    return str(value)


def normalize_header_declaration(declaration: Any) -> HeaderDeclaration:
    """Turn a user-supplied header declaration into its normalised form.

    Raises:
        ConfigurationError: If the declaration is neither a mapping nor a list of names
    """
    if declaration is None or isinstance(declaration, (FixedHeaders, AllowedHeaders)):
        return declaration

    if isinstance(declaration, Mapping):
        values = {}
        for name, value in declaration.items():
            if not isinstance(name, str) or not name:
                raise ConfigurationError(f"Header names must be non-empty strings, got {name!r}")
            values[name] = _header_value(name, value)
        return FixedHeaders(values)

    if isinstance(declaration, Sequence) and not isinstance(declaration, (str, bytes)):
        names = []
        for name in declaration:
            if not isinstance(name, str) or not name:
                raise ConfigurationError(f"Header names must be non-empty strings, got {name!r}")
            names.append(name)
        return AllowedHeaders(tuple(names))

    raise ConfigurationError(
        f"Headers must be a mapping of values or a list of names, got {type(declaration).__name__}"
    )


def materialize_headers(declaration: Any, runtime_headers: Optional[Mapping] = None) -> Dict[str, str]:
    """Resolve a header declaration against the headers supplied at runtime.

    * Fixed values are returned merged with, and overridden by, runtime headers.
    * A list of names keeps only those names that have a runtime value.
    * Without a declaration, runtime headers pass through except the reserved
      Content-Type and Location.

    Args:
        declaration: A mapping, a list of names, a normalised declaration, or None
        runtime_headers: Headers from the dynamic response, if any

    Returns:
        Concrete name to value mapping
    """
    declaration = normalize_header_declaration(declaration)
    # A None value means the header is absent
    runtime = MultiValueHeaders(
        [(name, value) for name, value in (runtime_headers or {}).items() if value is not None]
    )

    if isinstance(declaration, FixedHeaders):
        merged = MultiValueHeaders(declaration.values)
        merged.update(runtime)
        return {name: str(value) for name, value in merged.items()}

    if isinstance(declaration, AllowedHeaders):
        allowed = {}
        for name in declaration.names:
            value = runtime.get(name)
            if value is None:
                logger.debug(f"Declared header {name} has no runtime value, omitting it")
                continue
            allowed[name] = str(value)
        return allowed

    return {name: str(value) for name, value in runtime.items() if name.lower() not in RESERVED_HEADERS}


def quote_literal(value: Any) -> str:
    """Render a header value the way API Gateway expects a static literal.

    Platform expressions and values that are already quoted are returned
    unchanged.
    """
    text = str(value)
    if text.startswith(_EXPRESSION_PREFIXES):
        return text
    if len(text) >= 2 and text.startswith("'") and text.endswith("'"):
        return text
    return f"'{text}'"


def expand_header_shortcuts(headers: Optional[Mapping[str, Any]], prefix: str) -> Dict[str, str]:
    """Expand ``{name: value}`` into platform response parameters.

    Example::

        expand_header_shortcuts({"x-id": "yes"}, "gatewayresponse.header.")
        # {"gatewayresponse.header.x-id": "'yes'"}
    """
    if not headers:
        return {}
    if not isinstance(headers, Mapping):
        raise ConfigurationError(f"Header shortcuts must be a mapping, got {type(headers).__name__}")
    return {f"{prefix}{name}": quote_literal(_header_value(name, value)) for name, value in headers.items()}
