"""
Core data models for the API builder.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, List, Mapping, Optional, Tuple, Union

# Set up logger for this module
logger = logging.getLogger(__name__)


class MultiValueHeaders:
    """
    Multi-value, case-insensitive headers container.

    HTTP headers are case-insensitive per RFC 7230, and API Gateway may deliver
    the same header more than once (``multiValueHeaders``). Lookups ignore case
    while the casing of the first occurrence is kept for output.

    Example::

        headers = MultiValueHeaders({'Content-Type': 'text/plain'})
        headers.get('content-type')       # 'text/plain'
        headers['X-Trace'] = 'abc'        # replaces any existing value
        headers.to_dict()                 # {'Content-Type': 'text/plain', 'X-Trace': 'abc'}
    """

    def __init__(self, data=None):
        # Internal storage: Dict[lowercase_name, List[Tuple[original_name, value]]]
        self._headers: Dict[str, List[Tuple[str, str]]] = {}

        if data is not None:
            if isinstance(data, MultiValueHeaders):
                self._headers = {k: list(v) for k, v in data._headers.items()}
            elif isinstance(data, Mapping):
                for key, value in data.items():
                    if isinstance(value, (list, tuple)):
                        for v in value:
                            self.add(key, v)
                    else:
                        self.add(key, value)
            else:
                for key, value in data:
                    self.add(key, value)

    def add(self, name: str, value: str) -> None:
        """Add a header value, allowing multiple values for the same name."""
        self._headers.setdefault(name.lower(), []).append((name, value))

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get the first value for a header name."""
        if not isinstance(name, str):
            return default
        values = self._headers.get(name.lower())
        if values:
            return values[0][1]
        return default

    def get_all(self, name: str) -> List[str]:
        """Get all values for a header name (empty list if not found)."""
        return [value for _, value in self._headers.get(name.lower(), [])]

    def set(self, name: str, value: str) -> None:
        """Set a header to a single value, replacing any existing values."""
        self._headers[name.lower()] = [(name, value)]

    def discard(self, name: str) -> None:
        """Remove a header if present."""
        self._headers.pop(name.lower(), None)

    def __setitem__(self, name: str, value: str) -> None:
        self.set(name, value)

    def __getitem__(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise KeyError(name)
        return value

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return name.lower() in self._headers

    def __delitem__(self, name: str) -> None:
        if name not in self:
            raise KeyError(name)
        self.discard(name)

    def __iter__(self):
        """Iterate over header names (using original casing of first occurrence)."""
        for values in self._headers.values():
            if values:
                yield values[0][0]

    def __len__(self):
        return len(self._headers)

    def keys(self):
        return list(self)

    def items(self):
        """Return (name, first_value) pairs."""
        return [(values[0][0], values[0][1]) for values in self._headers.values() if values]

    def update(self, other) -> None:
        """
        Update headers from a mapping or another MultiValueHeaders.

        Existing headers with the same name are replaced rather than appended to.
        """
        if isinstance(other, MultiValueHeaders):
            for name_lower, values in other._headers.items():
                self._headers[name_lower] = list(values)
        else:
            for key, value in other.items():
                self.set(key, value)

    def to_dict(self) -> Dict[str, str]:
        """Convert to a simple dict with the first value for each header."""
        return {values[0][0]: values[0][1] for values in self._headers.values() if values}

    def copy(self) -> "MultiValueHeaders":
        return MultiValueHeaders(self)

    def __repr__(self):
        return f"MultiValueHeaders({self.items()!r})"


class HTTPMethod(Enum):
    """Enumeration of supported HTTP methods.

    ``ANY`` is only valid at registration time and matches every method.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    ANY = "ANY"


@dataclass
class Request:
    """Represents an incoming API request, already parsed by an adapter.

    ``body`` holds the decoded body (a dict for JSON payloads, otherwise the
    text), while ``raw_body`` keeps the original string.
    """

    method: HTTPMethod
    path: str
    headers: Union[Dict[str, str], MultiValueHeaders] = field(default_factory=dict)
    body: Any = None
    raw_body: Optional[str] = None
    query_params: Dict[str, str] = field(default_factory=dict)
    path_params: Dict[str, str] = field(default_factory=dict)
    stage_variables: Dict[str, str] = field(default_factory=dict)
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.headers, MultiValueHeaders):
            self.headers = MultiValueHeaders(self.headers)


class OutcomeKind(str, Enum):
    """Which static configuration branch applies to an outcome."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Success:
    """A handler that finished normally, with the value it produced."""

    value: Any = None
    kind: ClassVar[OutcomeKind] = OutcomeKind.SUCCESS


@dataclass(frozen=True)
class Failure:
    """A handler that raised or whose awaitable failed."""

    error: Any = None
    kind: ClassVar[OutcomeKind] = OutcomeKind.ERROR


Outcome = Union[Success, Failure]


class ApiResponse(Exception):
    """A response built by application code to control status, headers and body.

    It may be returned from a handler, or raised to take the error branch::

        @api.get("/legacy")
        def legacy(request):
            return ApiResponse("https://example.com/new-home", {"X-Version": "2"}, 301)

        @api.get("/broken")
        def broken(request):
            raise ApiResponse("<error>NOT OK</error>", {"Content-Type": "text/xml"}, 500)

    ``http_code`` is optional. When it is left out the route configuration
    (or the framework default) decides.
    """

    def __init__(self, body: Any = None, headers: Optional[Mapping[str, str]] = None, http_code: Optional[int] = None):
        super().__init__(body)
        self.body = body
        self.headers: Dict[str, str] = dict(headers or {})
        self.http_code = http_code

    def __repr__(self):
        return f"ApiResponse(body={self.body!r}, headers={self.headers!r}, http_code={self.http_code!r})"


@dataclass(frozen=True)
class ResolvedResponse:
    """The final status, content type, headers and body for one request.

    ``headers`` never contains Content-Type; transports emit ``content_type``
    under that name.
    """

    status_code: int
    content_type: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    def header_items(self) -> Iterable[Tuple[str, str]]:
        """All headers to write, Content-Type first."""
        yield "Content-Type", self.content_type
        yield from self.headers.items()
