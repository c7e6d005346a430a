"""
Content renderers for different media types.

A renderer turns the raw value of a handler outcome into the wire body for its
media type. Success and error values are rendered separately because some
media types only show the error message while others show the whole error.
"""

import json
import logging
from typing import Any, Dict, Iterable, Optional

from .error_models import ErrorResponse, error_message
from .exceptions import SerializationError
from .models import OutcomeKind

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/json"


def media_type_of(content_type: str) -> str:
    """Strip parameters such as charset and normalise case."""
    return content_type.split(";", 1)[0].strip().lower()


def _serialize_pydantic(data: Any) -> Any:
    """Convert Pydantic models to dictionaries for JSON serialization."""
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json")
    raise TypeError(f"Object of type {type(data).__name__} is not JSON serializable")


def to_json(data: Any) -> str:
    """JSON-encode a value, raising SerializationError when it cannot be represented."""
    try:
        return json.dumps(data, default=_serialize_pydantic, allow_nan=False)
    except ValueError as e:
        # json reports reference cycles and NaN/Infinity as ValueError
        if "circular" in str(e).lower():
            raise SerializationError(
                "Response contains a circular reference and cannot be serialized to JSON", data
            ) from e
        raise SerializationError(f"Response cannot be serialized to JSON: {e}", data) from e
    except TypeError as e:
        raise SerializationError(f"Response cannot be serialized to JSON: {e}", data) from e


def to_text(data: Any) -> str:
    """Render a value as raw, unencoded text."""
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    if isinstance(data, bytes):
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SerializationError("Response body is not valid UTF-8 text", data) from e
    if isinstance(data, (dict, list, tuple)) or hasattr(data, "model_dump"):
        # Containers have no textual form of their own
        return to_json(data)
    return str(data)


class ContentRenderer:
    """Base class for content renderers."""

    def __init__(self, media_type: str):
        self.media_type = media_type_of(media_type)

    def render(self, data: Any, outcome_kind: OutcomeKind) -> str:
        """Render the raw value of a success or error outcome."""
        if outcome_kind == OutcomeKind.ERROR:
            return self.render_error(data)
        return self.render_success(data)

    def render_success(self, data: Any) -> str:
        raise NotImplementedError

    def render_error(self, data: Any) -> str:
        return self.render_success(data)

    def __repr__(self):
        return f"{type(self).__name__}({self.media_type!r})"


class PassThroughRenderer(ContentRenderer):
    """Emits values as raw text for both outcomes.

    Register one per additional media type a route should be allowed to use::

        api.add_content_renderer(PassThroughRenderer("text/csv"))
    """

    def render_success(self, data: Any) -> str:
        return to_text(data)


class JSONRenderer(ContentRenderer):
    """JSON content renderer.

    Errors are encoded whole: an exception becomes an ``ErrorResponse``, any
    other error value is encoded as it is.
    """

    def __init__(self, expose_error_type: bool = True):
        super().__init__("application/json")
        self.expose_error_type = expose_error_type

    def render_success(self, data: Any) -> str:
        return to_json(data)

    def render_error(self, data: Any) -> str:
        if isinstance(data, BaseException):
            data = ErrorResponse.from_exception(data, include_type=self.expose_error_type).to_wire()
        return to_json(data)


class PlainTextRenderer(ContentRenderer):
    """Plain text content renderer; errors are reduced to their message."""

    def __init__(self, media_type: str = "text/plain"):
        super().__init__(media_type)

    def render_success(self, data: Any) -> str:
        return to_text(data)

    def render_error(self, data: Any) -> str:
        message = error_message(data)
        if message is None:
            return to_text(data)
        return message


class HTMLRenderer(PlainTextRenderer):
    """HTML content renderer; behaves like plain text."""

    def __init__(self):
        super().__init__("text/html")


class XMLRenderer(PassThroughRenderer):
    """XML content renderer.

    Error values are emitted verbatim so XML error documents survive intact.
    """

    def __init__(self, media_type: str = "text/xml"):
        super().__init__(media_type)


def default_renderers(expose_error_type: bool = True) -> Iterable[ContentRenderer]:
    return (
        JSONRenderer(expose_error_type=expose_error_type),
        PlainTextRenderer(),
        HTMLRenderer(),
        XMLRenderer("text/xml"),
        XMLRenderer("application/xml"),
    )


class BodySerializer:
    """Registry of renderers keyed by media type."""

    def __init__(self, renderers: Optional[Iterable[ContentRenderer]] = None, expose_error_type: bool = True):
        self._renderers: Dict[str, ContentRenderer] = {}
        for renderer in (renderers if renderers is not None else default_renderers(expose_error_type)):
            self.add_renderer(renderer)

    def add_renderer(self, renderer: ContentRenderer) -> None:
        """Register (or replace) the renderer for ``renderer.media_type``."""
        self._renderers[renderer.media_type] = renderer

    def is_registered(self, content_type: str) -> bool:
        return media_type_of(content_type) in self._renderers

    @property
    def media_types(self):
        return list(self._renderers)

    def renderer_for(self, content_type: str) -> ContentRenderer:
        """Look up the renderer for a content type.

        Unknown types (only reachable through a dynamic Content-Type header)
        fall back to raw pass-through.
        """
        media_type = media_type_of(content_type)
        renderer = self._renderers.get(media_type)
        if renderer is None:
            logger.debug(f"No renderer registered for {media_type}, passing body through")
            renderer = PassThroughRenderer(media_type)
        return renderer

    def serialize(self, value: Any, content_type: str, outcome_kind: OutcomeKind) -> str:
        """Produce the wire body for ``value``.

        Raises:
            SerializationError: If the value cannot be represented
        """
        return self.renderer_for(content_type).render(value, outcome_kind)
