"""
Handler invocation.

Calls a route handler and settles whatever it produces into an ``Outcome``
plus an optional ``ApiResponse``, so the resolver never has to inspect
handler results itself.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Tuple

import anyio

from .models import ApiResponse, Failure, Outcome, Request, Success

logger = logging.getLogger(__name__)


def settle(awaitable: Awaitable[Any]) -> Any:
    """Run an awaitable to completion from synchronous code.

    Uses anyio.run(), so it must not be called from inside a running event loop.
    """
    async def _await() -> Any:
        return await awaitable

    return anyio.run(_await)


def accepts_request(handler: Callable) -> bool:
    """Whether the handler takes the request as an argument."""
    try:
        parameters = inspect.signature(handler).parameters.values()
    except (TypeError, ValueError):
        return True
    return any(
        p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL)
        for p in parameters
    )


def invoke_handler(
    handler: Callable,
    request: Request,
    pass_request: bool = True,
) -> Tuple[Outcome, Optional[ApiResponse]]:
    """Call a handler and normalise its result.

    * a returned value becomes ``Success``
    * a raised exception, or a failed awaitable, becomes ``Failure``
    * an ``ApiResponse``, returned or raised, is also handed back as the
      dynamic response

    Args:
        handler: The route handler
        request: The parsed request
        pass_request: Whether to call the handler with the request

    Returns:
        Tuple of (outcome, dynamic response or None)
    """
    try:
        result = handler(request) if pass_request else handler()
        if inspect.isawaitable(result):
            result = settle(result)
    except ApiResponse as response:
        logger.debug(f"Handler for {request.method.value} {request.path} raised an ApiResponse")
        return Failure(response), response
    except Exception as e:
        logger.error(f"Handler for {request.method.value} {request.path} failed: {e}", exc_info=True)
        return Failure(e), None

    if isinstance(result, ApiResponse):
        return Success(result), result
    return Success(result), None
