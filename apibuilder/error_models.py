"""
Error response models for the API builder.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """JSON representation of an error raised by a handler.

    This is the body a JSON error route produces when the handler raised a
    plain exception, mirroring the shape Lambda itself uses for failures.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "errorMessage": "Order 42 not found",
                "errorType": "LookupError",
            }
        }
    )

    error_message: str = Field(
        ...,
        alias="errorMessage",
        description="Human-readable error message describing what went wrong"
    )

    error_type: Optional[str] = Field(
        None,
        alias="errorType",
        description="Class name of the exception that caused the error"
    )

    def to_wire(self) -> Dict[str, Any]:
        """Dump using wire names, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_exception(cls, error: BaseException, include_type: bool = True) -> "ErrorResponse":
        """Create an ErrorResponse from an exception.

        Args:
            error: The exception raised by the handler
            include_type: Whether to record the exception class name

        Returns:
            ErrorResponse instance
        """
        return cls(
            errorMessage=error_message(error),
            errorType=type(error).__name__ if include_type else None,
        )


def error_message(error: Any) -> Optional[str]:
    """Extract the human-readable message from an error value.

    Exceptions give ``str(exc)``; mappings give their ``errorMessage`` or
    ``message`` entry. Returns None when the value carries no message.
    """
    if isinstance(error, BaseException):
        message = getattr(error, "message", None)
        if isinstance(message, str):
            return message
        return str(error)
    if isinstance(error, dict):
        for key in ("errorMessage", "message"):
            if key in error:
                return str(error[key])
    return None
