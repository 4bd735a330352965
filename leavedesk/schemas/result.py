"""Uniform result envelope returned by every service operation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Literal, Self, TypeVar

from pydantic import BaseModel, model_validator

if TYPE_CHECKING:
    from pydantic import ValidationError

DataT = TypeVar("DataT")


class FieldError(BaseModel):
    """A validation failure tied to a single input field."""

    field: str
    message: str

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> list[FieldError]:
        """One error per failed location, keyed by its top-level field."""
        return [
            cls(field=str(err["loc"][0]) if err["loc"] else "general", message=err["msg"])
            for err in exc.errors()
        ]


class Success(BaseModel, Generic[DataT]):
    """Successful outcome carrying the operation's data."""

    success: Literal[True] = True
    data: DataT

    def to_envelope(self) -> dict[str, Any]:
        """Render as ``{"success": true, "data": ...}``."""
        return self.model_dump(mode="json")


class Failure(BaseModel):
    """Failed outcome carrying either a general message or field errors, never both."""

    success: Literal[False] = False
    error: str | None = None
    errors: list[FieldError] | None = None

    @model_validator(mode="after")
    def _exactly_one_kind(self) -> Self:
        if (self.error is None) == (self.errors is None):
            msg = "Failure needs exactly one of error or errors"
            raise ValueError(msg)
        if self.errors is not None and not self.errors:
            msg = "errors must not be empty"
            raise ValueError(msg)
        return self

    @classmethod
    def general(cls, message: str) -> Failure:
        """Build a failure with a single general message."""
        return cls(error=message)

    @classmethod
    def fields(cls, errors: list[FieldError]) -> Failure:
        """Build a failure from a non-empty list of field errors."""
        return cls(errors=errors)

    def to_envelope(self) -> dict[str, Any]:
        """Render as ``{"success": false, "error": ...}`` or ``{"success": false, "errors": [...]}``."""
        return self.model_dump(mode="json", exclude_none=True)
