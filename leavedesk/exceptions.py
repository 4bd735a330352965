from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any, ParamSpec

from pydantic import ValidationError

from leavedesk.schemas.result import Failure, FieldError, Success

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

P = ParamSpec("P")


class AppError(Exception):
    """Base application exception."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class NotFoundError(AppError):
    """A referenced employee or leave request does not exist."""


class ConflictError(AppError):
    """The target record is in a state that does not allow the operation."""


class StorageError(AppError):
    """Reading, parsing or writing a stored collection failed."""


class FieldValidationError(AppError):
    """One or more input fields failed validation."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in errors))


def _validation_error_to_failure(exc: ValidationError) -> Failure:
    return Failure.fields(FieldError.from_validation_error(exc))


def _to_failure(exc: Exception, fallback: str) -> Failure:
    """Translate an exception raised inside a service operation into a ``Failure``."""
    if isinstance(exc, FieldValidationError):
        return Failure.fields(exc.errors)
    if isinstance(exc, ValidationError):
        return _validation_error_to_failure(exc)
    if isinstance(exc, StorageError):
        logger.exception("%s: %s", fallback, exc.message)
        return Failure.general(fallback)
    if isinstance(exc, AppError):
        return Failure.general(exc.message)
    logger.exception(fallback)
    return Failure.general(fallback)


def service_operation(fallback: str) -> Callable[[Callable[P, Any]], Callable[P, Success[Any] | Failure]]:
    """Wrap a service method so it always returns a result envelope.

    The wrapped method returns its data directly and raises ``AppError``
    subclasses (or pydantic ``ValidationError`` while parsing payloads) on
    failure. Storage and unexpected errors collapse into ``fallback``.
    """

    def decorator(func: Callable[P, Any]) -> Callable[P, Success[Any] | Failure]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> Success[Any] | Failure:
            try:
                return Success(data=func(*args, **kwargs))
            except Exception as exc:  # noqa: BLE001
                return _to_failure(exc, fallback)

        return wrapper

    return decorator
