"""Base use case."""

from abc import ABC, abstractmethod
from typing import Any, TypeVar
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from kin.domain.error import UnauthorizedError, ValidationError
from kin.domain.value.common import RootValueObject

V = TypeVar("V", bound=RootValueObject)


class BaseUseCase(ABC):
    """Base use case for orchestrating domain services."""

    @abstractmethod
    async def execute(self, request: Any) -> Any:
        pass


def parse_value(value_type: type[V], value: str, message: str) -> V:
    """Build a value object, turning validation failures into domain errors.

    Args:
        value_type: Value object class
        value: Raw input
        message: Error message on failure

    Raises:
        ValidationError: If the value is rejected
    """
    try:
        return value_type(value)
    except PydanticValidationError:
        raise ValidationError(message)


def parse_uuid(value: str, label: str = "ID") -> UUID:
    """Parse a client-supplied identifier.

    Raises:
        ValidationError: If the value is not a UUID
    """
    try:
        return UUID(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label}")


def parse_caller_id(value: str) -> UUID:
    """Parse the authenticated caller's ID from the session.

    Raises:
        UnauthorizedError: If the value is not a UUID
    """
    try:
        return UUID(value)
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid session")
