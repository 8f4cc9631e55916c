"""Shared pydantic base for the immutable lending entities."""

from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import InvalidValueError

M = TypeVar("M", bound="FrozenModel")


class FrozenModel(BaseModel):
    """Immutable value model with a validating factory.

    Changing a value means building a new one; fields cannot be assigned.
    """

    entity_name: ClassVar[str] = "value"

    model_config = {"frozen": True, "str_strip_whitespace": True}

    @classmethod
    def create(cls: type[M], **fields: Any) -> M:
        """Build a validated instance.

        Raises:
            InvalidValueError: If a required field is missing or invalid
        """
        try:
            return cls(**fields)
        except ValidationError as e:
            raise InvalidValueError.from_validation_error(cls.entity_name, e) from e
