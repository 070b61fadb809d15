"""
tfverify/models/validator.py

Narrows schema-free resource attributes into a typed pydantic model.
"""

from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)


class AttributeShapeError(ValueError):
    """Raised when a resource instance's attributes do not match the expected model."""


def narrow_attributes(attributes: Dict[str, Any], model: Type[M]) -> M:
    """
    Validates a resource instance's attribute map against a pydantic model.

    Args:
        attributes (Dict[str, Any]): The raw attributes from the state file.
        model (Type[M]): The pydantic model describing the resource type.

    Returns:
        M: The validated attributes.

    Raises:
        AttributeShapeError: If validation fails.
    """
    try:
        return model.model_validate(attributes)
    except ValidationError as e:
        raise AttributeShapeError(
            f"Attributes do not match {model.__name__}: {e}"
        ) from e
