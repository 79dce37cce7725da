"""Field copying between pydantic payloads and domain objects."""

from typing import TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


def apply_update(source: BaseModel, target: object) -> list[str]:
    """Copy the fields set on the payload onto matching target attributes.

    Fields the client did not send are left untouched on the target.
    Returns the names of the attributes that were written.
    """
    written = []
    for name, value in source.model_dump(exclude_unset=True).items():
        if hasattr(target, name):
            setattr(target, name, value)
            written.append(name)
    return written


def project(source: object, model_type: type[ModelT]) -> ModelT:
    """Project a domain object into a response model."""
    return model_type.model_validate(source, from_attributes=True)
