"""Common schema module."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from otpcrm.core.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class CamelModel(BaseModel):
    """Accepts both ``camelCase`` and ``snake_case`` keys; unknown keys are dropped."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=True,
        str_strip_whitespace=True,
        validate_default=True,
    )


def parse_payload(model: type[ModelT], payload: ModelT | Mapping[str, Any] | None) -> ModelT:
    """Validate a loosely typed mapping into ``model``.

    Raises ``ValidationError`` when the payload cannot be coerced.
    """
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(dict(payload or {}))
    except PydanticValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
        raise ValidationError(
            f"Invalid {model.__name__}: {', '.join(fields)}",
            errors=exc.errors(include_context=False),
        ) from exc
