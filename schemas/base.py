"""Shared payload plumbing: strict models and the validate() entry point."""
from typing import Annotated, Any, ClassVar, Mapping, Tuple, Type, TypeVar

import pydantic
from pydantic import AfterValidator, BaseModel, ConfigDict, model_validator, validate_email

from db.exceptions import ValidationError

PayloadT = TypeVar("PayloadT", bound=BaseModel)


def _check_email(value: str) -> str:
    # Format check only; the address is stored as typed
    validate_email(value)
    return value


CheckedEmail = Annotated[str, AfterValidator(_check_email)]


class Payload(BaseModel):
    """Base for create payloads: unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class UpdatePayload(Payload):
    """Base for partial updates.

    Every field is optional, but columns listed in ``non_nullable`` may not
    be explicitly cleared.
    """

    non_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _check_non_nullable(self):
        for name in self.non_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


def validate(model: Type[PayloadT], data: Mapping[str, Any]) -> PayloadT:
    """Validate a raw payload, raising the dashboard ValidationError on failure."""
    try:
        return model.model_validate(dict(data))
    except pydantic.ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False)
        fields = ", ".join(".".join(str(p) for p in e["loc"]) or "payload" for e in errors)
        raise ValidationError(f"invalid {model.__name__}: {fields}", errors) from exc


def changes(payload: BaseModel) -> dict[str, Any]:
    """Only the fields the caller actually sent."""
    return payload.model_dump(exclude_unset=True)
