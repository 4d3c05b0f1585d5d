from typing import ClassVar, FrozenSet

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

# Largest value an INTEGER column holds on every supported backend
MAX_SQL_INT = 2**31 - 1


class CamelModel(BaseModel):
    """Request/response shapes speak camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(CamelModel):
    """Incoming bodies: unknown fields are rejected, never passed through to SQL."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class PartialUpdate(RequestModel):
    """
    PATCH bodies. Only the fields actually sent end up in ``changes()``;
    an explicit null clears the column unless the field is listed in ``not_nullable``.
    """
    not_nullable: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_for_required_columns(self):
        nulled = sorted(
            name for name in self.model_fields_set
            if name in self.not_nullable and getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"Fields cannot be null: {', '.join(to_camel(n) for n in nulled)}")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, by_alias=True)
