from __future__ import annotations

import math

from datetime import datetime
from typing import Annotated, Any, Literal, Tuple, Type, Union

from pydantic import (BaseModel, ConfigDict, Discriminator, Field, SerializationInfo, StrictFloat, StrictInt, StrictStr, Tag,
                      TypeAdapter, field_serializer, field_validator)
from pydantic_core import PydanticCustomError

from hkreporter.iso8601 import Iso8601DateFormatter


class BaseMetadataValue(BaseModel):
    """One variant of a metadata value: a `type` discriminant plus its `value` payload.

    Extra fields on the wire are ignored. Instances are immutable and compare
    equal only to the same variant holding an equal payload.
    """
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )

    @property
    def original(self) -> Any:
        """The plain Python payload handed back to the health-data framework."""
        return getattr(self, "value")

    def __eq__(self, other) -> bool:
        if isinstance(other, BaseMetadataValue):
            return type(self) is type(other) and self.original == other.original
        return NotImplemented

    def __hash__(self) -> int: return hash((type(self), self.original))


class StringValue(BaseMetadataValue):
    type  : Literal["string"] = "string"
    value : StrictStr


class DateValue(BaseMetadataValue):
    """An absolute point in time, carried on the wire as ISO-8601 text."""
    type  : Literal["date"] = "date"
    value : datetime

    @field_validator('value', mode='before')
    @classmethod
    def validate_value(cls, value: Any) -> datetime:
        """Accept an aware datetime or strict ISO-8601 text."""
        if isinstance(value, datetime):
            if value.utcoffset() is None:
                raise PydanticCustomError(
                    "corrupted_value",
                    "Expected an aware datetime for field 'value', got a naive one: {text}",
                    {"text": value.isoformat()},
                )
            return value

        if isinstance(value, str):
            formatter = Iso8601DateFormatter.from_settings()
            try:
                return formatter.decode(value)
            except ValueError as exc:
                raise PydanticCustomError(
                    "corrupted_value",
                    "Invalid ISO8601 date string for field 'value': {text}",
                    {"text": value},
                ) from exc

        raise PydanticCustomError(
            "corrupted_value",
            "Expected ISO8601 date text for field 'value', got {value_type}",
            {"value_type": type(value).__name__},
        )

    @field_serializer('value')
    def serialize_value(self, value: datetime, info: SerializationInfo) -> datetime | str:
        if info.mode_is_json():
            return Iso8601DateFormatter.from_settings().encode(value)
        return value


class DoubleValue(BaseMetadataValue):
    type  : Literal["double"] = "double"
    value : StrictFloat = Field(allow_inf_nan=False)

    @field_validator('value')
    @classmethod
    def validate_value(cls, value: float) -> float:
        # integers are accepted on the wire but always stored as floats
        return float(value)


class IntValue(BaseMetadataValue):
    type  : Literal["int"] = "int"
    value : StrictInt


def _discriminant_of(value: Any) -> str | None:
    """Read the `type` discriminant from raw input or from an already built variant."""
    tag = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return tag if isinstance(tag, str) else None


MetadataValue = Annotated[
    Union[
        Annotated[StringValue, Tag("string")],
        Annotated[DateValue,   Tag("date")],
        Annotated[DoubleValue, Tag("double")],
        Annotated[IntValue,    Tag("int")],
    ],
    Discriminator(
        _discriminant_of,
        custom_error_type="unknown_variant",
        custom_error_message="Malformed metadata value: 'type' must be one of 'string', 'date', 'double', 'int'",
    ),
]

METADATA_VALUE_ADAPTER: TypeAdapter[MetadataValue] = TypeAdapter(MetadataValue)


# ===================================================================
# Constructors
# ===================================================================

def from_text(value: str)        -> StringValue: return StringValue(value=value)
def from_int(value: int)         -> IntValue:    return IntValue(value=value)
def from_float(value: float)     -> DoubleValue: return DoubleValue(value=value)
def from_date(value: datetime)   -> DateValue:   return DateValue(value=value)

def from_literal(value: Any) -> MetadataValue:
    """Build a metadata value from a plain text, integer or float literal.

    Existing variants pass through unchanged. Dates have no literal form and
    must be wrapped with `from_date` (or `DateValue`) explicitly.
    """
    if isinstance(value, BaseMetadataValue):
        return value  # type: ignore[return-value]
    if isinstance(value, bool):
        raise TypeError("Cannot build a metadata value from a bool literal")
    if isinstance(value, str):
        return from_text(value)
    if isinstance(value, int):
        return from_int(value)
    if isinstance(value, float):
        return from_float(value)
    raise TypeError(f"Cannot build a metadata value from a {type(value).__name__} literal")


# ===================================================================
# Runtime classification
# ===================================================================

# Closed table used when bridging from an untyped map. Checked in order.
VALUE_CLASSIFIERS: Tuple[Tuple[type, Type[BaseMetadataValue]], ...] = (
    (str,      StringValue),
    (datetime, DateValue),
    (float,    DoubleValue),
    (int,      IntValue),
)

def unrepresentable_reason(value: Any) -> str | None:
    """Why a value of a supported runtime type still has no variant, or None when it has one."""
    if isinstance(value, datetime) and value.utcoffset() is None:
        return "naive datetime is not an absolute instant"
    if isinstance(value, float) and not math.isfinite(value):
        return "non-finite float cannot be carried in JSON"
    return None

def classify(value: Any) -> MetadataValue | None:
    """Wrap a dynamically-typed value in its variant, or return None when no variant fits."""
    if isinstance(value, bool) or unrepresentable_reason(value) is not None:
        return None
    for runtime_type, variant in VALUE_CLASSIFIERS:
        if isinstance(value, runtime_type):
            return variant(value=value)  # type: ignore[return-value]
    return None
