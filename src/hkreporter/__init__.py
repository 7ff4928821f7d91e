# hkreporter/__init__.py

# isort: off
from .errors import HealthKitError, InvalidValueError
from .metadata_value import (MetadataValue, METADATA_VALUE_ADAPTER, BaseMetadataValue, StringValue, DateValue,
                             DoubleValue, IntValue, from_text, from_int, from_float, from_date, from_literal)
from .metadata import Metadata
from .payload import Payload
# isort: on

__all__ = [
    "HealthKitError",
    "InvalidValueError",
    "MetadataValue",
    "METADATA_VALUE_ADAPTER",
    "BaseMetadataValue",
    "StringValue",
    "DateValue",
    "DoubleValue",
    "IntValue",
    "from_text",
    "from_int",
    "from_float",
    "from_date",
    "from_literal",
    "Metadata",
    "Payload",
]
