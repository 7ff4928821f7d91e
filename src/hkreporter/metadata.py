from __future__ import annotations

import logging

from typing import Any, Dict, Iterable, Iterator, Mapping, Self, Tuple

from pydantic import ConfigDict, Field, RootModel

from hkreporter.errors import InvalidValueError
from hkreporter.metadata_value import MetadataValue, classify, from_literal, unrepresentable_reason


logger = logging.getLogger(__name__)


class Metadata(RootModel[Dict[str, MetadataValue]]):
    """Metadata attached to a health sample: string keys mapped to typed values.

    On the wire this is a flat JSON object whose values are the two-field
    `{"type": ..., "value": ...}` encoding of each entry. Instances are
    immutable; use `with_value` to derive a changed copy.

    Example:
        >>> meta = Metadata.from_literals({"HKSampleCount": 3})
        >>> meta.model_dump_json()
        '{"HKSampleCount":{"type":"int","value":3}}'
    """
    model_config = ConfigDict(
        frozen=True,
    )
    root: Dict[str, MetadataValue] = Field(default_factory=dict)

    # ===================================================================
    # Constructors
    # ===================================================================

    @classmethod
    def from_literals(cls, pairs: Mapping[str, Any] | Iterable[Tuple[str, Any]] = ()) -> Self:
        """Build from key/literal pairs; text, int and float literals are wrapped, variants pass through.

        When a key is listed more than once the last listed value wins.
        """
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        values: Dict[str, MetadataValue] = {}
        for key, value in items:
            values[key] = from_literal(value)
        return cls(values)

    @classmethod
    def make(cls, dictionary: Mapping[str, Any]) -> Self:
        """Classify every entry of an untyped mapping by its runtime type.

        Raises:
            InvalidValueError: on the first value that is not text, an aware datetime,
                a finite float or an int. Nothing is returned in that case.
        """
        values: Dict[str, MetadataValue] = {}
        for key, value in dictionary.items():
            if (metadata_value := classify(value)) is None:
                logger.debug(f"Rejecting metadata key {key!r} holding unsupported {type(value).__name__}")
                raise InvalidValueError(key, type(value), unrepresentable_reason(value))
            values[key] = metadata_value

        logger.debug(f"Converted {len(values)} metadata entries")
        return cls(values)

    def with_value(self, key: str, value: Any) -> Self:
        """Return a copy with `key` set to `value` (a variant or a text/int/float literal)."""
        values = dict(self.root)
        values[key] = from_literal(value)
        return self.__class__(values)

    # ===================================================================
    # Properties
    # ===================================================================

    @property
    def dictionary(self) -> Dict[str, MetadataValue]:
        """A copy of the typed entries."""
        return dict(self.root)

    @property
    def original(self) -> Dict[str, Any] | None:
        """The entries widened back to plain Python values, or None when there are none."""
        if not self.root:
            return None
        return {key: value.original for key, value in self.root.items()}

    # ===================================================================
    # Mapping Methods
    # ===================================================================

    def get(self, key: str, default: MetadataValue | None = None) -> MetadataValue | None: return self.root.get(key, default)
    def __getitem__(self, key: str) -> MetadataValue: return self.root[key]
    def __contains__(self, key: object) -> bool: return key in self.root
    def __iter__(self) -> Iterator[str]: return iter(self.root)  # type: ignore[override]
    def __len__(self) -> int: return len(self.root)
    def __bool__(self) -> bool: return bool(self.root)
    def __repr__(self) -> str: return f"{self.__class__.__name__}({repr(self.root)})"
    def __eq__(self, other) -> bool:
        if isinstance(other, Metadata): return self.root == other.root
        return NotImplemented
    def keys(self): return self.root.keys()
    def values(self): return self.root.values()
    def items(self): return self.root.items()
