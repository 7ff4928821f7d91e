from typing import Any, Mapping, Protocol, Self, runtime_checkable


@runtime_checkable
class Payload(Protocol):
    """Protocol for values built from the untyped attachments the health-data framework hands over."""

    @classmethod
    def make(cls, dictionary: Mapping[str, Any]) -> Self:
        """Build an instance from an untyped key/value mapping."""
        raise NotImplementedError("Subclasses must implement make method.")
