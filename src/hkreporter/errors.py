class HealthKitError(Exception):
    """Base class for errors raised by hkreporter."""


class InvalidValueError(HealthKitError, ValueError):
    """A value handed over by the health-data framework has a type metadata cannot represent."""

    def __init__(self, key: str, value_type: type, reason: str | None = None):
        self.key        = key
        self.value_type = value_type
        self.reason     = reason
        message = f"Unsupported value for key {key}: {value_type.__name__}"
        super().__init__(f"{message} ({reason})" if reason else message)
