"""Error kinds raised by the data layer.

Routes translate these into HTTP responses; nothing here formats
user-facing output.
"""


class DevEventError(Exception):
    """Base class for all application errors."""


class ConfigurationError(DevEventError):
    """Required configuration is missing or invalid."""


class ConnectionError(DevEventError):
    """The storage engine could not be reached."""


class ValidationError(DevEventError):
    """A field failed validation or normalization."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class UniquenessViolation(DevEventError):
    """A unique constraint rejected the write."""


class ReferentialIntegrityError(DevEventError):
    """A reference points to a record that does not exist."""


class EventNotFoundError(DevEventError):
    def __init__(self, event_id: int) -> None:
        super().__init__(f"Event {event_id} does not exist")
        self.event_id = event_id
