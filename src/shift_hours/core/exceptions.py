"""Domain-specific exception types."""


class ShiftHoursError(Exception):
    """Base application error."""


class ValidationError(ShiftHoursError, ValueError):
    """Raised when user-supplied input is rejected at the boundary."""

    kind = "ValidationError"

    def __init__(self, message: str, value: object = None) -> None:
        super().__init__(message)
        self.value = value


class MalformedTimeError(ValidationError):
    """Raised when a wall-clock string is not a valid ``HH:MM`` time."""

    kind = "MalformedTime"


class InvalidPauseError(ValidationError):
    """Raised when a pause amount is non-numeric, non-finite or negative."""

    kind = "InvalidPause"


class PersistenceError(ShiftHoursError):
    """Raised when persistence operations fail."""


class BackupError(PersistenceError):
    """Raised when backup operations fail."""


class StoreFormatError(PersistenceError):
    """Raised when a persisted document has an unknown or unreadable shape."""


class SettingsError(ShiftHoursError):
    """Raised when settings cannot be validated or saved."""


class UnknownUserError(ShiftHoursError, KeyError):
    """Raised when a store operation references a user id that does not exist."""


class UnknownEntryError(ShiftHoursError, KeyError):
    """Raised when a store operation references an entry id that does not exist."""
