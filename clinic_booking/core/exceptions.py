"""Domain errors raised by the booking services.

Every error carries a stable ``kind`` that callers can branch on and a
human-readable ``message`` that the UI renders as-is.
"""
from enum import Enum
from typing import Optional


class ClinicBookingError(Exception):
    """Base class for all recoverable, caller-reported errors."""

    status_code: int = 400

    def __init__(self, kind: Enum, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.kind.value, "message": self.message}


class AuthErrorKind(str, Enum):
    NOT_FOUND = "not_found"


class RegistrationErrorKind(str, Enum):
    DUPLICATE_EMAIL = "duplicate_email"
    MISSING_FIELD = "missing_field"


class BookingErrorKind(str, Enum):
    SLOT_NOT_FOUND = "slot_not_found"
    SLOT_UNAVAILABLE = "slot_unavailable"
    PATIENT_NOT_FOUND = "patient_not_found"


class CancellationErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"


class SessionErrorKind(str, Enum):
    MALFORMED = "malformed"
    EXPIRED = "expired"


class StorageErrorKind(str, Enum):
    UNAVAILABLE = "storage_unavailable"


class AuthError(ClinicBookingError):
    """Raised when credentials do not resolve to a user."""

    status_code = 401

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(AuthErrorKind.NOT_FOUND, message)


class RegistrationError(ClinicBookingError):
    """Raised when a new account cannot be created."""

    status_code = 400

    def __init__(self, kind: RegistrationErrorKind, message: str) -> None:
        super().__init__(kind, message)


class BookingError(ClinicBookingError):
    """Raised when a slot cannot be booked."""

    _status_codes = {
        BookingErrorKind.SLOT_NOT_FOUND: 404,
        BookingErrorKind.SLOT_UNAVAILABLE: 409,
        BookingErrorKind.PATIENT_NOT_FOUND: 404,
    }

    def __init__(self, kind: BookingErrorKind, message: str, slot_id: Optional[str] = None) -> None:
        self.slot_id = slot_id
        self.status_code = self._status_codes[kind]
        super().__init__(kind, message)


class CancellationError(ClinicBookingError):
    """Raised when a booking cannot be cancelled."""

    _status_codes = {
        CancellationErrorKind.NOT_FOUND: 404,
        CancellationErrorKind.UNAUTHORIZED: 403,
    }

    def __init__(
        self, kind: CancellationErrorKind, message: str, booking_id: Optional[str] = None
    ) -> None:
        self.booking_id = booking_id
        self.status_code = self._status_codes[kind]
        super().__init__(kind, message)


class SessionError(ClinicBookingError):
    """Raised when a session token cannot be trusted."""

    status_code = 401

    def __init__(self, kind: SessionErrorKind, message: str) -> None:
        super().__init__(kind, message)


class StorageError(ClinicBookingError):
    """Raised when the backing store fails. Never a validation problem."""

    status_code = 503

    def __init__(self, message: str) -> None:
        super().__init__(StorageErrorKind.UNAVAILABLE, message)
