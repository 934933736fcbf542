"""Reservation engine.

Each slot is either open (available, no confirmed booking) or reserved
(unavailable, exactly one confirmed booking). ``book`` moves open to
reserved, ``cancel`` moves it back. All transitions, and the snapshot reads
that must not observe half of one, run under a single ledger-wide lock.
"""
from datetime import datetime, timezone
from typing import List, Optional
import logging
import threading
import uuid

from ..core.exceptions import (
    BookingError,
    BookingErrorKind,
    CancellationError,
    CancellationErrorKind,
)
from ..core.security import UserRole
from ..models.booking import BookingStatus
from ..repositories.base import ReservationStore
from ..schemas.booking import BookingResponse
from ..schemas.slot import SlotResponse

logger = logging.getLogger(__name__)


class ReservationService:
    def __init__(self, store: ReservationStore):
        self.store = store
        self._lock = threading.RLock()

    def list_available(self) -> List[SlotResponse]:
        """Open slots, ordered by date then time."""
        with self._lock:
            return self.store.list_slots(available_only=True)

    def get_booking(self, booking_id: str) -> Optional[BookingResponse]:
        with self._lock:
            return self.store.get_booking(booking_id)

    def book(self, slot_id: str, patient_id: str) -> BookingResponse:
        """Reserve an open slot for a patient.

        Raises:
            BookingError: SLOT_NOT_FOUND, SLOT_UNAVAILABLE or PATIENT_NOT_FOUND.
        """
        with self._lock:
            slot = self.store.get_slot(slot_id)
            if slot is None:
                raise BookingError(BookingErrorKind.SLOT_NOT_FOUND, "Slot not found", slot_id)
            if not slot.available:
                raise BookingError(
                    BookingErrorKind.SLOT_UNAVAILABLE, "Slot is no longer available", slot_id
                )

            patient = self.store.get_user(patient_id)
            if patient is None:
                raise BookingError(BookingErrorKind.PATIENT_NOT_FOUND, "Patient not found", slot_id)

            booking = BookingResponse(
                id=f"booking-{uuid.uuid4().hex[:12]}",
                slot_id=slot.id,
                patient_id=patient.id,
                patient_name=patient.name,
                patient_email=patient.email,
                date=slot.date,
                time=slot.time,
                status=BookingStatus.CONFIRMED,
                created_at=datetime.now(timezone.utc),
            )

            # Another process may have taken the slot since the read above
            if not self.store.reserve(booking):
                raise BookingError(
                    BookingErrorKind.SLOT_UNAVAILABLE, "Slot is no longer available", slot_id
                )

        logger.info(f"Booking {booking.id} confirmed for slot {slot_id}")
        return booking

    def cancel(self, booking_id: str, acting_user_id: str) -> BookingResponse:
        """Cancel a booking and reopen its slot.

        Admins may cancel any booking, patients only their own. Cancelling an
        already cancelled booking returns it unchanged.

        Raises:
            CancellationError: NOT_FOUND or UNAUTHORIZED.
        """
        with self._lock:
            booking = self.store.get_booking(booking_id)
            if booking is None:
                raise CancellationError(
                    CancellationErrorKind.NOT_FOUND, "Booking not found", booking_id
                )

            user = self.store.get_user(acting_user_id)
            if user is None or (user.role != UserRole.ADMIN and booking.patient_id != user.id):
                raise CancellationError(
                    CancellationErrorKind.UNAUTHORIZED,
                    "Unauthorized to cancel this booking",
                    booking_id,
                )

            if booking.status == BookingStatus.CANCELLED:
                return booking

            cancelled = self.store.release(booking_id)
            if cancelled is None:
                raise CancellationError(
                    CancellationErrorKind.NOT_FOUND, "Booking not found", booking_id
                )

        logger.info(f"Booking {booking_id} cancelled by {acting_user_id}")
        return cancelled

    def my_bookings(self, patient_id: str) -> List[BookingResponse]:
        """Confirmed bookings held by one patient."""
        with self._lock:
            return self.store.list_bookings(patient_id=patient_id, status=BookingStatus.CONFIRMED)

    def all_bookings(self) -> List[BookingResponse]:
        """The confirmed ledger, ordered by date then time."""
        with self._lock:
            bookings = self.store.list_bookings(status=BookingStatus.CONFIRMED)
        return sorted(bookings, key=lambda b: (b.date, b.time))
