import threading
from typing import Dict, Iterable, List, Optional

from ..core.exceptions import RegistrationError, RegistrationErrorKind
from ..models.booking import BookingStatus
from ..schemas.booking import BookingResponse
from ..schemas.slot import SlotResponse
from ..schemas.user import UserInDB
from .base import ReservationStore


class InMemoryStore(ReservationStore):
    """Process-local store. Used by tests and for throwaway demo runs."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: Dict[str, UserInDB] = {}
        self._slots: Dict[str, SlotResponse] = {}
        self._bookings: Dict[str, BookingResponse] = {}

    def add_user(self, user: UserInDB) -> UserInDB:
        with self._lock:
            if any(u.email == user.email for u in self._users.values()):
                raise RegistrationError(
                    RegistrationErrorKind.DUPLICATE_EMAIL, "Email already registered"
                )
            self._users[user.id] = user.model_copy()
            return user.model_copy()

    def get_user(self, user_id: str) -> Optional[UserInDB]:
        with self._lock:
            user = self._users.get(user_id)
            return user.model_copy() if user else None

    def get_user_by_email(self, email: str) -> Optional[UserInDB]:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return user.model_copy()
            return None

    def count_users(self) -> int:
        with self._lock:
            return len(self._users)

    def add_slots(self, slots: Iterable[SlotResponse]) -> int:
        added = 0
        with self._lock:
            for slot in slots:
                if slot.id not in self._slots:
                    self._slots[slot.id] = slot.model_copy()
                    added += 1
        return added

    def get_slot(self, slot_id: str) -> Optional[SlotResponse]:
        with self._lock:
            slot = self._slots.get(slot_id)
            return slot.model_copy() if slot else None

    def list_slots(self, available_only: bool = False) -> List[SlotResponse]:
        with self._lock:
            slots = [s.model_copy() for s in self._slots.values() if s.available or not available_only]
        return sorted(slots, key=lambda s: (s.date, s.time))

    def count_slots(self) -> int:
        with self._lock:
            return len(self._slots)

    def get_booking(self, booking_id: str) -> Optional[BookingResponse]:
        with self._lock:
            booking = self._bookings.get(booking_id)
            return booking.model_copy() if booking else None

    def list_bookings(
        self,
        patient_id: Optional[str] = None,
        status: Optional[BookingStatus] = None,
    ) -> List[BookingResponse]:
        with self._lock:
            return [
                b.model_copy()
                for b in self._bookings.values()
                if (patient_id is None or b.patient_id == patient_id)
                and (status is None or b.status == status)
            ]

    def reserve(self, booking: BookingResponse) -> bool:
        with self._lock:
            slot = self._slots.get(booking.slot_id)
            if slot is None or not slot.available:
                return False
            self._slots[slot.id] = slot.model_copy(
                update={
                    "available": False,
                    "patient_id": booking.patient_id,
                    "patient_name": booking.patient_name,
                }
            )
            self._bookings[booking.id] = booking.model_copy()
            return True

    def release(self, booking_id: str) -> Optional[BookingResponse]:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                return None
            if booking.status == BookingStatus.CANCELLED:
                return booking.model_copy()

            booking = booking.model_copy(update={"status": BookingStatus.CANCELLED})
            self._bookings[booking_id] = booking
            slot = self._slots.get(booking.slot_id)
            if slot is not None:
                self._slots[slot.id] = slot.model_copy(
                    update={"available": True, "patient_id": None, "patient_name": None}
                )
            return booking.model_copy()
