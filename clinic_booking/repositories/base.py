from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ..models.booking import BookingStatus
from ..schemas.booking import BookingResponse
from ..schemas.slot import SlotResponse
from ..schemas.user import UserInDB


class ReservationStore(ABC):
    """Storage for users, slots and bookings.

    Implementations return detached snapshots: mutating a returned object
    never changes stored state. ``reserve`` and ``release`` each apply a slot
    transition and its booking change as one indivisible unit.
    """

    def init(self) -> None:
        """Prepare the backing storage (create tables, etc.)."""

    def close(self) -> None:
        """Release resources held by this store."""

    # Users

    @abstractmethod
    def add_user(self, user: UserInDB) -> UserInDB:
        """Persist a new user.

        Raises:
            RegistrationError: DUPLICATE_EMAIL if the email is taken.
            StorageError: If the backing store fails.
        """

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[UserInDB]:
        """Look up a user by id."""

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[UserInDB]:
        """Look up a user by exact email."""

    @abstractmethod
    def count_users(self) -> int:
        """Number of registered users."""

    # Slots

    @abstractmethod
    def add_slots(self, slots: Iterable[SlotResponse]) -> int:
        """Insert slots whose id is not stored yet. Returns the number added."""

    @abstractmethod
    def get_slot(self, slot_id: str) -> Optional[SlotResponse]:
        """Look up a slot by id."""

    @abstractmethod
    def list_slots(self, available_only: bool = False) -> List[SlotResponse]:
        """Slots ordered by date then time."""

    @abstractmethod
    def count_slots(self) -> int:
        """Number of stored slots."""

    # Bookings

    @abstractmethod
    def get_booking(self, booking_id: str) -> Optional[BookingResponse]:
        """Look up a booking by id."""

    @abstractmethod
    def list_bookings(
        self,
        patient_id: Optional[str] = None,
        status: Optional[BookingStatus] = None,
    ) -> List[BookingResponse]:
        """Bookings in creation order, optionally filtered."""

    # Transitions

    @abstractmethod
    def reserve(self, booking: BookingResponse) -> bool:
        """Mark ``booking.slot_id`` reserved and append ``booking``.

        Returns:
            False, with nothing written, if the slot is missing or already
            reserved.
        """

    @abstractmethod
    def release(self, booking_id: str) -> Optional[BookingResponse]:
        """Cancel a booking and reopen its slot if the slot still exists.

        Returns:
            The updated booking, or None if it does not exist.
        """
