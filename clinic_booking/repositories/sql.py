from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.database import create_db_engine, create_session_factory, init_db
from ..core.exceptions import (
    ClinicBookingError,
    RegistrationError,
    RegistrationErrorKind,
    StorageError,
)
from ..models.booking import Booking, BookingStatus
from ..models.slot import Slot
from ..models.user import User
from ..schemas.booking import BookingResponse
from ..schemas.slot import SlotResponse
from ..schemas.user import UserInDB
from .base import ReservationStore

logger = logging.getLogger(__name__)


class SQLAlchemyStore(ReservationStore):
    """Durable store backed by any SQLAlchemy database. Commits after every mutation."""

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None):
        if engine is None:
            if database_url is None:
                raise ValueError("database_url or engine is required")
            engine = create_db_engine(database_url)
        self.engine = engine
        self._session_factory = create_session_factory(engine)

    def init(self) -> None:
        try:
            init_db(self.engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to initialize database: {exc}") from exc

    def close(self) -> None:
        self.engine.dispose()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except ClinicBookingError:
            db.rollback()
            raise
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(f"Database operation failed: {exc}")
            raise StorageError(f"Database operation failed: {exc}") from exc
        finally:
            db.close()

    # Users

    def add_user(self, user: UserInDB) -> UserInDB:
        with self._session() as db:
            if db.query(User).filter(User.email == user.email).first():
                raise RegistrationError(
                    RegistrationErrorKind.DUPLICATE_EMAIL, "Email already registered"
                )
            row = User(
                id=user.id,
                email=user.email,
                name=user.name,
                password_hash=user.password_hash,
                role=user.role,
                created_at=user.created_at,
            )
            db.add(row)
            try:
                db.flush()
            except IntegrityError as exc:
                # Lost a race with a concurrent registration
                raise RegistrationError(
                    RegistrationErrorKind.DUPLICATE_EMAIL, "Email already registered"
                ) from exc
            return UserInDB.model_validate(row)

    def get_user(self, user_id: str) -> Optional[UserInDB]:
        with self._session() as db:
            row = db.query(User).filter(User.id == user_id).first()
            return UserInDB.model_validate(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[UserInDB]:
        with self._session() as db:
            row = db.query(User).filter(User.email == email).first()
            return UserInDB.model_validate(row) if row else None

    def count_users(self) -> int:
        with self._session() as db:
            return db.query(User).count()

    # Slots

    def add_slots(self, slots: Iterable[SlotResponse]) -> int:
        added = 0
        with self._session() as db:
            existing = {slot_id for (slot_id,) in db.query(Slot.id).all()}
            for slot in slots:
                if slot.id in existing:
                    continue
                db.add(
                    Slot(
                        id=slot.id,
                        date=slot.date,
                        time=slot.time,
                        available=slot.available,
                        patient_id=slot.patient_id,
                        patient_name=slot.patient_name,
                    )
                )
                existing.add(slot.id)
                added += 1
        return added

    def get_slot(self, slot_id: str) -> Optional[SlotResponse]:
        with self._session() as db:
            row = db.query(Slot).filter(Slot.id == slot_id).first()
            return SlotResponse.model_validate(row) if row else None

    def list_slots(self, available_only: bool = False) -> List[SlotResponse]:
        with self._session() as db:
            query = db.query(Slot)
            if available_only:
                query = query.filter(Slot.available == True)  # noqa: E712
            rows = query.order_by(Slot.date, Slot.time).all()
            return [SlotResponse.model_validate(row) for row in rows]

    def count_slots(self) -> int:
        with self._session() as db:
            return db.query(Slot).count()

    # Bookings

    def get_booking(self, booking_id: str) -> Optional[BookingResponse]:
        with self._session() as db:
            row = db.query(Booking).filter(Booking.id == booking_id).first()
            return BookingResponse.model_validate(row) if row else None

    def list_bookings(
        self,
        patient_id: Optional[str] = None,
        status: Optional[BookingStatus] = None,
    ) -> List[BookingResponse]:
        with self._session() as db:
            query = db.query(Booking)
            if patient_id is not None:
                query = query.filter(Booking.patient_id == patient_id)
            if status is not None:
                query = query.filter(Booking.status == status)
            rows = query.order_by(Booking.created_at, Booking.id).all()
            return [BookingResponse.model_validate(row) for row in rows]

    # Transitions

    def reserve(self, booking: BookingResponse) -> bool:
        with self._session() as db:
            # Conditional update: only one writer can flip an open slot
            updated = (
                db.query(Slot)
                .filter(Slot.id == booking.slot_id, Slot.available == True)  # noqa: E712
                .update(
                    {
                        Slot.available: False,
                        Slot.patient_id: booking.patient_id,
                        Slot.patient_name: booking.patient_name,
                    },
                    synchronize_session=False,
                )
            )
            if updated != 1:
                return False

            db.add(
                Booking(
                    id=booking.id,
                    slot_id=booking.slot_id,
                    patient_id=booking.patient_id,
                    patient_name=booking.patient_name,
                    patient_email=booking.patient_email,
                    date=booking.date,
                    time=booking.time,
                    status=booking.status,
                    created_at=booking.created_at,
                )
            )
            try:
                db.flush()
            except IntegrityError:
                db.rollback()
                logger.warning(f"Slot {booking.slot_id} already holds a confirmed booking")
                return False
            return True

    def release(self, booking_id: str) -> Optional[BookingResponse]:
        with self._session() as db:
            row = db.query(Booking).filter(Booking.id == booking_id).with_for_update().first()
            if row is None:
                return None
            if row.status == BookingStatus.CANCELLED:
                return BookingResponse.model_validate(row)

            row.status = BookingStatus.CANCELLED
            db.query(Slot).filter(Slot.id == row.slot_id).update(
                {Slot.available: True, Slot.patient_id: None, Slot.patient_name: None},
                synchronize_session=False,
            )
            db.flush()
            return BookingResponse.model_validate(row)
