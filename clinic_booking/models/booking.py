from sqlalchemy import Column, String, ForeignKey, Date, DateTime, Index, Enum as SQLEnum
from sqlalchemy.sql import func
import enum

from ..core.database import Base

class BookingStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

class Booking(Base):
    __tablename__ = "bookings"
    
    id = Column(String(64), primary_key=True, index=True)
    slot_id = Column(String(64), ForeignKey("slots.id"), nullable=False, index=True)
    
    # Patient snapshot at booking time
    patient_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    patient_name = Column(String(255), nullable=False)
    patient_email = Column(String(255), nullable=False)
    
    # Copied from the slot for reporting
    date = Column(Date, nullable=False, index=True)
    time = Column(String(5), nullable=False)
    status = Column(SQLEnum(BookingStatus), nullable=False, default=BookingStatus.CONFIRMED)
    
    created_at = Column(DateTime, server_default=func.now())
    
    __table_args__ = (
        # At most one confirmed booking per slot
        Index(
            "uq_bookings_confirmed_slot",
            "slot_id",
            unique=True,
            sqlite_where=(status == BookingStatus.CONFIRMED),
            postgresql_where=(status == BookingStatus.CONFIRMED),
        ),
    )
    
    def __repr__(self):
        return f"<Booking(id={self.id}, slot_id={self.slot_id}, patient_id={self.patient_id}, status='{self.status}')>"
