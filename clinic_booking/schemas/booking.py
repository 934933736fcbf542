import datetime as dt
from pydantic import BaseModel, ConfigDict, Field

from ..models.booking import BookingStatus

class BookingCreate(BaseModel):
    slot_id: str

class BookingResponse(BaseModel):
    """A reservation record. Patient and slot fields are frozen at booking time."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    slot_id: str
    patient_id: str
    patient_name: str
    patient_email: str
    date: dt.date
    time: str
    status: BookingStatus = BookingStatus.CONFIRMED
    created_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))

class CancelResponse(BaseModel):
    ok: bool = True
    booking: BookingResponse
