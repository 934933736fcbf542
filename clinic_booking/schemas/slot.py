import datetime as dt
from typing import Optional
from pydantic import BaseModel, ConfigDict

class SlotResponse(BaseModel):
    """A bookable calendar unit (date + hour)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    date: dt.date
    time: str
    available: bool = True
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None

class AvailableSlot(BaseModel):
    """Public projection of an open slot."""

    slot_id: str
    date: dt.date
    time: str

    @classmethod
    def from_slot(cls, slot: SlotResponse) -> "AvailableSlot":
        return cls(slot_id=slot.id, date=slot.date, time=slot.time)
