import datetime as dt
from typing import List
from pydantic import BaseModel

from .booking import BookingResponse

class DashboardSummary(BaseModel):
    """Aggregates shown on the admin dashboard."""

    today: dt.date
    total_bookings: int
    unique_patients: int
    todays_bookings: List[BookingResponse]
    upcoming_bookings: List[BookingResponse]
