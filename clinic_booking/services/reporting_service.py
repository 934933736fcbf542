from datetime import date
from typing import List, Optional

from ..schemas.booking import BookingResponse
from ..schemas.report import DashboardSummary
from .reservation_service import ReservationService

class ReportingService:
    """Read-only dashboard projections over the confirmed booking ledger."""

    def __init__(self, reservations: ReservationService):
        self.reservations = reservations

    def todays_bookings(self, today: Optional[date] = None) -> List[BookingResponse]:
        today = today or date.today()
        return [b for b in self.reservations.all_bookings() if b.date == today]

    def upcoming_bookings(self, today: Optional[date] = None) -> List[BookingResponse]:
        today = today or date.today()
        return [b for b in self.reservations.all_bookings() if b.date > today]

    def unique_patient_count(self) -> int:
        return len({b.patient_id for b in self.reservations.all_bookings()})

    def summary(self, today: Optional[date] = None) -> DashboardSummary:
        """Everything the admin dashboard shows, from one ledger snapshot."""
        today = today or date.today()
        bookings = self.reservations.all_bookings()
        return DashboardSummary(
            today=today,
            total_bookings=len(bookings),
            unique_patients=len({b.patient_id for b in bookings}),
            todays_bookings=[b for b in bookings if b.date == today],
            upcoming_bookings=[b for b in bookings if b.date > today],
        )
