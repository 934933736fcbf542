from fastapi import APIRouter, Depends, status
from typing import List

from ...api.deps import get_admin_user, get_current_identity, get_reservation_service
from ...core.security import SessionIdentity
from ...services.reservation_service import ReservationService
from ...schemas.booking import BookingCreate, BookingResponse, CancelResponse

router = APIRouter(prefix="/bookings", tags=["Bookings"])

@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def book_slot(
    data: BookingCreate,
    identity: SessionIdentity = Depends(get_current_identity),
    reservations: ReservationService = Depends(get_reservation_service),
):
    """Book an open slot for the current user."""
    return reservations.book(data.slot_id, identity.id)

@router.get("/me", response_model=List[BookingResponse])
async def my_bookings(
    identity: SessionIdentity = Depends(get_current_identity),
    reservations: ReservationService = Depends(get_reservation_service),
):
    """Confirmed bookings of the current user."""
    return reservations.my_bookings(identity.id)

@router.get("", response_model=List[BookingResponse])
async def all_bookings(
    admin: SessionIdentity = Depends(get_admin_user),
    reservations: ReservationService = Depends(get_reservation_service),
):
    """All confirmed bookings (admin only)."""
    return reservations.all_bookings()

@router.post("/{booking_id}/cancel", response_model=CancelResponse)
async def cancel_booking(
    booking_id: str,
    identity: SessionIdentity = Depends(get_current_identity),
    reservations: ReservationService = Depends(get_reservation_service),
):
    """Cancel a booking and release its slot."""
    booking = reservations.cancel(booking_id, identity.id)
    return CancelResponse(ok=True, booking=booking)
