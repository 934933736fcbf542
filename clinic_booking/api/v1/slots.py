from fastapi import APIRouter, Depends
from typing import List

from ...api.deps import get_reservation_service
from ...services.reservation_service import ReservationService
from ...schemas.slot import AvailableSlot

router = APIRouter(prefix="/slots", tags=["Slots"])

@router.get("", response_model=List[AvailableSlot])
async def list_available_slots(
    reservations: ReservationService = Depends(get_reservation_service),
):
    """List open slots, earliest first."""
    return [AvailableSlot.from_slot(slot) for slot in reservations.list_available()]
