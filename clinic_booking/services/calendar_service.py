from datetime import date, timedelta
from typing import List, Optional
import logging

from ..core.config import settings
from ..repositories.base import ReservationStore
from ..schemas.slot import SlotResponse

logger = logging.getLogger(__name__)

# date.weekday() values
WEEKEND_DAYS = (5, 6)

def slot_id_for(day: date, hour: int) -> str:
    """Deterministic slot id, so regenerating a window never collides."""
    return f"slot-{day.isoformat()}-{hour}"

def generate_slots(
    start_date: Optional[date] = None,
    window_days: int = settings.SLOT_WINDOW_DAYS,
    start_hour: int = settings.SLOT_START_HOUR,
    end_hour: int = settings.SLOT_END_HOUR,
    exclude_weekends: bool = settings.SLOT_EXCLUDE_WEEKENDS,
) -> List[SlotResponse]:
    """Build open hourly slots for a rolling window, ordered by date then hour.

    ``end_hour`` is inclusive: 9..17 yields nine slots per working day.
    """
    start_date = start_date or date.today()
    slots = []

    for offset in range(window_days):
        day = start_date + timedelta(days=offset)
        if exclude_weekends and day.weekday() in WEEKEND_DAYS:
            continue

        for hour in range(start_hour, end_hour + 1):
            slots.append(
                SlotResponse(
                    id=slot_id_for(day, hour),
                    date=day,
                    time=f"{hour:02d}:00",
                    available=True,
                )
            )

    return slots

def seed_slots(store: ReservationStore, start_date: Optional[date] = None, **window) -> int:
    """Populate the initial calendar once. Returns the number of slots created."""
    if store.count_slots() > 0:
        logger.info("Slot calendar already present, skipping generation")
        return 0

    slots = generate_slots(start_date=start_date, **window)
    added = store.add_slots(slots)
    logger.info(f"Generated {added} slots starting {slots[0].date if slots else start_date}")
    return added
