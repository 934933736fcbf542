from datetime import date

from clinic_booking.services.calendar_service import generate_slots, seed_slots, slot_id_for


class TestGenerateSlots:

    def test_two_day_window(self):
        """Two weekdays at 09:00 and 10:00 yield four open slots in order."""
        slots = generate_slots(
            start_date=date(2024, 1, 1), window_days=2, start_hour=9, end_hour=10, exclude_weekends=True
        )

        assert [s.id for s in slots] == [
            "slot-2024-01-01-9",
            "slot-2024-01-01-10",
            "slot-2024-01-02-9",
            "slot-2024-01-02-10",
        ]
        assert [s.time for s in slots] == ["09:00", "10:00", "09:00", "10:00"]
        assert all(s.available and s.patient_id is None for s in slots)

    def test_end_hour_is_inclusive(self):
        """Reference hours 9..17 give nine slots per day."""
        slots = generate_slots(
            start_date=date(2024, 1, 1), window_days=1, start_hour=9, end_hour=17, exclude_weekends=True
        )
        assert len(slots) == 9
        assert slots[-1].time == "17:00"

    def test_weekends_skipped(self):
        """A Friday-to-Monday window only produces Friday and Monday."""
        slots = generate_slots(
            start_date=date(2024, 1, 5), window_days=4, start_hour=9, end_hour=9, exclude_weekends=True
        )
        assert [s.date for s in slots] == [date(2024, 1, 5), date(2024, 1, 8)]

    def test_weekends_kept_when_not_excluded(self):
        slots = generate_slots(
            start_date=date(2024, 1, 5), window_days=4, start_hour=9, end_hour=9, exclude_weekends=False
        )
        assert len(slots) == 4

    def test_ids_are_deterministic(self):
        """Regenerating the same window yields the same ids."""
        first = generate_slots(start_date=date(2024, 1, 1), window_days=3, start_hour=9, end_hour=11)
        second = generate_slots(start_date=date(2024, 1, 1), window_days=3, start_hour=9, end_hour=11)
        assert [s.id for s in first] == [s.id for s in second]
        assert len({s.id for s in first}) == len(first)
        assert slot_id_for(date(2024, 1, 2), 9) == "slot-2024-01-02-9"

    def test_empty_window(self):
        assert generate_slots(start_date=date(2024, 1, 1), window_days=0) == []


class TestSeedSlots:

    def test_seeds_only_once(self, store):
        """Seeding a populated store is a no-op."""
        window = dict(window_days=2, start_hour=9, end_hour=10, exclude_weekends=True)

        assert seed_slots(store, start_date=date(2024, 1, 1), **window) == 4
        assert seed_slots(store, start_date=date(2024, 1, 1), **window) == 0
        assert store.count_slots() == 4

    def test_add_slots_ignores_known_ids(self, store):
        slots = generate_slots(start_date=date(2024, 1, 1), window_days=1, start_hour=9, end_hour=10)
        store.add_slots(slots)

        assert store.add_slots(slots) == 0
        assert store.count_slots() == 2
