#!/usr/bin/env python3
"""Tests for FleetService orchestration."""

from datetime import date, datetime

import pytest

from fleet import (
    FleetService,
    Priority,
    RegistrySnapshot,
    ReminderKind,
    InvalidDateError,
    Reminder,
    SnapshotUnavailableError,
    Vehicle,
    VehicleExistsError,
    VehicleNotFoundError,
)

TODAY = date(2025, 6, 1)
NOW = datetime(2025, 6, 1, 9, 30)


class TestSyncVehicle:
    def test_sync_from_registry(self, service, store):
        result = service.sync_vehicle("ABC-123")

        assert result.changed
        assert [c.field for c in result.changes] == [
            "mileage",
            "reminders[0].date",
            "reminders[3]",
        ]
        saved = store.get_vehicle("ABC-123")
        assert saved == result.after
        assert saved.reminders[0].notes == "Policy 42"
        assert saved.reminders[3].kind is ReminderKind.ROADWORTHINESS

    def test_second_sync_is_noop(self, service):
        service.sync_vehicle("ABC-123")
        assert not service.sync_vehicle("ABC-123").changed

    def test_dry_run_does_not_save(self, service, store):
        before = store.get_vehicle("ABC-123")
        result = service.sync_vehicle("ABC-123", dry_run=True)
        assert result.changed
        assert store.get_vehicle("ABC-123") == before

    def test_explicit_snapshot(self, service, store):
        service.sync_vehicle("XYZ-9", RegistrySnapshot(make="Audi"))
        assert store.get_vehicle("XYZ-9").make == "Audi"

    def test_no_snapshot_available(self, service):
        with pytest.raises(SnapshotUnavailableError):
            service.sync_vehicle("XYZ-9")

    def test_no_registry_configured(self, store):
        with pytest.raises(SnapshotUnavailableError):
            FleetService(store).sync_vehicle("ABC-123")

    def test_unknown_vehicle(self, service):
        with pytest.raises(VehicleNotFoundError):
            service.sync_vehicle("NOPE", RegistrySnapshot(make="Audi"))


class TestGenerateNotifications:
    def test_generates_and_dedupes(self, service):
        first = service.generate_notifications(TODAY, NOW)
        assert len(first.candidates) == 3
        assert [n.id for n in first.inserted] == [1, 2, 3]

        second = service.generate_notifications(TODAY, NOW)
        assert len(second.candidates) == 3
        assert second.inserted == []

    def test_dismissed_not_recreated(self, service, store):
        service.generate_notifications(TODAY, NOW)
        store.dismiss(1)
        assert service.generate_notifications(date(2025, 6, 2), NOW).inserted == []
        assert [n.is_dismissed for n in store.all_notifications() if n.id == 1] == [True]

    def test_renewal_produces_new_notification(self, service, store):
        service.generate_notifications(TODAY, NOW)
        service.sync_vehicle("ABC-123", RegistrySnapshot(insurance_policy_date="2025-06-25"))
        inserted = service.generate_notifications(TODAY, NOW).inserted
        assert [n.identity_key for n in inserted] == ["ABC-123|insurance|2025-06-25"]

    def test_dry_run(self, service, store):
        result = service.generate_notifications(TODAY, NOW, dry_run=True)
        assert len(result.inserted) == 3
        assert store.all_notifications() == []

    def test_feed_is_ranked(self, service, store):
        service.generate_notifications(TODAY, NOW)
        store.dismiss(2)
        feed = service.feed()
        assert [n.priority for n in feed] == [Priority.HIGH, Priority.LOW]

    def test_summary(self, service):
        summary = service.summary(TODAY)
        assert (summary.expired, summary.expiring_soon, summary.valid) == (1, 2, 1)

    def test_unreadable_vehicle_does_not_block_others(self, service, store):
        store.vehicle_path("BROKEN").write_text("")
        result = service.generate_notifications(TODAY, NOW)
        assert len(result.inserted) == 3
        assert service.summary(TODAY).total == 4

    def test_stale_notifications(self, service, store):
        service.generate_notifications(TODAY, NOW)
        service.edit_reminder("XYZ-9", 0, enabled=False)
        stale = service.stale_notifications(TODAY)
        assert [n.identity_key for n in stale] == ["XYZ-9|roadworthiness|2025-06-05"]


class TestUserEdits:
    def test_edit_reminder_disable_stops_notifications(self, service, store):
        result = service.edit_reminder("ABC-123", 0, enabled=False)
        assert [c.field for c in result.changes] == ["reminders[0].enabled"]
        assert store.get_vehicle("ABC-123").reminders[0].enabled is False
        keys = [c.identity_key for c in service.generate_notifications(TODAY, NOW).candidates]
        assert "ABC-123|insurance|2025-05-20" not in keys

    def test_edit_reminder_date_and_notes(self, service, store):
        service.edit_reminder("ABC-123", 1, due_date="2025-07-01T10:00:00", notes="")
        reminder = store.get_vehicle("ABC-123").reminders[1]
        assert reminder == Reminder("Tyre change", "2025-07-01")

    def test_edit_keeps_unspecified_fields(self, service, store):
        service.edit_reminder("ABC-123", 0, due_date="2026-05-20")
        assert store.get_vehicle("ABC-123").reminders[0].notes == "Policy 42"

    def test_edit_without_changes_does_not_save(self, service, store):
        path = store.vehicle_path("ABC-123")
        before = path.read_text()
        assert not service.edit_reminder("ABC-123", 0, enabled=True).changed
        assert path.read_text() == before

    def test_edit_bad_index(self, service):
        with pytest.raises(IndexError):
            service.edit_reminder("ABC-123", 3, enabled=False)

    def test_edit_bad_date(self, service, store):
        with pytest.raises(InvalidDateError):
            service.edit_reminder("ABC-123", 0, due_date="soon")
        assert store.get_vehicle("ABC-123").reminders[0].date == "2025-05-20"

    def test_add_and_remove_reminder(self, service, store):
        vehicle = service.add_reminder("XYZ-9", Reminder("Tyre change", "2025-10-01"))
        assert len(vehicle.reminders) == 2
        removed = service.remove_reminder("XYZ-9", 0)
        assert removed.name == "Road Worthiness Certificate"
        assert [r.name for r in store.get_vehicle("XYZ-9").reminders] == ["Tyre change"]

    def test_create_and_delete_vehicle(self, service, store):
        service.create_vehicle(Vehicle("NEW-1"))
        with pytest.raises(VehicleExistsError):
            service.create_vehicle(Vehicle("NEW-1"))
        service.delete_vehicle("NEW-1")
        assert "NEW-1" not in store.vehicle_ids()
