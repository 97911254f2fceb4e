#!/usr/bin/env python3
"""Tests for vehicle change sets."""

from fleet import FieldChange, Reminder, Vehicle, diff_vehicles


class TestDiffVehicles:
    def test_no_changes(self):
        vehicle = Vehicle("A", reminders=[Reminder("Service Due", "2025-01-01")])
        assert diff_vehicles(vehicle, vehicle) == []

    def test_descriptive_and_reminder_changes(self):
        before = Vehicle("A", mileage=100, reminders=[Reminder("Service Due", "2025-01-01", False)])
        after = Vehicle("A", mileage=200, reminders=[Reminder("Service Due", "2026-01-01")])
        assert diff_vehicles(before, after) == [
            FieldChange("mileage", 100, 200),
            FieldChange("reminders[0].date", "2025-01-01", "2026-01-01"),
            FieldChange("reminders[0].enabled", False, True),
        ]

    def test_added_reminder(self):
        before = Vehicle("A")
        after = Vehicle("A", reminders=[Reminder("Insurance Renewal", "2025-01-01")])
        (change,) = diff_vehicles(before, after)
        assert change.field == "reminders[0]"
        assert change.old_value is None
        assert change.new_value == {
            "name": "Insurance Renewal",
            "date": "2025-01-01",
            "enabled": True,
            "notes": None,
        }

    def test_removed_reminder(self):
        before = Vehicle("A", reminders=[Reminder("Tyre change")])
        (change,) = diff_vehicles(before, Vehicle("A"))
        assert change.new_value is None

    def test_str(self):
        assert str(FieldChange("mileage", 1, 2)) == "mileage: 1 -> 2"
