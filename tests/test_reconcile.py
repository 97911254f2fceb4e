#!/usr/bin/env python3
"""Tests for merging registry snapshots into vehicles."""

import logging

import pytest

from fleet import Reminder, ReminderKind, RegistrySnapshot, Vehicle, reconcile


@pytest.fixture
def vehicle():
    return Vehicle(
        "ABC-123",
        make="Volvo",
        model="V70",
        year=2012,
        mileage=180000,
        reminders=[
            Reminder("Insurance Renewal", "2024-01-10", notes="Policy 42"),
            Reminder("Tyre change", "2025-10-15"),
        ],
    )


@pytest.fixture
def snapshot():
    return RegistrySnapshot(
        road_worthiness_date="15.06.2025",
        insurance_policy_date="2025-01-10",
        mileage=185000,
    )


class TestReconcile:
    def test_updates_and_appends(self, vehicle, snapshot):
        result = reconcile(vehicle, snapshot)
        assert result.reminders == [
            Reminder("Insurance Renewal", "2025-01-10", notes="Policy 42"),
            Reminder("Tyre change", "2025-10-15"),
            Reminder("Road Worthiness Certificate", "2025-06-15"),
        ]
        assert result.mileage == 185000

    def test_idempotent(self, vehicle, snapshot):
        once = reconcile(vehicle, snapshot)
        assert reconcile(once, snapshot) == once

    def test_input_not_mutated(self, vehicle, snapshot):
        reconcile(vehicle, snapshot)
        assert vehicle.reminders[0].date == "2024-01-10"
        assert len(vehicle.reminders) == 2
        assert vehicle.mileage == 180000

    def test_missing_fields_are_left_alone(self, vehicle):
        result = reconcile(vehicle, RegistrySnapshot())
        assert result == vehicle

    def test_descriptive_fields_fill_missing(self):
        result = reconcile(Vehicle("XYZ-9"), RegistrySnapshot(make="Audi", year=2019))
        assert (result.make, result.model, result.year) == ("Audi", None, 2019)

    def test_legacy_name_and_notes_preserved(self):
        vehicle = Vehicle("OLD-1", reminders=[Reminder("OCTA", "2024-03-01", notes="broker")])
        result = reconcile(vehicle, RegistrySnapshot(insurance_policy_date="2025-03-01"))
        assert result.reminders == [Reminder("OCTA", "2025-03-01", notes="broker")]

    def test_reenables_disabled_reminder(self):
        vehicle = Vehicle(
            "OLD-2", reminders=[Reminder("Road Worthiness", "2024-06-01", enabled=False)]
        )
        result = reconcile(vehicle, RegistrySnapshot(road_worthiness_date="2025-06-01"))
        assert result.reminders[0].enabled is True

    def test_custom_reminder_with_similar_name_untouched(self):
        vehicle = Vehicle("C-1", reminders=[Reminder("Insurance notes", "2020-01-01")])
        result = reconcile(vehicle, RegistrySnapshot(insurance_policy_date="2025-01-01"))
        assert result.reminders[0] == Reminder("Insurance notes", "2020-01-01")
        assert result.reminders[1] == Reminder("Insurance Renewal", "2025-01-01")

    def test_unparseable_date_is_ignored(self, vehicle):
        result = reconcile(vehicle, RegistrySnapshot(road_worthiness_date="soon"))
        assert result.find_reminder_index(ReminderKind.ROADWORTHINESS) is None

    def test_repeated_syncs_never_duplicate_kinds(self, vehicle):
        result = vehicle
        for day in ("01", "02", "03"):
            result = reconcile(
                result,
                RegistrySnapshot(
                    road_worthiness_date=f"{day}.06.2025",
                    insurance_policy_date=f"2025-01-{day}",
                ),
            )
        assert result.duplicate_kinds() == []
        assert len(result.reminders_of_kind(ReminderKind.ROADWORTHINESS)) == 1
        assert result.reminders[-1].date == "2025-06-03"

    def test_legacy_duplicates_update_first_only(self, caplog):
        vehicle = Vehicle(
            "DUP-1",
            reminders=[
                Reminder("Insurance", "2024-01-01"),
                Reminder("Insurance Renewal", "2024-02-01"),
            ],
        )
        with caplog.at_level(logging.WARNING, logger="fleet.reconcile"):
            result = reconcile(vehicle, RegistrySnapshot(insurance_policy_date="2025-01-01"))
        assert [r.date for r in result.reminders] == ["2025-01-01", "2024-02-01"]
        assert "DUP-1" in caplog.text

    def test_null_insurance_date_keeps_insurance_reminder(self):
        vehicle = Vehicle("ABC-123", reminders=[Reminder("Insurance Renewal", "2024-01-10")])
        result = reconcile(vehicle, RegistrySnapshot(road_worthiness_date="15.06.2025"))
        assert result.reminders == [
            Reminder("Insurance Renewal", "2024-01-10"),
            Reminder("Road Worthiness Certificate", "2025-06-15"),
        ]

    def test_stored_kind_conflicting_with_label_is_not_duplicated(self):
        vehicle = Vehicle(
            "ABC-123",
            reminders=[Reminder("Insurance Renewal", "2024-01-10", kind=ReminderKind.CUSTOM)],
        )
        snapshot = RegistrySnapshot(insurance_policy_date="2025-01-10")
        result = reconcile(vehicle, snapshot)
        assert [r.name for r in result.reminders] == ["Insurance Renewal"]
        assert result.reminders[0].date == "2025-01-10"
        assert result.reminders[0].kind is ReminderKind.INSURANCE
        assert reconcile(result, snapshot) == result
