#!/usr/bin/env python3
"""Tests for feed reconciliation and notification flags."""

from datetime import datetime

import pytest

from fleet import (
    Notification,
    NotificationCandidate,
    Priority,
    dismiss,
    find_stale,
    mark_read,
    reconcile_feed,
)
from fleet.feed import rank_feed

NOW = datetime(2025, 6, 1, 9, 30)


def candidate(vehicle_id="ABC-123", kind="insurance", due="2025-05-20", priority=Priority.HIGH):
    return NotificationCandidate(
        vehicle_id=vehicle_id,
        reminder_kind=kind,
        reminder_name=kind.title(),
        due_date=due,
        days_until_due=-12,
        priority=priority,
    )


@pytest.fixture
def stored():
    return Notification.from_candidate(candidate(), created_at="2025-05-30T08:00:00")


class TestReconcileFeed:
    def test_new_candidate_inserted(self):
        update = reconcile_feed([candidate()], [], NOW)
        assert len(update.to_insert) == 1
        row = update.to_insert[0]
        assert row.identity_key == "ABC-123|insurance|2025-05-20"
        assert row.created_at == "2025-06-01T09:30:00"
        assert row.id is None
        assert not row.is_read and not row.is_dismissed

    def test_existing_key_not_reinserted(self, stored):
        update = reconcile_feed([candidate()], [stored], NOW)
        assert update.to_insert == []
        assert update.unchanged == [stored]

    def test_dismissed_stays_dismissed(self, stored):
        update = reconcile_feed([candidate()], [dismiss(stored)], NOW)
        assert update.to_insert == []

    def test_new_due_date_is_new_notification(self, stored):
        update = reconcile_feed([candidate(due="2026-05-20")], [dismiss(stored)], NOW)
        assert [n.due_date for n in update.to_insert] == ["2026-05-20"]

    def test_duplicate_candidates_insert_once(self):
        update = reconcile_feed([candidate(), candidate()], [], NOW)
        assert len(update.to_insert) == 1

    def test_idempotent_over_repeated_runs(self):
        first = reconcile_feed([candidate()], [], NOW)
        second = reconcile_feed([candidate()], first.to_insert, NOW)
        assert second.to_insert == []

    def test_stale_notifications_left_untouched(self, stored):
        update = reconcile_feed([], [stored], NOW)
        assert update.unchanged == [stored]


class TestFindStale:
    def test_reports_visible_without_candidate(self, stored):
        assert find_stale([stored], []) == [stored]

    def test_ignores_dismissed(self, stored):
        assert find_stale([dismiss(stored)], []) == []

    def test_backed_by_candidate(self, stored):
        assert find_stale([stored], [candidate()]) == []


class TestFlags:
    def test_mark_read(self, stored):
        read = mark_read(stored)
        assert read.is_read
        assert not stored.is_read

    def test_dismiss(self, stored):
        dismissed = dismiss(stored)
        assert dismissed.is_dismissed
        assert not dismissed.is_visible
        assert stored.is_visible


class TestRankFeed:
    def test_priority_then_due_date_then_newest(self):
        low = Notification.from_candidate(
            candidate(kind="service", due="2025-06-20", priority=Priority.LOW), "2025-06-01T00:00:00"
        )
        high_late = Notification.from_candidate(candidate(due="2025-06-05"), "2025-06-01T00:00:00")
        high_old = Notification.from_candidate(candidate(due="2025-05-20"), "2025-05-01T00:00:00")
        high_new = Notification.from_candidate(
            candidate(vehicle_id="B", due="2025-05-20"), "2025-05-02T00:00:00"
        )
        ranked = rank_feed([low, high_late, high_old, high_new])
        assert ranked == [high_new, high_old, high_late, low]
