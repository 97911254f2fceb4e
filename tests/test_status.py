#!/usr/bin/env python3
"""Tests for Status and Priority enums."""

import pytest

from fleet import Priority, Status


class TestStatus:
    """Tests for Status enum ordering."""

    def test_urgency_ordering(self):
        """Lower value = more urgent."""
        assert Status.EXPIRED.value < Status.EXPIRING_SOON.value
        assert Status.EXPIRING_SOON.value < Status.VALID.value
        assert Status.VALID.value < Status.UNKNOWN.value

    def test_wire_keys(self):
        assert Status.EXPIRED.key == "expired"
        assert Status.EXPIRING_SOON.key == "expiring_soon"
        assert Status.VALID.key == "valid"
        assert Status.UNKNOWN.key == "unknown"


class TestPriority:
    """Tests for Priority enum."""

    def test_urgency_ordering(self):
        assert Priority.HIGH.value < Priority.NORMAL.value < Priority.LOW.value

    def test_from_key_round_trip(self):
        for priority in Priority:
            assert Priority.from_key(priority.key) is priority

    def test_from_key_case_insensitive(self):
        assert Priority.from_key(" High ") is Priority.HIGH

    def test_from_key_unknown_raises(self):
        with pytest.raises(KeyError):
            Priority.from_key("urgent")
