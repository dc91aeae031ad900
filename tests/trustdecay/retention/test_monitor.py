"""Tests for AccessMonitor."""

import pytest

from trustdecay.retention.models import AccessEvent, Role, Sensitivity
from trustdecay.retention.monitor import AccessMonitor


class TestRoleLegitimacy:
    """Tests for the role/sensitivity permission matrix."""

    @pytest.mark.parametrize("role,sensitivity,expected", [
        (Role.ADMIN, Sensitivity.HEALTH, True),
        (Role.ADMIN, Sensitivity.NON_SENSITIVE, True),
        (Role.ANALYST, Sensitivity.NON_SENSITIVE, True),
        (Role.ANALYST, Sensitivity.FINANCIAL, False),
        (Role.USER, Sensitivity.NON_SENSITIVE, True),
        (Role.USER, Sensitivity.PII, False),
        (Role.SERVICE, Sensitivity.PII, True),
        (Role.SERVICE, Sensitivity.HEALTH, False),
    ])
    def test_matrix(self, make_object, role, sensitivity, expected):
        obj = make_object(sensitivity=sensitivity)

        assert AccessMonitor.is_role_legitimate(role, obj) is expected

    def test_analyst_allowed_on_anonymized(self, make_object):
        """Test anonymized sensitive data is open to analysts."""
        obj = make_object(sensitivity=Sensitivity.HEALTH, anonymized=True)

        assert AccessMonitor.is_role_legitimate(Role.ANALYST, obj) is True
        assert AccessMonitor.is_role_legitimate(Role.USER, obj) is False


class TestOnAccess:
    """Tests for event handling."""

    def test_legit_access(self, make_object):
        """Test an allowed role with a good score is legitimate."""
        monitor = AccessMonitor(request_score_threshold=0.55)
        obj = make_object()

        result = monitor.on_access(obj, AccessEvent(4, 0, Role.USER, True, 0.9))

        assert result.legitimate is True
        assert result.suspicious is False
        assert obj.last_access_time == 4
        assert obj.total_access_count == 1
        assert obj.access_stats.legit_count == 1

    def test_low_score_is_suspicious(self, make_object):
        """Test the score gate applies even for allowed roles."""
        monitor = AccessMonitor(request_score_threshold=0.55)
        obj = make_object()

        result = monitor.on_access(obj, AccessEvent(1, 0, Role.ADMIN, True, 0.54))

        assert result.legitimate is False
        assert result.suspicious is True
        assert obj.access_stats.suspicious_count == 1

    def test_producer_flag_is_ignored(self, make_object):
        """Test legitimacy is decided by the monitor, not the event."""
        monitor = AccessMonitor()
        obj = make_object(sensitivity=Sensitivity.HEALTH)

        result = monitor.on_access(obj, AccessEvent(1, 0, Role.USER, True, 0.99))

        assert result.legitimate is False

    def test_suspicious_access_updates_last_access(self, make_object):
        monitor = AccessMonitor()
        obj = make_object()
        monitor.on_access(obj, AccessEvent(9, 0, Role.USER, False, 0.1))

        assert obj.last_access_time == 9
        assert obj.total_access_count == 1

    def test_burst_reported(self, make_object):
        """Test the result reports bursts after repeated bad requests."""
        monitor = AccessMonitor()
        obj = make_object(sensitivity=Sensitivity.FINANCIAL)
        results = [
            monitor.on_access(obj, AccessEvent(10 + i // 2, 0, Role.USER, False, 0.2))
            for i in range(5)
        ]

        assert results[-1].burst_detected is True
        assert results[0].burst_detected is False


class TestIngest:
    """Tests for batch delivery."""

    def test_unknown_ids_are_skipped(self, make_object):
        """Test events for missing objects are discarded."""
        monitor = AccessMonitor()
        objects = {0: make_object(object_id=0), 1: make_object(object_id=1)}
        events = [
            AccessEvent(2, 0, Role.USER, True, 0.9),
            AccessEvent(2, 99, Role.USER, True, 0.9),
            AccessEvent(2, 1, Role.USER, True, 0.9),
            AccessEvent(2, 1, Role.USER, True, 0.9),
        ]

        applied = monitor.ingest(objects, events)

        assert applied == 3
        assert objects[0].total_access_count == 1
        assert objects[1].total_access_count == 2

    def test_empty_batch(self, make_object):
        assert AccessMonitor().ingest({0: make_object()}, []) == 0

    def test_deleted_objects_are_skipped(self, make_object):
        """Test events never touch a deleted object."""
        monitor = AccessMonitor()
        gone = make_object(object_id=0, sensitivity=Sensitivity.HEALTH)
        gone.mark_deleted(3)
        objects = {0: gone}
        events = [AccessEvent(10, 0, Role.USER, False, 0.2) for _ in range(3)]

        applied = monitor.ingest(objects, events)

        assert applied == 0
        assert gone.total_access_count == 0
        assert gone.last_access_time == 0
        assert gone.access_stats.total_count == 0
