"""
AccessMonitor - Routes access events into per-object access windows.

An access counts as legitimate only if the requester's role may touch the
object's sensitivity class AND the request score clears the threshold.
Everything else is recorded as suspicious.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from trustdecay.config.defaults import REQUEST_SCORE_THRESHOLD

from .models import AccessEvent, MonitoringResult, Role, Sensitivity, TrackedObject

logger = logging.getLogger(__name__)


class AccessMonitor:
    """Update last-access bookkeeping and the sliding window per event."""

    def __init__(self, request_score_threshold: float = REQUEST_SCORE_THRESHOLD):
        self.request_score_threshold = request_score_threshold

    @staticmethod
    def is_role_legitimate(role: Role, obj: TrackedObject) -> bool:
        s = obj.sensitivity
        if role == Role.ADMIN:
            return True
        if role == Role.ANALYST:
            return s == Sensitivity.NON_SENSITIVE or obj.anonymized
        if role == Role.USER:
            return s == Sensitivity.NON_SENSITIVE
        if role == Role.SERVICE:
            return s in (Sensitivity.NON_SENSITIVE, Sensitivity.PII)
        return False

    def on_access(self, obj: TrackedObject, event: AccessEvent) -> MonitoringResult:
        """Apply one event to its target object."""
        obj.last_access_time = event.time
        obj.total_access_count += 1

        allowed = self.is_role_legitimate(event.role, obj)
        score_ok = event.request_score >= self.request_score_threshold
        legit = allowed and score_ok

        obj.access_stats.record(event.time, legit=legit, suspicious=not legit)

        return MonitoringResult(
            legitimate=legit,
            suspicious=not legit,
            burst_detected=obj.access_stats.burst_detected(event.time),
        )

    def ingest(
        self,
        objects: Mapping[int, TrackedObject],
        events: Iterable[AccessEvent],
    ) -> int:
        """
        Deliver a tick's events in order.

        Events for unknown or deleted objects are dropped.

        Returns:
            Number of events applied
        """
        applied = 0
        for event in events:
            obj = objects.get(event.object_id)
            if obj is None:
                logger.debug(f"Skipping event for unknown object {event.object_id}")
                continue
            if obj.is_deleted:
                logger.debug(f"Skipping event for deleted object {event.object_id}")
                continue
            self.on_access(obj, event)
            applied += 1
        return applied
