"""
EvidenceLogger - CSV audit trail of every retention decision.

One row per (tick, object). Rows are fully formatted before they are
written, so an I/O failure never leaves a half-written row behind.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Dict, Optional, TextIO

from trustdecay.config.defaults import EVIDENCE_LOG_CHANGED_ONLY

from .models import Action, DecisionRecord

logger = logging.getLogger(__name__)

HEADER = (
    "time",
    "objectId",
    "sensitivity",
    "trust",
    "accessRate",
    "legitRate",
    "suspiciousRate",
    "risk",
    "anomalyScore",
    "predictedRelevance",
    "action",
    "tier",
    "anonymized",
    "reasonCode",
)


class EvidenceLogError(Exception):
    """The evidence log could not be written."""
    pass


def format_row(record: DecisionRecord) -> list[str]:
    """Render a record as CSV fields."""
    return [
        str(record.time),
        str(record.object_id),
        record.sensitivity.name,
        f"{record.trust:.4f}",
        f"{record.access_rate:.4f}",
        f"{record.legit_rate:.4f}",
        f"{record.suspicious_rate:.4f}",
        f"{record.risk:.4f}",
        f"{record.anomaly_score:.4f}",
        f"{record.predicted_relevance:.4f}",
        record.action.name,
        record.tier.name,
        "true" if record.anonymized else "false",
        record.reason_code or "",
    ]


class EvidenceLogger:
    """
    Buffered CSV writer for decision records.

    With ``changed_only`` a row is suppressed when its action equals the
    previous logged action of the same object.
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        changed_only: bool = EVIDENCE_LOG_CHANGED_ONLY,
        stream: Optional[TextIO] = None,
    ):
        if path is None and stream is None:
            raise ValueError("EvidenceLogger needs a path or a stream")
        self.path = Path(path) if path is not None else None
        self.changed_only = changed_only
        self.rows_written = 0
        self.rows_suppressed = 0
        self._last_action: Dict[int, Action] = {}
        self._owns_stream = stream is None

        if stream is None:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                stream = open(self.path, "w", encoding="utf-8", newline="")
            except OSError as e:
                raise EvidenceLogError(f"Cannot open evidence log {self.path}: {e}") from e
        self._stream = stream
        self._closed = False

        self._write_line(HEADER)
        self.flush()

    def _write_line(self, fields) -> None:
        buf = io.StringIO()
        csv.writer(buf, lineterminator="\n").writerow(fields)
        try:
            self._stream.write(buf.getvalue())
        except OSError as e:
            raise EvidenceLogError(f"Failed to write evidence log: {e}") from e

    def log(self, record: DecisionRecord) -> bool:
        """
        Append a record.

        Returns:
            True if a row was written, False if suppressed
        """
        if self.changed_only:
            last = self._last_action.get(record.object_id)
            if last is not None and last == record.action:
                self.rows_suppressed += 1
                return False
            self._last_action[record.object_id] = record.action

        self._write_line(format_row(record))
        self.rows_written += 1
        return True

    def flush(self) -> None:
        try:
            self._stream.flush()
        except OSError as e:
            raise EvidenceLogError(f"Failed to flush evidence log: {e}") from e

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._stream.flush()
            if self._owns_stream:
                self._stream.close()
        except OSError as e:
            raise EvidenceLogError(f"Failed to close evidence log: {e}") from e
        logger.debug(f"Evidence log closed after {self.rows_written} rows")

    def __enter__(self) -> "EvidenceLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
