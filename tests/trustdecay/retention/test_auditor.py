"""Tests for the CSV evidence log."""

import csv
import io

import pytest

from trustdecay.retention.auditor import HEADER, EvidenceLogError, EvidenceLogger, format_row
from trustdecay.retention.models import Action, DecisionRecord, Sensitivity, Tier


def _record(time=5, object_id=1, action=Action.RETAIN, reason="high_trust_high_value", **kwargs):
    fields = dict(
        time=time,
        object_id=object_id,
        sensitivity=Sensitivity.PII,
        trust=0.812345,
        access_rate=0.25,
        legit_rate=0.2,
        suspicious_rate=0.05,
        risk=0.6,
        anomaly_score=0.025,
        predicted_relevance=0.73219,
        action=action,
        tier=Tier.HOT,
        anonymized=False,
        reason_code=reason,
    )
    fields.update(kwargs)
    return DecisionRecord(**fields)


class BrokenStream(io.StringIO):
    """StringIO that starts failing once ``broken`` is set."""

    def __init__(self):
        super().__init__()
        self.broken = False

    def write(self, s):
        if self.broken:
            raise OSError("No space left on device")
        return super().write(s)

    def flush(self):
        if self.broken:
            raise OSError("No space left on device")
        return super().flush()


class TestFormatRow:
    """Tests for row formatting."""

    def test_fields(self):
        """Test enum names, four decimals and lowercase booleans."""
        row = format_row(_record(anonymized=True, tier=Tier.COLD))

        assert row == [
            "5", "1", "PII", "0.8123", "0.2500", "0.2000", "0.0500",
            "0.6000", "0.0250", "0.7322", "RETAIN", "COLD", "true",
            "high_trust_high_value",
        ]

    def test_header(self):
        assert HEADER[0] == "time"
        assert HEADER[1] == "objectId"
        assert HEADER[-1] == "reasonCode"
        assert len(HEADER) == len(format_row(_record()))


class TestEvidenceLogger:
    """Tests for EvidenceLogger."""

    def test_writes_header_and_rows(self):
        stream = io.StringIO()
        logger = EvidenceLogger(stream=stream)
        logger.log(_record(time=5))
        logger.log(_record(time=6))

        rows = list(csv.reader(io.StringIO(stream.getvalue())))

        assert rows[0] == list(HEADER)
        assert len(rows) == 3
        assert rows[2][0] == "6"
        assert logger.rows_written == 2

    def test_writes_file(self, tmp_path):
        """Test a path target creates parent directories."""
        path = tmp_path / "out" / "audit.csv"
        with EvidenceLogger(path) as logger:
            logger.log(_record())

        lines = path.read_text().splitlines()
        assert lines[0].startswith("time,objectId,sensitivity")
        assert len(lines) == 2

    def test_changed_only_suppresses_repeats(self):
        """Test only action changes are logged per object."""
        stream = io.StringIO()
        logger = EvidenceLogger(stream=stream, changed_only=True)

        assert logger.log(_record(time=5, object_id=1)) is True
        assert logger.log(_record(time=6, object_id=1)) is False
        assert logger.log(_record(time=6, object_id=2)) is True
        assert logger.log(_record(time=7, object_id=1, action=Action.ARCHIVE)) is True
        assert logger.log(_record(time=8, object_id=1, action=Action.ARCHIVE)) is False

        assert logger.rows_written == 3
        assert logger.rows_suppressed == 2

    def test_full_log_keeps_repeats(self):
        logger = EvidenceLogger(stream=io.StringIO())
        for t in range(5):
            assert logger.log(_record(time=t)) is True

        assert logger.rows_written == 5

    def test_write_failure_raises(self):
        """Test I/O errors surface as EvidenceLogError."""
        stream = BrokenStream()
        logger = EvidenceLogger(stream=stream)
        before = stream.getvalue()
        stream.broken = True

        with pytest.raises(EvidenceLogError):
            logger.log(_record())
        assert stream.getvalue() == before
        assert logger.rows_written == 0

    def test_flush_failure_raises(self):
        stream = BrokenStream()
        logger = EvidenceLogger(stream=stream)
        stream.broken = True

        with pytest.raises(EvidenceLogError):
            logger.flush()

    def test_unwritable_path(self, tmp_path):
        """Test opening a directory as the log fails cleanly."""
        with pytest.raises(EvidenceLogError):
            EvidenceLogger(tmp_path)

    def test_requires_target(self):
        with pytest.raises(ValueError):
            EvidenceLogger()

    def test_close_is_idempotent(self):
        stream = io.StringIO()
        logger = EvidenceLogger(stream=stream)
        logger.close()
        logger.close()

        assert not stream.closed
