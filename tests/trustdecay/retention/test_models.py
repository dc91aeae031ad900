"""Tests for retention models."""

import pytest

from trustdecay.retention.models import (
    Action,
    Decision,
    DecisionRecord,
    RiskSnapshot,
    Sensitivity,
    Tier,
    TrustHistory,
)


class TestSensitivity:
    """Tests for Sensitivity codes."""

    def test_codes(self):
        """Test model feature encoding."""
        assert Sensitivity.NON_SENSITIVE.code == 0.0
        assert Sensitivity.PII.code == 0.4
        assert Sensitivity.FINANCIAL.code == 0.7
        assert Sensitivity.HEALTH.code == 1.0


class TestRiskSnapshot:
    """Tests for RiskSnapshot.overwrite()."""

    def test_overwrite_clamps_and_flags(self):
        """Test values are clamped and the high-risk flag recomputed."""
        snapshot = RiskSnapshot()
        snapshot.overwrite(1.4, 0.95)

        assert snapshot.anomaly_score == 1.0
        assert snapshot.risk == 0.95
        assert snapshot.high_risk_flag is True

        snapshot.overwrite(-0.2, 0.5)

        assert snapshot.anomaly_score == 0.0
        assert snapshot.high_risk_flag is False

    def test_flag_threshold_is_inclusive(self):
        snapshot = RiskSnapshot()
        snapshot.overwrite(0.0, 0.70)

        assert snapshot.high_risk_flag is True


class TestTrustHistory:
    """Tests for convergence tracking."""

    def test_not_converged_until_full(self):
        """Test nine stable values are not enough."""
        history = TrustHistory(size=10, band=0.04)
        for t in range(9):
            assert history.observe(0.5, t) is False

        assert history.converged is False
        assert history.convergence_time == -1

    def test_converges_on_tenth_observation(self):
        """Test convergence is recorded at the tick that filled the buffer."""
        history = TrustHistory(size=10, band=0.04)
        results = [history.observe(0.5 + 0.001 * t, 100 + t) for t in range(10)]

        assert results[-1] is True
        assert history.convergence_time == 109

    def test_convergence_time_is_frozen(self):
        """Test later divergence does not reset convergence."""
        history = TrustHistory(size=10, band=0.04)
        for t in range(10):
            history.observe(0.6, t)
        for t in range(10, 30):
            assert history.observe(0.1 if t % 2 else 0.9, t) is False

        assert history.convergence_time == 9

    def test_wide_band_never_converges(self):
        """Test oscillating trust never converges."""
        history = TrustHistory(size=10, band=0.04)
        for t in range(50):
            history.observe(0.2 if t % 2 else 0.8, t)

        assert history.converged is False
        assert len(history.values()) == 10

    def test_band_is_inclusive(self):
        history = TrustHistory(size=2, band=0.25)
        history.observe(0.5, 0)
        history.observe(0.75, 1)

        assert history.convergence_time == 1


class TestTrackedObject:
    """Tests for TrackedObject."""

    def test_trust_and_value_clamped(self, make_object):
        """Test construction clamps unit-interval fields."""
        obj = make_object(trust=1.5, business_value=-0.3)

        assert obj.trust == 1.0
        assert obj.base_business_value == 0.0

    def test_set_trust_clamps(self, make_object):
        obj = make_object()
        obj.set_trust(-2.0)

        assert obj.trust == 0.0

    def test_defaults(self, make_object):
        """Test fresh objects start HOT and unaccessed."""
        obj = make_object()

        assert obj.tier == Tier.HOT
        assert obj.total_access_count == 0
        assert obj.anonymized is False
        assert obj.convergence_time == -1
        assert obj.is_deleted is False

    def test_mark_deleted(self, make_object):
        obj = make_object()
        obj.mark_deleted(42)

        assert obj.is_deleted is True
        assert obj.tier == Tier.DELETED
        assert obj.deleted_at == 42

    def test_independent_state(self, make_object):
        """Test default factories do not share state between objects."""
        a = make_object(object_id=1)
        b = make_object(object_id=2)
        a.access_stats.record(0, legit=True, suspicious=False)
        a.risk_stats.overwrite(0.3, 0.3)

        assert b.access_stats.total_count == 0
        assert b.risk_stats.risk == 0.0


class TestDecisionRecord:
    """Tests for DecisionRecord.capture()."""

    def test_capture_snapshots_state(self, make_object):
        """Test the record reflects the object after the decision."""
        obj = make_object(object_id=3, sensitivity=Sensitivity.PII, trust=0.6)
        for t in range(4):
            obj.access_stats.record(t, legit=True, suspicious=False)
        obj.access_stats.record(4, legit=False, suspicious=True)
        obj.risk_stats.overwrite(0.1, 0.6)
        obj.tier = Tier.COLD

        record = DecisionRecord.capture(7, obj, 0.42, Decision(Action.ARCHIVE, "mid_zone"))

        assert record.time == 7
        assert record.object_id == 3
        assert record.sensitivity == Sensitivity.PII
        assert record.access_rate == pytest.approx(0.25)
        assert record.legit_rate == pytest.approx(0.20)
        assert record.suspicious_rate == pytest.approx(0.05)
        assert record.risk == 0.6
        assert record.predicted_relevance == 0.42
        assert record.tier == Tier.COLD
        assert record.reason_code == "mid_zone"
