"""Run metrics - storage cost, privacy exposure, compliance and accuracy."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, Optional

from trustdecay.config.defaults import (
    STORAGE_COST_COLD,
    STORAGE_COST_DELETED,
    STORAGE_COST_HOT,
)
from trustdecay.retention.models import Sensitivity, Tier, TrackedObject

TIER_COST = {
    Tier.HOT: STORAGE_COST_HOT,
    Tier.COLD: STORAGE_COST_COLD,
    Tier.DELETED: STORAGE_COST_DELETED,
}


def tier_cost(tier: Tier) -> float:
    return TIER_COST.get(tier, STORAGE_COST_HOT)


@dataclass
class RunSummary:
    """End-of-run metrics."""
    storage_cost_reduction: float
    privacy_risk_exposure: float
    compliance_violation_incidents: int
    avg_trust_convergence_time: float
    converged_objects: int
    false_deletion_rate: float
    retention_efficiency: float
    duration: int

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    def __str__(self) -> str:
        return "\n".join([
            "Simulation Metrics Summary",
            f" - Duration (ticks): {self.duration}",
            f" - Storage cost reduction: {100.0 * self.storage_cost_reduction:.2f}%",
            f" - Privacy risk exposure (sum): {self.privacy_risk_exposure:.2f}",
            f" - Compliance violation incidents: {self.compliance_violation_incidents}",
            f" - Trust convergence (avg tick, -1 if none): {self.avg_trust_convergence_time:.2f}",
            f" - Trust converged objects: {self.converged_objects}",
            f" - False deletion rate: {self.false_deletion_rate:.4f}",
            f" - Retention efficiency: {self.retention_efficiency:.4f}",
        ])


class MetricsCollector:
    """
    Accumulate per-tick metrics over the object population.

    Baseline storage assumes every object stays HOT for every evaluated tick.
    """

    def __init__(self, num_objects: int, duration: int):
        self.num_objects = num_objects
        self.duration = duration
        self.ticks_observed = 0

        self.baseline_storage_cost = 0.0
        self.actual_storage_cost = 0.0
        self.privacy_risk_exposure = 0.0
        self.compliance_violation_incidents = 0

    def on_tick(self, objects: Iterable[TrackedObject]) -> None:
        """Accumulate after all decisions of a tick are applied."""
        self.ticks_observed += 1
        self.baseline_storage_cost += self.num_objects * STORAGE_COST_HOT

        for obj in objects:
            self.actual_storage_cost += tier_cost(obj.tier)

            if obj.sensitivity != Sensitivity.NON_SENSITIVE and obj.tier != Tier.DELETED:
                self.privacy_risk_exposure += obj.risk_stats.risk

            if obj.risk_stats.high_risk_flag and obj.tier == Tier.HOT and not obj.anonymized:
                self.compliance_violation_incidents += 1

    def storage_cost_reduction(self) -> float:
        if self.baseline_storage_cost <= 0:
            return 0.0
        return max(0.0, 1.0 - self.actual_storage_cost / self.baseline_storage_cost)

    def summarize(
        self,
        objects: Iterable[TrackedObject],
        duration: Optional[int] = None,
    ) -> RunSummary:
        """
        Build the end-of-run summary.

        False-deletion rate: deleted share of objects labelled keep.
        Retention efficiency: archived-or-deleted share of objects labelled discard.
        """
        keep_true = 0
        keep_true_deleted = 0
        keep_false = 0
        keep_false_demoted = 0
        converged = 0
        converged_sum = 0

        for obj in objects:
            if obj.keep_label:
                keep_true += 1
                if obj.tier == Tier.DELETED:
                    keep_true_deleted += 1
            else:
                keep_false += 1
                if obj.tier in (Tier.COLD, Tier.DELETED):
                    keep_false_demoted += 1

            if obj.convergence_time >= 0:
                converged += 1
                converged_sum += obj.convergence_time

        return RunSummary(
            storage_cost_reduction=self.storage_cost_reduction(),
            privacy_risk_exposure=self.privacy_risk_exposure,
            compliance_violation_incidents=self.compliance_violation_incidents,
            avg_trust_convergence_time=converged_sum / converged if converged else -1.0,
            converged_objects=converged,
            false_deletion_rate=keep_true_deleted / keep_true if keep_true else 0.0,
            retention_efficiency=keep_false_demoted / keep_false if keep_false else 0.0,
            duration=self.duration if duration is None else duration,
        )
