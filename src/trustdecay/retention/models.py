"""
Shared dataclasses and enums for the retention pipeline.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum

from trustdecay.config.defaults import (
    CONVERGENCE_BAND,
    CONVERGENCE_HISTORY,
    RISK_HIGH_FLAG,
    SENSITIVITY_CODE_FINANCIAL,
    SENSITIVITY_CODE_HEALTH,
    SENSITIVITY_CODE_NON_SENSITIVE,
    SENSITIVITY_CODE_PII,
)
from trustdecay.sliding_window import AccessStats
from trustdecay.utils.numeric import clamp_unit


class Sensitivity(str, Enum):
    """Data sensitivity classes, ordered by rising sensitivity."""
    NON_SENSITIVE = "non_sensitive"
    PII = "pii"
    FINANCIAL = "financial"
    HEALTH = "health"

    @property
    def code(self) -> float:
        """Numeric encoding used as a model feature."""
        return _SENSITIVITY_CODES[self]


_SENSITIVITY_CODES = {
    Sensitivity.NON_SENSITIVE: SENSITIVITY_CODE_NON_SENSITIVE,
    Sensitivity.PII: SENSITIVITY_CODE_PII,
    Sensitivity.FINANCIAL: SENSITIVITY_CODE_FINANCIAL,
    Sensitivity.HEALTH: SENSITIVITY_CODE_HEALTH,
}


class Tier(str, Enum):
    """Storage tier of an object. DELETED is terminal."""
    HOT = "hot"
    COLD = "cold"
    DELETED = "deleted"


class Role(str, Enum):
    """Requester roles."""
    ADMIN = "admin"
    ANALYST = "analyst"
    USER = "user"
    SERVICE = "service"


class Action(str, Enum):
    """Retention actions emitted by the decision controller."""
    RETAIN = "retain"
    ARCHIVE = "archive"
    ANONYMIZE = "anonymize"
    DELETE = "delete"


@dataclass(frozen=True)
class AccessEvent:
    """A single access request against an object."""
    time: int
    object_id: int
    role: Role
    legitimate: bool
    request_score: float


@dataclass
class RiskSnapshot:
    """Latest risk evaluation. Replaced wholesale on every update."""
    anomaly_score: float = 0.0
    risk: float = 0.0
    high_risk_flag: bool = False

    def overwrite(
        self,
        anomaly_score: float,
        risk: float,
        high_threshold: float = RISK_HIGH_FLAG,
    ) -> None:
        self.anomaly_score = clamp_unit(anomaly_score)
        self.risk = clamp_unit(risk)
        self.high_risk_flag = self.risk >= high_threshold


class TrustHistory:
    """
    Ring buffer of recent trust values used to detect convergence.

    Convergence is recorded the first time a full history spans no more
    than ``band``; after that the time is frozen.
    """

    def __init__(
        self,
        size: int = CONVERGENCE_HISTORY,
        band: float = CONVERGENCE_BAND,
    ):
        self.size = size
        self.band = band
        self._values: deque[float] = deque(maxlen=size)
        self.convergence_time = -1

    @property
    def converged(self) -> bool:
        return self.convergence_time >= 0

    def observe(self, trust: float, now: int) -> bool:
        """
        Push a trust value; return True if this observation converged.
        """
        self._values.append(trust)

        if self.converged:
            return False
        if len(self._values) < self.size:
            return False

        if max(self._values) - min(self._values) <= self.band:
            self.convergence_time = now
            return True
        return False

    def values(self) -> list[float]:
        """Recorded values, oldest first."""
        return list(self._values)


@dataclass
class TrackedObject:
    """A data item under retention management."""
    id: int
    sensitivity: Sensitivity
    trust: float
    base_business_value: float
    keep_label: bool = False
    tier: Tier = Tier.HOT
    anonymized: bool = False
    created_at: int = 0
    last_access_time: int = 0
    total_access_count: int = 0
    deleted_at: int = -1
    access_stats: AccessStats = field(default_factory=AccessStats)
    risk_stats: RiskSnapshot = field(default_factory=RiskSnapshot)
    trust_history: TrustHistory = field(default_factory=TrustHistory)

    def __post_init__(self):
        self.trust = clamp_unit(self.trust)
        self.base_business_value = clamp_unit(self.base_business_value)

    @property
    def is_deleted(self) -> bool:
        return self.tier == Tier.DELETED

    @property
    def convergence_time(self) -> int:
        return self.trust_history.convergence_time

    def set_trust(self, value: float) -> None:
        self.trust = clamp_unit(value)

    def mark_deleted(self, now: int) -> None:
        self.tier = Tier.DELETED
        self.deleted_at = now


@dataclass(frozen=True)
class Decision:
    """Outcome of one decision-controller evaluation."""
    action: Action
    reason_code: str


@dataclass(frozen=True)
class DecisionRecord:
    """Per-object, per-tick audit record."""
    time: int
    object_id: int
    sensitivity: Sensitivity
    trust: float
    access_rate: float
    legit_rate: float
    suspicious_rate: float
    risk: float
    anomaly_score: float
    predicted_relevance: float
    action: Action
    tier: Tier
    anonymized: bool
    reason_code: str

    @classmethod
    def capture(
        cls,
        now: int,
        obj: TrackedObject,
        predicted_relevance: float,
        decision: Decision,
    ) -> "DecisionRecord":
        """Snapshot an object's state right after its decision."""
        stats = obj.access_stats
        return cls(
            time=now,
            object_id=obj.id,
            sensitivity=obj.sensitivity,
            trust=obj.trust,
            access_rate=stats.access_rate(),
            legit_rate=stats.legit_rate(),
            suspicious_rate=stats.suspicious_rate(),
            risk=obj.risk_stats.risk,
            anomaly_score=obj.risk_stats.anomaly_score,
            predicted_relevance=predicted_relevance,
            action=decision.action,
            tier=obj.tier,
            anonymized=obj.anonymized,
            reason_code=decision.reason_code,
        )


@dataclass
class MonitoringResult:
    """Outcome of routing one access event through the monitor."""
    legitimate: bool
    suspicious: bool
    burst_detected: bool
