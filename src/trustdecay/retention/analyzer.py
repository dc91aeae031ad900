"""
RiskAnalyzer - Derives anomaly and risk from sensitivity and access history.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from trustdecay.config.defaults import (
    RISK_BASE_FINANCIAL,
    RISK_BASE_HEALTH,
    RISK_BASE_NON_SENSITIVE,
    RISK_BASE_PII,
    RISK_BURST_PENALTY,
    RISK_HIGH_FLAG,
    RISK_SUSPICIOUS_PENALTY,
    RISK_SUSPICIOUS_RATE_LIMIT,
)
from trustdecay.utils.numeric import clamp_unit

from .models import Sensitivity, TrackedObject

logger = logging.getLogger(__name__)

BASE_RISK: Dict[Sensitivity, float] = {
    Sensitivity.NON_SENSITIVE: RISK_BASE_NON_SENSITIVE,
    Sensitivity.PII: RISK_BASE_PII,
    Sensitivity.FINANCIAL: RISK_BASE_FINANCIAL,
    Sensitivity.HEALTH: RISK_BASE_HEALTH,
}


def base_risk(sensitivity: Sensitivity) -> float:
    return BASE_RISK[sensitivity]


def score_risk(
    sensitivity: Sensitivity,
    suspicious_rate: float,
    burst: bool,
    suspicious_limit: float = RISK_SUSPICIOUS_RATE_LIMIT,
    suspicious_penalty: float = RISK_SUSPICIOUS_PENALTY,
    burst_penalty: float = RISK_BURST_PENALTY,
) -> tuple[float, float]:
    """
    Compute (anomaly_score, risk) for the given inputs.

    Both penalties are independent and additive:
        risk = base(sensitivity) + [suspicious > limit]·p1 + [burst]·p2
        anomaly = 0.5·suspicious_rate + 0.5·[burst]

    Returns:
        (anomaly_score, risk), each clamped to [0, 1]
    """
    add_ons = 0.0
    if suspicious_rate > suspicious_limit:
        add_ons += suspicious_penalty
    if burst:
        add_ons += burst_penalty

    burst_flag = 1.0 if burst else 0.0
    anomaly = clamp_unit(0.5 * suspicious_rate + 0.5 * burst_flag)
    risk = clamp_unit(base_risk(sensitivity) + add_ons)
    return anomaly, risk


class RiskAnalyzer:
    """Refresh an object's RiskSnapshot from its current access window."""

    def __init__(self, config: Optional[Dict] = None):
        self.config = config or {}

        self.suspicious_limit = self.config.get(
            "risk_suspicious_limit", RISK_SUSPICIOUS_RATE_LIMIT
        )
        self.suspicious_penalty = self.config.get(
            "risk_suspicious_penalty", RISK_SUSPICIOUS_PENALTY
        )
        self.burst_penalty = self.config.get("risk_burst_penalty", RISK_BURST_PENALTY)
        self.high_flag = self.config.get("risk_high_flag", RISK_HIGH_FLAG)

    def update_risk(self, obj: TrackedObject, now: int) -> None:
        stats = obj.access_stats
        anomaly, risk = score_risk(
            obj.sensitivity,
            stats.suspicious_rate(),
            stats.burst_detected(now),
            suspicious_limit=self.suspicious_limit,
            suspicious_penalty=self.suspicious_penalty,
            burst_penalty=self.burst_penalty,
        )
        obj.risk_stats.overwrite(anomaly, risk, high_threshold=self.high_flag)
