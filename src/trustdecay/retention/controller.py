"""
RetentionDecisionController - Ordered retention rules.

Rules are checked top to bottom and the first match wins:

    a. already deleted             -> DELETE     already_deleted
    b. inside grace period         -> RETAIN     grace_period          (tier HOT)
    c. high risk, relevant         -> ANONYMIZE  high_risk_keep_value  (risk reduced)
    d. never accessed, cold start  -> RETAIN     cold_start_hold       (tier HOT)
    e. low trust, low relevance    -> DELETE     low_trust_low_value   (tier DELETED)
    f. high trust, relevant, safe  -> RETAIN     high_trust_high_value (tier HOT)
    g. anything else               -> ARCHIVE    mid_zone              (tier COLD)
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from trustdecay.config.defaults import (
    ANONYMIZE_RISK_REDUCTION,
    COLD_START_WINDOW,
    GRACE_PERIOD,
    RISK_HIGH_FLAG,
    THRESHOLD_P_LOW,
    THRESHOLD_P_MID,
    THRESHOLD_R_HIGH,
    THRESHOLD_R_MID,
    THRESHOLD_T_HIGH,
    THRESHOLD_T_MID,
)

from .models import Action, Decision, TrackedObject, Tier

logger = logging.getLogger(__name__)

REASON_ALREADY_DELETED = "already_deleted"
REASON_GRACE_PERIOD = "grace_period"
REASON_HIGH_RISK_KEEP_VALUE = "high_risk_keep_value"
REASON_COLD_START_HOLD = "cold_start_hold"
REASON_LOW_TRUST_LOW_VALUE = "low_trust_low_value"
REASON_HIGH_TRUST_HIGH_VALUE = "high_trust_high_value"
REASON_MID_ZONE = "mid_zone"


class RetentionDecisionController:
    """Map trust, risk and predicted relevance to a retention action."""

    def __init__(self, config: Optional[Dict] = None):
        self.config = config or {}

        self.grace_period = self.config.get("grace_period", GRACE_PERIOD)
        self.cold_start_window = self.config.get("cold_start_window", COLD_START_WINDOW)
        self.t_high = self.config.get("t_high", THRESHOLD_T_HIGH)
        self.t_mid = self.config.get("t_mid", THRESHOLD_T_MID)
        self.r_high = self.config.get("r_high", THRESHOLD_R_HIGH)
        self.r_mid = self.config.get("r_mid", THRESHOLD_R_MID)
        self.p_low = self.config.get("p_low", THRESHOLD_P_LOW)
        self.p_mid = self.config.get("p_mid", THRESHOLD_P_MID)
        self.risk_reduction = self.config.get(
            "anonymize_risk_reduction", ANONYMIZE_RISK_REDUCTION
        )
        self.high_flag = self.config.get("risk_high_flag", RISK_HIGH_FLAG)

    def decide(self, obj: TrackedObject, predicted_relevance: float, now: int) -> Decision:
        # a) terminal state
        if obj.tier == Tier.DELETED:
            return Decision(Action.DELETE, REASON_ALREADY_DELETED)

        # b) newly created objects are always kept
        if now - obj.created_at < self.grace_period:
            obj.tier = Tier.HOT
            return Decision(Action.RETAIN, REASON_GRACE_PERIOD)

        trust = obj.trust
        risk = obj.risk_stats.risk

        # c) risky but valuable: anonymize and keep
        if risk >= self.r_high and predicted_relevance >= self.p_mid:
            self._anonymize(obj)
            return Decision(Action.ANONYMIZE, REASON_HIGH_RISK_KEEP_VALUE)

        # d) never accessed yet
        if obj.total_access_count == 0 and now - obj.created_at < self.cold_start_window:
            obj.tier = Tier.HOT
            return Decision(Action.RETAIN, REASON_COLD_START_HOLD)

        # e) untrusted and unlikely to matter
        if trust < self.t_mid and predicted_relevance < self.p_low:
            obj.mark_deleted(now)
            logger.debug(f"Object {obj.id} deleted at t={now}")
            return Decision(Action.DELETE, REASON_LOW_TRUST_LOW_VALUE)

        # f) trusted, relevant and low risk
        if trust >= self.t_high and predicted_relevance >= self.p_mid and risk < self.r_mid:
            obj.tier = Tier.HOT
            return Decision(Action.RETAIN, REASON_HIGH_TRUST_HIGH_VALUE)

        # g) archive
        obj.tier = Tier.COLD
        return Decision(Action.ARCHIVE, REASON_MID_ZONE)

    def _anonymize(self, obj: TrackedObject) -> None:
        obj.anonymized = True
        snapshot = obj.risk_stats
        snapshot.overwrite(
            snapshot.anomaly_score,
            snapshot.risk - self.risk_reduction,
            high_threshold=self.high_flag,
        )
