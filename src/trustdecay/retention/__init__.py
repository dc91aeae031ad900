"""
Retention pipeline - monitoring, risk, trust decay, relevance and decisions.

Import the orchestrator from ``trustdecay.retention.orchestrator``.
"""

from __future__ import annotations

from .analyzer import RiskAnalyzer
from .auditor import EvidenceLogError, EvidenceLogger
from .controller import RetentionDecisionController
from .decay import TrustDecayEngine
from .models import (
    AccessEvent,
    Action,
    Decision,
    DecisionRecord,
    RiskSnapshot,
    Role,
    Sensitivity,
    Tier,
    TrackedObject,
    TrustHistory,
)
from .monitor import AccessMonitor
from .predictor import RelevancePredictor

__all__ = [
    "AccessMonitor",
    "RiskAnalyzer",
    "TrustDecayEngine",
    "RelevancePredictor",
    "RetentionDecisionController",
    "EvidenceLogger",
    "EvidenceLogError",
    "AccessEvent",
    "Action",
    "Decision",
    "DecisionRecord",
    "RiskSnapshot",
    "Role",
    "Sensitivity",
    "Tier",
    "TrackedObject",
    "TrustHistory",
]
