"""Analysis package - run metrics and summaries."""

from trustdecay.analysis.metrics import MetricsCollector, RunSummary, tier_cost

__all__ = [
    "MetricsCollector",
    "RunSummary",
    "tier_cost",
]
