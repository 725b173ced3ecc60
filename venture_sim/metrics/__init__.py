"""
Metrics and Mentor Guidance

This module provides:
- Derived business metrics (burn rate, runway, MRR growth, multiples)
- Metric definitions with units and descriptions
- Rule-based mentor advice driven by those metrics
"""

from .calculator import (
    MetricsCalculator,
    MetricDefinition,
    MetricCategory,
    EPSILON,
    clamp_market_share
)
from .advisor import AdviceRule, MentorAdvisor, DEFAULT_RULES

__all__ = [
    "MetricsCalculator",
    "MetricDefinition",
    "MetricCategory",
    "EPSILON",
    "clamp_market_share",
    "AdviceRule",
    "MentorAdvisor",
    "DEFAULT_RULES"
]
