"""Readiness analyzers package."""

from analyzers.base import (
    AnalysisError,
    BaseAnalyzer,
    McpServerInfo,
    ReadinessDetails,
    ReadinessResult,
)
from analyzers.readiness import (
    ReadinessAnalyzer,
    calculate_score,
    normalize_url,
)

__all__ = [
    "AnalysisError",
    "BaseAnalyzer",
    "McpServerInfo",
    "ReadinessDetails",
    "ReadinessResult",
    "ReadinessAnalyzer",
    "calculate_score",
    "normalize_url",
]
