"""Recommendation engine that turns capability flags into advice."""

import logging
from typing import TYPE_CHECKING

from recommendations.rules import ALL_RULES, CONGRATULATIONS, Rule

if TYPE_CHECKING:
    from analyzers.base import ReadinessResult

logger = logging.getLogger(__name__)


class RecommendationEngine:
    """
    Generates recommendations by evaluating rules against capability flags.

    The engine:
    1. Evaluates each rule against the flags, in rule order
    2. Skips duplicate rule IDs
    3. Falls back to a single congratulatory message when nothing fires
    """

    def __init__(self, rules: list[Rule] | None = None):
        self.rules = ALL_RULES if rules is None else rules

    def generate(self, flags: dict[str, bool]) -> list[str]:
        """
        Generate recommendations for a set of flags.

        Args:
            flags: Capability flags keyed by name (see ReadinessResult.flags)

        Returns:
            Non-empty list of recommendation messages
        """
        recommendations = []
        seen_ids = set()

        for rule in self.rules:
            if rule.id in seen_ids:
                continue
            try:
                triggered = rule.condition(flags)
            except Exception as e:
                logger.warning(f"Error evaluating rule {rule.id}: {e}")
                continue
            if triggered:
                seen_ids.add(rule.id)
                recommendations.append(rule.message)
                logger.debug(f"Rule triggered: {rule.id}")

        if not recommendations:
            recommendations.append(CONGRATULATIONS)

        return recommendations


def generate_recommendations(result: "ReadinessResult") -> list[str]:
    """Convenience function to generate recommendations for a result."""
    engine = RecommendationEngine()
    return engine.generate(result.flags())
