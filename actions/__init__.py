"""
Actions Module
Engines that derive and store insights
"""

from .insights_engine import (
    InsightsEngine,
    insights_engine
)


__all__ = [
    "InsightsEngine",
    "insights_engine"
]
