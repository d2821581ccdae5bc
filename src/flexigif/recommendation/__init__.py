"""Output format recommendation."""

from flexigif.recommendation.engine import RecommendationEngine
from flexigif.recommendation.platforms import PLATFORM_LIMITS, platform_from_name

__all__ = ["PLATFORM_LIMITS", "RecommendationEngine", "platform_from_name"]
