# recommend/schemas/__init__.py
from .recommendation import (
    PersonalizationIdentity,
    RecommendRequest,
    ResolvedQuery,
    Hit,
    RecommendationResponse,
    BatchRecommendRequest,
)

__all__ = [
    "PersonalizationIdentity",
    "RecommendRequest",
    "ResolvedQuery",
    "Hit",
    "RecommendationResponse",
    "BatchRecommendRequest",
]
