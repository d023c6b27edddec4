# recommend/__init__.py
from .models.recommendation import ModelType
from .schemas.recommendation import RecommendRequest, Hit, ResolvedQuery
from .services import (
    RecommendationService,
    RecommendationState,
    StateSnapshot,
    Status,
    resolve_query,
)

__all__ = [
    "ModelType",
    "RecommendRequest",
    "Hit",
    "ResolvedQuery",
    "RecommendationService",
    "RecommendationState",
    "StateSnapshot",
    "Status",
    "resolve_query",
]
