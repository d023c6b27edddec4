# recommend/services/__init__.py
from .errors import RecommendError, SourceItemLookupError, PersonalizationError, SearchError
from .index_resolver import resolve_index_name, resolve_rule_context
from .query_builder import build_search_parameters, resolve_query
from .personalization import PersonalizationFilterProvider, EXPERIMENTAL_WARNING
from .recommendation_service import RecommendationService
from .recommendation_state import RecommendationState, StateSnapshot, Status

__all__ = [
    "RecommendError",
    "SourceItemLookupError",
    "PersonalizationError",
    "SearchError",
    "resolve_index_name",
    "resolve_rule_context",
    "build_search_parameters",
    "resolve_query",
    "PersonalizationFilterProvider",
    "EXPERIMENTAL_WARNING",
    "RecommendationService",
    "RecommendationState",
    "StateSnapshot",
    "Status",
]
