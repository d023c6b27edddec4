# recommend/services/query_builder.py
from typing import Any, Dict, List, Sequence
import logging

from recommend.schemas.recommendation import RecommendRequest, ResolvedQuery
from recommend.services.index_resolver import (
    resolve_index_name,
    resolve_analytics_tag,
    resolve_rule_context,
)

logger = logging.getLogger(__name__)

# Параметры, которые задает только этот слой. Трафик рекомендаций не должен
# попадать в аналитику, A/B тесты и typo tolerance backend.
PROTECTED_PARAMETERS = frozenset({
    "analytics",
    "analyticsTags",
    "clickAnalytics",
    "enableABTest",
    "hitsPerPage",
    "ruleContexts",
    "typoTolerance",
})


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def build_search_parameters(
        request: RecommendRequest,
        rule_context: str,
        personalization_filters: Sequence[str] = ()
) -> Dict[str, Any]:
    """
    Собирает параметры поиска: значения по умолчанию, затем переопределения
    клиента, затем принудительные поля.

    Args:
        request: Запрос рекомендаций
        rule_context: Rule context, вычисленный для модели и исходного товара
        personalization_filters: Фильтры персонализации, добавляются после optionalFilters клиента

    Returns:
        Dict[str, Any]: Параметры поискового запроса
    """
    overrides = dict(request.query_parameters)

    rejected = [key for key in overrides if key in PROTECTED_PARAMETERS]
    if request.source_item_id and "filters" in overrides:
        # Исключение исходного товара нельзя переопределить
        rejected.append("filters")
    if rejected:
        logger.warning(
            f"Игнорируем защищенные параметры для модели {request.model.value}: {sorted(rejected)}"
        )
        for key in rejected:
            overrides.pop(key)

    caller_optional_filters = overrides.pop("optionalFilters", [])
    if personalization_filters:
        optional_filters = _as_list(caller_optional_filters) + list(personalization_filters)
    else:
        optional_filters = caller_optional_filters

    params: Dict[str, Any] = {"facetFilters": []}
    params.update(overrides)
    params.update({
        "analytics": False,
        "analyticsTags": [resolve_analytics_tag(request.model)],
        "clickAnalytics": False,
        "enableABTest": False,
        "hitsPerPage": request.max_recommendations,
        "optionalFilters": optional_filters,
        "ruleContexts": [rule_context],
        "typoTolerance": False,
    })

    if request.source_item_id:
        params["filters"] = f"NOT objectID:{request.source_item_id}"

    return params


def resolve_query(
        request: RecommendRequest,
        personalization_filters: Sequence[str] = ()
) -> ResolvedQuery:
    """Индекс и параметры поиска для запроса. Не требует сети."""
    rule_context = resolve_rule_context(request.model, request.source_item_id)
    return ResolvedQuery(
        index_name=resolve_index_name(request.model, request.base_index_name),
        search_parameters=build_search_parameters(request, rule_context, personalization_filters),
    )
