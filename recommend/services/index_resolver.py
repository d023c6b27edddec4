# recommend/services/index_resolver.py
from typing import Optional

from recommend.models.recommendation import ModelType, INDEX_PREFIX, RULE_CONTEXT_PREFIX


def resolve_index_name(model: ModelType, base_index_name: str) -> str:
    """Физическое имя индекса рекомендаций: ai_recommend_<model>_<baseIndexName>"""
    return f"{INDEX_PREFIX}{ModelType(model).value}_{base_index_name}"


def resolve_analytics_tag(model: ModelType) -> str:
    """Тег, по которому backend отличает трафик рекомендаций"""
    return f"{RULE_CONTEXT_PREFIX}{ModelType(model).value}"


def resolve_rule_context(model: ModelType, source_item_id: Optional[str] = None) -> str:
    """Rule context модели, с суффиксом исходного товара если он есть"""
    rule_context = resolve_analytics_tag(model)
    if source_item_id:
        rule_context = f"{rule_context}_{source_item_id}"
    return rule_context
