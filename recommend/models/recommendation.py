# recommend/models/recommendation.py
from enum import Enum


class ModelType(str, Enum):
    """Типы моделей рекомендаций"""
    RELATED_PRODUCTS = "related-products"
    BOUGHT_TOGETHER = "bought-together"
    LOOKING_SIMILAR = "looking-similar"
    TRENDING_ITEMS = "trending-items"
    TRENDING_FACETS = "trending-facets"


# Модели, привязанные к исходному товару (нужен objectID)
ITEM_ANCHORED_MODELS = frozenset({
    ModelType.RELATED_PRODUCTS,
    ModelType.BOUGHT_TOGETHER,
    ModelType.LOOKING_SIMILAR,
})

# Префиксы, которые backend использует для индексов и rule contexts
INDEX_PREFIX = "ai_recommend_"
RULE_CONTEXT_PREFIX = "alg-recommend_"


def is_item_anchored(model: ModelType) -> bool:
    """Требует ли модель исходный товар"""
    return ModelType(model) in ITEM_ANCHORED_MODELS
