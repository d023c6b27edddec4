# recommend/models/__init__.py
from .recommendation import (
    ModelType,
    ITEM_ANCHORED_MODELS,
    INDEX_PREFIX,
    RULE_CONTEXT_PREFIX,
    is_item_anchored,
)

__all__ = [
    "ModelType",
    "ITEM_ANCHORED_MODELS",
    "INDEX_PREFIX",
    "RULE_CONTEXT_PREFIX",
    "is_item_anchored",
]
