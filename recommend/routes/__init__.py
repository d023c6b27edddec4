# recommend/routes/__init__.py
from .recommendations import router as recommendations

__all__ = ["recommendations"]
