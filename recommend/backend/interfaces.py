# recommend/backend/interfaces.py
"""
Интерфейсы внешних backend, с которыми работает оркестратор.

- SearchBackend: поиск по индексу и получение одной записи
- PersonalizationBackend: фильтры персонализации для пользователя
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class SearchBackend(ABC):
    """Backend поиска и рекомендаций"""

    @abstractmethod
    async def get_object(self, index_name: str, object_id: str) -> Dict[str, Any]:
        """Вернуть запись по objectID или выбросить ошибку, если ее нет."""

    @abstractmethod
    async def search(self, index_name: str, query: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Выполнить поиск. Ответ содержит список hits."""


class PersonalizationBackend(ABC):
    """Backend персонализации"""

    @abstractmethod
    async def fetch_personalization_filters(self, user_token: str, region: str) -> List[str]:
        """Упорядоченный список optionalFilters для пользователя."""
