# recommend/services/personalization.py
from typing import List
import logging

from recommend.backend.interfaces import PersonalizationBackend
from recommend.schemas.recommendation import PersonalizationIdentity
from recommend.services.errors import PersonalizationError

logger = logging.getLogger(__name__)

# Канал диагностики для оператора
warning_logger = logging.getLogger("recommend")

EXPERIMENTAL_WARNING = (
    "[Recommend] Personalized Recommendations are experimental and subject to change.\n"
    "If you have any feedback, please let us know at https://github.com/algolia/recommend/issues/new/choose\n"
    "(To disable this warning, pass 'suppressExperimentalWarning' to TrendingItems)"
)


def emit_experimental_warning() -> None:
    """Предупреждение об экспериментальной персонализации"""
    warning_logger.warning(EXPERIMENTAL_WARNING)


class PersonalizationFilterProvider:
    """Получает фильтры персонализации, которые добавляются в optionalFilters"""

    def __init__(self, backend: PersonalizationBackend):
        self.backend = backend

    async def fetch(self, identity: PersonalizationIdentity) -> List[str]:
        """
        Фильтры персонализации для пользователя.

        Raises:
            PersonalizationError: Если backend вернул ошибку. Персонализация,
                раз уж запрошена, обязательна для всего запроса.
        """
        try:
            filters = await self.backend.fetch_personalization_filters(
                identity.user_token, identity.region
            )
        except Exception as e:
            logger.error(f"Ошибка получения фильтров персонализации: {e}")
            raise PersonalizationError(
                f"Не удалось получить фильтры персонализации: {e}", cause=e
            ) from e

        filters = list(filters or [])
        logger.info(f"Получено {len(filters)} фильтров персонализации")
        return filters
