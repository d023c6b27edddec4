# recommend/services/recommendation_service.py
from typing import Any, Callable, Dict, List, Optional, Sequence
import asyncio
import logging

from recommend.backend.interfaces import SearchBackend, PersonalizationBackend
from recommend.models.recommendation import is_item_anchored
from recommend.schemas.recommendation import Hit, RecommendRequest
from recommend.services.errors import PersonalizationError, SearchError, SourceItemLookupError
from recommend.services.index_resolver import resolve_index_name, resolve_rule_context
from recommend.services.personalization import PersonalizationFilterProvider
from recommend.services.query_builder import build_search_parameters

logger = logging.getLogger(__name__)

TransformItems = Callable[[List[Hit]], List[Hit]]


class RecommendationService:
    """
    Выполняет запрос рекомендаций: персонализация, проверка исходного товара,
    поиск по индексу рекомендаций и фильтрация результата.
    """

    def __init__(
            self,
            search_backend: SearchBackend,
            personalization_backend: Optional[PersonalizationBackend] = None
    ):
        self.search_backend = search_backend
        self.personalization = (
            PersonalizationFilterProvider(personalization_backend)
            if personalization_backend else None
        )

    async def run(
            self,
            request: RecommendRequest,
            transform_items: Optional[TransformItems] = None
    ) -> List[Hit]:
        """
        Получить рекомендации для запроса.

        Args:
            request: Запрос рекомендаций
            transform_items: Необязательное преобразование итогового списка

        Returns:
            List[Hit]: Рекомендации в порядке backend

        Raises:
            PersonalizationError: Ошибка получения фильтров персонализации
            SourceItemLookupError: Исходный товар не найден
            SearchError: Ошибка поискового запроса
        """
        index_name = resolve_index_name(request.model, request.base_index_name)
        rule_context = resolve_rule_context(request.model, request.source_item_id)

        logger.info(
            f"Запрос рекомендаций model={request.model.value}, index={index_name}, "
            f"source={request.source_item_id}"
        )

        personalization_filters: List[str] = []
        identity = request.personalization
        if identity is not None:
            if self.personalization is None:
                raise PersonalizationError("Backend персонализации не настроен")
            personalization_filters = await self.personalization.fetch(identity)

        params = build_search_parameters(request, rule_context, personalization_filters)

        if is_item_anchored(request.model):
            await self._lookup_source_item(request)

        response = await self._search(index_name, params)
        try:
            hits = self._filter_hits(response.get("hits") or [], request)
        except (ValueError, TypeError, AttributeError) as e:
            logger.error(f"Некорректный ответ поиска из {index_name}: {e}")
            raise SearchError(f"Некорректный ответ поиска из {index_name}", cause=e) from e

        if transform_items is not None:
            hits = list(transform_items(hits))

        logger.info(f"Возвращаем {len(hits)} рекомендаций для {index_name}")
        return hits

    async def run_many(self, requests: Sequence[RecommendRequest]) -> List[List[Hit]]:
        """Несколько независимых запросов параллельно. Ошибка любого завершает весь вызов."""
        return list(await asyncio.gather(*(self.run(request) for request in requests)))

    async def _lookup_source_item(self, request: RecommendRequest) -> Dict[str, Any]:
        """Исходный товар должен существовать, иначе рекомендации бессмысленны"""
        try:
            return await self.search_backend.get_object(
                request.base_index_name, request.source_item_id
            )
        except Exception as e:
            logger.error(
                f"Исходный товар {request.source_item_id} не получен из {request.base_index_name}: {e}"
            )
            raise SourceItemLookupError(
                f"Исходный товар {request.source_item_id} не найден", cause=e
            ) from e

    async def _search(self, index_name: str, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return await self.search_backend.search(index_name, "", params)
        except Exception as e:
            logger.error(f"Ошибка поиска в {index_name}: {e}")
            raise SearchError(f"Ошибка поиска в {index_name}", cause=e) from e

    @staticmethod
    def _filter_hits(raw_hits: List[Dict[str, Any]], request: RecommendRequest) -> List[Hit]:
        """Убирает исходный товар и записи ниже порога, сохраняя порядок backend"""
        hits = []
        for raw in raw_hits:
            hit = Hit.model_validate(raw)
            if hit.object_id is not None and hit.object_id == request.source_item_id:
                logger.warning(f"Backend вернул исходный товар {hit.object_id}, пропускаем")
                continue
            if hit.score < request.threshold:
                continue
            hits.append(hit)

        if request.max_recommendations:
            hits = hits[:request.max_recommendations]
        return hits
