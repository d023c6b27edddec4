# recommend/services/recommendation_state.py
"""
Состояние одной подписки на рекомендации.

Подписка проходит idle -> loading -> success | error и возвращается в loading
при каждом новом запросе. Каждый start() увеличивает номер поколения; результат
запроса публикуется только если его поколение все еще текущее, поэтому
устаревшие ответы молча отбрасываются (побеждает последний запрос).
"""

from enum import Enum
from typing import Callable, List, NamedTuple, Optional, Set
import asyncio
import logging

from recommend.backend.config import get_settings
from recommend.schemas.recommendation import Hit, RecommendRequest
from recommend.services.personalization import emit_experimental_warning
from recommend.services.recommendation_service import RecommendationService, TransformItems

logger = logging.getLogger(__name__)


class Status(str, Enum):
    """Статус подписки"""
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class StateSnapshot(NamedTuple):
    """Публикуемое значение подписки"""
    status: Status
    result: Optional[List[Hit]] = None
    error: Optional[BaseException] = None


Subscriber = Callable[[StateSnapshot], None]


class RecommendationState:
    """Подписка на рекомендации с отменой устаревших запросов"""

    def __init__(self, service: RecommendationService, suppress_experimental_warning: Optional[bool] = None):
        self.service = service
        if suppress_experimental_warning is None:
            suppress_experimental_warning = get_settings().SUPPRESS_EXPERIMENTAL_WARNING
        self.suppress_experimental_warning = suppress_experimental_warning

        # Флаг на экземпляр подписки, а не на процесс
        self.warning_emitted = False

        self._generation = 0
        self._snapshot = StateSnapshot(Status.IDLE)
        self._settled = self._snapshot
        self._subscribers: List[Subscriber] = []
        self._current: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()
        self._disposed = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def disposed(self) -> bool:
        return self._disposed

    def snapshot(self) -> StateSnapshot:
        return self._snapshot

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Подписаться на изменения. Возвращает функцию отписки."""
        if self._disposed:
            raise RuntimeError("Подписка уже завершена")
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def start(self, request: RecommendRequest, transform_items: Optional[TransformItems] = None) -> asyncio.Task:
        """
        Запустить запрос. Предыдущий незавершенный запрос становится устаревшим.
        Должен вызываться внутри работающего event loop.
        """
        if self._disposed:
            raise RuntimeError("Подписка уже завершена")

        self._generation += 1
        generation = self._generation

        if request.personalization is not None:
            self._warn_once(request)

        self._publish(StateSnapshot(Status.LOADING))

        task = asyncio.get_running_loop().create_task(
            self._fetch(generation, request, transform_items)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._current = task
        return task

    def cancel(self) -> None:
        """Отказаться от текущего запроса и вернуть последнее завершенное состояние"""
        if self._current is None or self._current.done():
            return
        self._generation += 1
        self._current = None
        logger.debug(f"Запрос отменен, поколение {self._generation}")
        self._publish(self._settled)

    def dispose(self) -> None:
        """Завершить подписку. Незавершенные запросы ничего не опубликуют."""
        self._generation += 1
        self._disposed = True
        self._current = None
        self._subscribers.clear()

    async def wait(self) -> StateSnapshot:
        """Дождаться завершения текущего запроса"""
        while self._current is not None and not self._current.done():
            await asyncio.shield(self._current)
        return self._snapshot

    def _warn_once(self, request: RecommendRequest) -> None:
        if self.warning_emitted:
            return
        if request.suppress_experimental_warning or self.suppress_experimental_warning:
            return
        emit_experimental_warning()
        self.warning_emitted = True

    def _is_current(self, generation: int) -> bool:
        return not self._disposed and generation == self._generation

    async def _fetch(self, generation: int, request: RecommendRequest, transform_items: Optional[TransformItems]) -> None:
        try:
            result = await self.service.run(request, transform_items)
        except Exception as e:
            if not self._is_current(generation):
                logger.debug(f"Отбрасываем ошибку устаревшего поколения {generation}: {e}")
                return
            logger.error(f"Ошибка получения рекомендаций: {e}")
            self._settle(StateSnapshot(Status.ERROR, error=e))
            return

        if not self._is_current(generation):
            logger.debug(f"Отбрасываем результат устаревшего поколения {generation}")
            return
        self._settle(StateSnapshot(Status.SUCCESS, result=result))

    def _settle(self, snapshot: StateSnapshot) -> None:
        self._settled = snapshot
        self._publish(snapshot)

    def _publish(self, snapshot: StateSnapshot) -> None:
        self._snapshot = snapshot
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception as e:
                logger.error(f"Ошибка в подписчике: {e}")
