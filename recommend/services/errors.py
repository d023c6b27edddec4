# recommend/services/errors.py


class RecommendError(Exception):
    """Базовая ошибка получения рекомендаций. Исходная ошибка backend доступна в cause."""

    def __init__(self, message: str, cause: BaseException = None):
        super().__init__(message)
        self.cause = cause


class SourceItemLookupError(RecommendError):
    """Исходный товар не найден или запрос к нему не удался"""


class PersonalizationError(RecommendError):
    """Не удалось получить фильтры персонализации"""


class SearchError(RecommendError):
    """Поисковый запрос к backend завершился ошибкой"""
