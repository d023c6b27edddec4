# recommend/backend/config.py
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    # Доступ к backend поиска и рекомендаций
    ALGOLIA_APP_ID: str = ""
    ALGOLIA_API_KEY: str = ""

    # Явный хост поиска (например, для локального стенда)
    SEARCH_HOST: Optional[str] = None

    # Хост персонализации зависит от региона пользователя
    PERSONALIZATION_HOST_TEMPLATE: str = "https://personalization.{region}.algolia.com"

    # Таймаут HTTP запросов в секундах
    REQUEST_TIMEOUT: float = 5.0

    # Значение по умолчанию для suppressExperimentalWarning
    SUPPRESS_EXPERIMENTAL_WARNING: bool = False

    # Настройки приложения
    APP_NAME: str = "Recommend API"
    APP_DESCRIPTION: str = "API для получения рекомендаций товаров"
    DEBUG: bool = False
    API_VERSION: str = "1.0.0"

    @property
    def SEARCH_URL(self) -> str:
        """Базовый URL поиска"""
        if self.SEARCH_HOST:
            return self.SEARCH_HOST.rstrip("/")
        return f"https://{self.ALGOLIA_APP_ID}-dsn.algolia.net"

    def personalization_url(self, region: str) -> str:
        """Базовый URL персонализации для региона"""
        return self.PERSONALIZATION_HOST_TEMPLATE.format(region=region).rstrip("/")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow"
    )


@lru_cache()
def get_settings() -> Settings:
    """Получение настроек приложения с кэшированием"""
    return Settings()
