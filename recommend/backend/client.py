# recommend/backend/client.py
from typing import Any, Dict, List, Optional
from urllib.parse import quote
import logging

import httpx

from .config import Settings, get_settings
from .interfaces import SearchBackend, PersonalizationBackend

logger = logging.getLogger(__name__)


def get_http_client(
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    """
    Создание HTTP клиента для обращений к backend.

    Returns:
        httpx.AsyncClient: Клиент с заголовками авторизации и таймаутом
    """
    settings = settings or get_settings()
    return httpx.AsyncClient(
        headers={
            "X-Algolia-Application-Id": settings.ALGOLIA_APP_ID,
            "X-Algolia-API-Key": settings.ALGOLIA_API_KEY,
        },
        timeout=settings.REQUEST_TIMEOUT,
        transport=transport,
    )


class HttpSearchBackend(SearchBackend):
    """REST backend поиска: /1/indexes/{index}/query и /1/indexes/{index}/{objectID}"""

    def __init__(self, client: httpx.AsyncClient, settings: Optional[Settings] = None):
        self.client = client
        self.base_url = (settings or get_settings()).SEARCH_URL

    def _index_url(self, index_name: str) -> str:
        return f"{self.base_url}/1/indexes/{quote(index_name, safe='')}"

    async def get_object(self, index_name: str, object_id: str) -> Dict[str, Any]:
        url = f"{self._index_url(index_name)}/{quote(object_id, safe='')}"
        logger.debug(f"GET {url}")
        response = await self.client.get(url)
        response.raise_for_status()
        return response.json()

    async def search(self, index_name: str, query: str, params: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self._index_url(index_name)}/query"
        logger.debug(f"POST {url} params={params}")
        response = await self.client.post(url, json={"query": query, **params})
        response.raise_for_status()
        return response.json()


def profile_to_filters(profile: Dict[str, Any]) -> List[str]:
    """
    Преобразует профиль персонализации в optionalFilters.

    Профиль содержит scores вида {facet: {value: score}}, каждая пара
    превращается в "facet:value<score=N>" в порядке, полученном от backend.
    """
    filters = []
    for facet, values in (profile.get("scores") or {}).items():
        for value, score in (values or {}).items():
            filters.append(f"{facet}:{value}<score={score}>")
    return filters


class HttpPersonalizationBackend(PersonalizationBackend):
    """REST backend персонализации: /1/profiles/personalization/{userToken}"""

    def __init__(self, client: httpx.AsyncClient, settings: Optional[Settings] = None):
        self.client = client
        self.settings = settings or get_settings()

    async def fetch_personalization_filters(self, user_token: str, region: str) -> List[str]:
        base_url = self.settings.personalization_url(region)
        url = f"{base_url}/1/profiles/personalization/{quote(user_token, safe='')}"
        logger.debug(f"GET {url}")
        response = await self.client.get(url)
        response.raise_for_status()
        return profile_to_filters(response.json())
