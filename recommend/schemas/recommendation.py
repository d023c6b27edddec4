# recommend/schemas/recommendation.py
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from recommend.models.recommendation import ModelType, is_item_anchored


class PersonalizationIdentity(BaseModel):
    """Идентичность пользователя для персонализации"""
    user_token: str
    region: str


class RecommendRequest(BaseModel):
    """
    Декларативный запрос рекомендаций.

    Принимает как snake_case имена полей, так и camelCase опции клиента
    (baseIndexName, sourceItemID, maxRecommendations, queryParameters,
    userToken, suppressExperimentalWarning).
    """
    model_config = ConfigDict(populate_by_name=True)

    model: ModelType
    base_index_name: str = Field(alias="baseIndexName", min_length=1)
    source_item_id: Optional[str] = Field(default=None, alias="sourceItemID")
    max_recommendations: int = Field(default=0, ge=0, alias="maxRecommendations")
    query_parameters: Dict[str, Any] = Field(default_factory=dict, alias="queryParameters")
    threshold: float = 0
    user_token: Optional[str] = Field(default=None, alias="userToken")
    region: Optional[str] = None
    suppress_experimental_warning: bool = Field(default=False, alias="suppressExperimentalWarning")

    @model_validator(mode="after")
    def _check_source_item(self):
        if is_item_anchored(self.model) and not self.source_item_id:
            raise ValueError(f"Модель {self.model.value} требует sourceItemID")
        return self

    @property
    def personalization(self) -> Optional[PersonalizationIdentity]:
        """Персонализация только если заданы и userToken, и region"""
        if self.user_token and self.region:
            return PersonalizationIdentity(user_token=self.user_token, region=self.region)
        return None


class ResolvedQuery(BaseModel):
    """Итоговый запрос к backend: индекс и параметры поиска"""
    index_name: str
    search_parameters: Dict[str, Any]


class Hit(BaseModel):
    """Запись, возвращенная backend. Остальные поля принадлежат слою отображения."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    object_id: Optional[str] = Field(default=None, alias="objectID")
    score: float = Field(default=0.0, alias="_score")

    @field_validator("score", mode="before")
    @classmethod
    def _null_score(cls, value):
        # Записи без оценки проходят только нулевой порог
        return 0.0 if value is None else value


class RecommendationResponse(BaseModel):
    """Схема ответа рекомендаций"""
    model: ModelType
    index_name: str
    hits: List[Hit]
    nb_hits: int


class BatchRecommendRequest(BaseModel):
    """Несколько независимых запросов за один вызов"""
    requests: List[RecommendRequest] = Field(..., min_length=1)
