# recommend/routes/recommendations.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from recommend.schemas.recommendation import (
    BatchRecommendRequest,
    RecommendRequest,
    RecommendationResponse,
    ResolvedQuery,
)
from recommend.services.errors import RecommendError, SourceItemLookupError
from recommend.services.index_resolver import resolve_index_name
from recommend.services.query_builder import resolve_query
from recommend.services.recommendation_service import RecommendationService
from recommend.services.recommendation_state import RecommendationState, Status
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/recommendations", tags=["recommendations"])


def get_recommendation_service(request: Request) -> RecommendationService:
    """Сервис рекомендаций, созданный при запуске приложения"""
    service = getattr(request.app.state, "recommendation_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Backend рекомендаций недоступен")
    return service


def _http_error(error: BaseException) -> HTTPException:
    if isinstance(error, SourceItemLookupError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, RecommendError):
        return HTTPException(status_code=502, detail=str(error))
    return HTTPException(status_code=500, detail=f"Ошибка при получении рекомендаций: {error}")


def _response(req: RecommendRequest, hits) -> RecommendationResponse:
    return RecommendationResponse(
        model=req.model,
        index_name=resolve_index_name(req.model, req.base_index_name),
        hits=hits,
        nb_hits=len(hits),
    )


@router.post("/", response_model=RecommendationResponse)
async def get_recommendations(
        req: RecommendRequest,
        service: RecommendationService = Depends(get_recommendation_service)
):
    """
    Получить рекомендации для одного запроса
    """
    state = RecommendationState(service)
    try:
        state.start(req)
        snapshot = await state.wait()
    finally:
        state.dispose()

    if snapshot.status == Status.ERROR:
        raise _http_error(snapshot.error)
    return _response(req, snapshot.result)


@router.post("/query", response_model=ResolvedQuery)
async def get_resolved_query(req: RecommendRequest):
    """
    Показать индекс и параметры поиска без обращения к backend
    """
    return resolve_query(req)


@router.post("/batch", response_model=List[RecommendationResponse])
async def get_batch_recommendations(
        batch: BatchRecommendRequest,
        service: RecommendationService = Depends(get_recommendation_service)
):
    """
    Получить рекомендации для нескольких запросов параллельно
    """
    try:
        results = await service.run_many(batch.requests)
    except RecommendError as e:
        logger.error(f"Ошибка при получении пакета рекомендаций: {e}")
        raise _http_error(e)

    return [_response(req, hits) for req, hits in zip(batch.requests, results)]
