# recommend/main.py
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from recommend.routes import recommendations
from recommend.backend.config import get_settings
from recommend.backend.client import get_http_client, HttpSearchBackend, HttpPersonalizationBackend
from recommend.services.recommendation_service import RecommendationService
import logging

# Получаем настройки
settings = get_settings()

# Настройка логирования
logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Отключаем избыточные логи HTTP клиента если не в режиме отладки
if not settings.DEBUG:
    logging.getLogger('httpx').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Создает HTTP клиент и сервис рекомендаций на время жизни приложения"""
    logger.info("Starting Recommend API...")
    client = get_http_client(settings)
    app.state.recommendation_service = RecommendationService(
        search_backend=HttpSearchBackend(client, settings),
        personalization_backend=HttpPersonalizationBackend(client, settings),
    )
    try:
        yield
    finally:
        await client.aclose()
        logger.info("Shutting down Recommend API...")


# Создаем приложение
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan
)

# Настройка CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # В продакшене указать конкретные домены
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Подключаем роутеры
app.include_router(recommendations)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {"message": "Welcome to Recommend API"}


@app.get("/health")
async def health_check():
    """Проверка здоровья сервиса"""
    return {"status": "healthy"}
