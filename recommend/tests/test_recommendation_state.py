import asyncio
import logging
import pytest
from recommend.schemas.recommendation import RecommendRequest
from recommend.services.errors import PersonalizationError, SearchError
from recommend.services.personalization import EXPERIMENTAL_WARNING
from recommend.services.recommendation_service import RecommendationService
from recommend.services.recommendation_state import RecommendationState, Status
from recommend.tests.fakes import FakeSearchBackend, FakePersonalizationBackend


def _request(source_item_id: str) -> RecommendRequest:
    return RecommendRequest(model="related-products", baseIndexName="indexName", sourceItemID=source_item_id)


def _gated_backend(*source_item_ids):
    """Backend, где ответ на каждый запрос задерживается до открытия ворот"""
    backend = FakeSearchBackend()
    gates = {}
    for source_item_id in source_item_ids:
        rule_context = f"alg-recommend_related-products_{source_item_id}"
        gates[source_item_id] = backend.gates[rule_context] = asyncio.Event()
        backend.hits_by_rule_context[rule_context] = [{"objectID": f"from-{source_item_id}", "_score": 1}]
    return backend, gates


def _warnings(caplog):
    return [record for record in caplog.records if record.getMessage() == EXPERIMENTAL_WARNING]


@pytest.mark.anyio
async def test_loading_then_success():
    """Тест переходов idle -> loading -> success"""
    state = RecommendationState(RecommendationService(FakeSearchBackend()), suppress_experimental_warning=True)
    seen = []
    state.subscribe(seen.append)

    assert state.snapshot().status == Status.IDLE

    state.start(_request("objectID"))
    snapshot = await state.wait()

    assert [s.status for s in seen] == [Status.LOADING, Status.SUCCESS]
    assert snapshot.status == Status.SUCCESS
    assert len(snapshot.result) == 1
    assert snapshot.error is None


@pytest.mark.anyio
async def test_loading_then_error_keeps_cause():
    """Тест перехода в error с исходной причиной"""
    cause = RuntimeError("backend unavailable")
    state = RecommendationState(RecommendationService(FakeSearchBackend(search_error=cause)))

    state.start(_request("objectID"))
    snapshot = await state.wait()

    assert snapshot.status == Status.ERROR
    assert isinstance(snapshot.error, SearchError)
    assert snapshot.error.cause is cause
    assert snapshot.result is None


@pytest.mark.anyio
async def test_latest_request_wins():
    """Тест: результат устаревшего запроса, пришедший позже, не публикуется"""
    backend, gates = _gated_backend("first", "second")
    state = RecommendationState(RecommendationService(backend))
    seen = []
    state.subscribe(seen.append)

    first = state.start(_request("first"))
    await asyncio.sleep(0)
    second = state.start(_request("second"))

    gates["second"].set()
    await second
    assert state.snapshot().status == Status.SUCCESS
    assert [hit.object_id for hit in state.snapshot().result] == ["from-second"]

    gates["first"].set()
    await first

    assert [hit.object_id for hit in state.snapshot().result] == ["from-second"]
    assert [s.status for s in seen] == [Status.LOADING, Status.LOADING, Status.SUCCESS]
    assert state.generation == 2


@pytest.mark.anyio
async def test_stale_error_is_discarded():
    """Тест: ошибка устаревшего запроса не публикуется"""
    backend, gates = _gated_backend("first", "second")
    state = RecommendationState(RecommendationService(backend))

    first = state.start(_request("first"))
    await asyncio.sleep(0)
    second = state.start(_request("second"))
    gates["second"].set()
    await second

    backend.search_error = RuntimeError("late failure")
    gates["first"].set()
    await first

    assert state.snapshot().status == Status.SUCCESS


@pytest.mark.anyio
async def test_cancel_returns_to_last_settled_state():
    """Тест: отмена возвращает последнее завершенное состояние"""
    backend, gates = _gated_backend("first")
    state = RecommendationState(RecommendationService(backend))
    seen = []
    state.subscribe(seen.append)

    task = state.start(_request("first"))
    state.cancel()
    gates["first"].set()
    await task

    assert state.snapshot().status == Status.IDLE
    assert [s.status for s in seen] == [Status.LOADING, Status.IDLE]


@pytest.mark.anyio
async def test_dispose_prevents_publication():
    """Тест: после завершения подписки результат не публикуется"""
    backend, gates = _gated_backend("first")
    state = RecommendationState(RecommendationService(backend))
    seen = []
    state.subscribe(seen.append)

    task = state.start(_request("first"))
    state.dispose()
    gates["first"].set()
    await task

    assert [s.status for s in seen] == [Status.LOADING]
    assert state.disposed
    with pytest.raises(RuntimeError):
        state.start(_request("first"))


@pytest.mark.anyio
async def test_unsubscribe():
    """Тест отписки"""
    state = RecommendationState(RecommendationService(FakeSearchBackend()))
    seen = []
    unsubscribe = state.subscribe(seen.append)
    unsubscribe()

    state.start(_request("objectID"))
    await state.wait()

    assert seen == []


@pytest.mark.anyio
async def test_failing_subscriber_does_not_block_others():
    """Тест: ошибка одного подписчика не мешает остальным"""
    state = RecommendationState(RecommendationService(FakeSearchBackend()))
    seen = []

    def broken(snapshot):
        raise ValueError("broken subscriber")

    state.subscribe(broken)
    state.subscribe(seen.append)

    state.start(_request("objectID"))
    await state.wait()

    assert [s.status for s in seen] == [Status.LOADING, Status.SUCCESS]


def _personalized(**kwargs) -> RecommendRequest:
    return RecommendRequest(model="trending-items", baseIndexName="test", userToken="user_token", region="eu", **kwargs)


@pytest.mark.anyio
async def test_warning_emitted_once_per_subscription(caplog):
    """Тест: предупреждение выводится один раз за время жизни подписки"""
    service = RecommendationService(FakeSearchBackend(), FakePersonalizationBackend())
    state = RecommendationState(service, suppress_experimental_warning=False)

    with caplog.at_level(logging.WARNING, logger="recommend"):
        state.start(_personalized())
        await state.wait()
        state.start(_personalized())
        await state.wait()

    assert len(_warnings(caplog)) == 1
    assert state.warning_emitted


@pytest.mark.anyio
async def test_warning_flag_is_per_subscription(caplog):
    """Тест: каждая подписка предупреждает сама за себя"""
    service = RecommendationService(FakeSearchBackend(), FakePersonalizationBackend())
    first = RecommendationState(service, suppress_experimental_warning=False)
    second = RecommendationState(service, suppress_experimental_warning=False)

    with caplog.at_level(logging.WARNING, logger="recommend"):
        first.start(_personalized())
        second.start(_personalized())
        await first.wait()
        await second.wait()

    assert len(_warnings(caplog)) == 2


@pytest.mark.anyio
async def test_warning_suppressed(caplog):
    """Тест: suppressExperimentalWarning отключает предупреждение"""
    service = RecommendationService(FakeSearchBackend(), FakePersonalizationBackend())
    state = RecommendationState(service, suppress_experimental_warning=False)

    with caplog.at_level(logging.WARNING, logger="recommend"):
        state.start(_personalized(suppressExperimentalWarning=True))
        await state.wait()

    assert _warnings(caplog) == []
    assert not state.warning_emitted


@pytest.mark.anyio
async def test_no_warning_without_personalization(caplog):
    """Тест: без персонализации предупреждения нет"""
    state = RecommendationState(RecommendationService(FakeSearchBackend()), suppress_experimental_warning=False)

    with caplog.at_level(logging.WARNING, logger="recommend"):
        state.start(RecommendRequest(model="trending-items", baseIndexName="test"))
        await state.wait()

    assert _warnings(caplog) == []


@pytest.mark.anyio
async def test_warning_emitted_even_if_personalization_fails(caplog):
    """Тест: предупреждение не зависит от результата запроса"""
    service = RecommendationService(FakeSearchBackend(), FakePersonalizationBackend(error=ConnectionError("down")))
    state = RecommendationState(service, suppress_experimental_warning=False)

    with caplog.at_level(logging.WARNING, logger="recommend"):
        state.start(_personalized())
        snapshot = await state.wait()

    assert snapshot.status == Status.ERROR
    assert isinstance(snapshot.error, PersonalizationError)
    assert len(_warnings(caplog)) == 1
