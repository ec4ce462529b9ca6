"""Tests for the in-memory moderation queue."""

import asyncio
from typing import Any

import httpx
import pytest

from models.enums import IdeaStatus, ProfileRole
from models.exceptions import InsufficientPermissionsException
from models.schemas import AuthContext, Author, Idea
from moderation import (
    FeaturedFilter,
    HttpIdeaStore,
    IdeaStore,
    IdeaStoreError,
    ModerationAction,
    ModerationQueue,
)

ADMIN = AuthContext(profile_id="admin-1", role=ProfileRole.ADMIN)


def idea(idea_id: int, **fields) -> Idea:
    values = {
        "id": idea_id,
        "title": f"Idea {idea_id}",
        "status": IdeaStatus.SUBMITTED,
    }
    values.update(fields)
    return Idea(**values)


class FakeIdeaStore(IdeaStore):
    """In-memory store recording calls; failures are queued per operation."""

    def __init__(self, ideas: list[Idea] | None = None):
        self.ideas = list(ideas or [])
        self.fetch_error: IdeaStoreError | None = None
        self.update_errors: dict[int, IdeaStoreError] = {}
        self.updates: list[tuple[int, dict[str, Any]]] = []
        self.fetch_calls = 0

    async def fetch_pending(self) -> list[Idea]:
        self.fetch_calls += 1
        if self.fetch_error:
            raise self.fetch_error
        return list(self.ideas)

    async def update_idea(self, idea_id: int, changes: dict[str, Any]) -> None:
        self.updates.append((idea_id, changes))
        if idea_id in self.update_errors:
            raise self.update_errors[idea_id]


class GatedIdeaStore(FakeIdeaStore):
    """Store whose updates wait until the test opens the gate."""

    def __init__(self, ideas: list[Idea] | None = None):
        super().__init__(ideas)
        self.gate = asyncio.Event()

    async def update_idea(self, idea_id: int, changes: dict[str, Any]) -> None:
        self.updates.append((idea_id, changes))
        await self.gate.wait()
        if idea_id in self.update_errors:
            raise self.update_errors[idea_id]


@pytest.fixture
def pending() -> list[Idea]:
    return [
        idea(1, category="Energy", tags=["solar"], is_featured=True),
        idea(2, category="Education", author=Author(full_name="Grace Hopper")),
        idea(3, category="Energy"),
    ]


@pytest.fixture
def store(pending) -> FakeIdeaStore:
    return FakeIdeaStore(pending)


@pytest.fixture
async def queue(store) -> ModerationQueue:
    q = ModerationQueue(store, ADMIN)
    result = await q.load()
    assert result.ok
    return q


class TestConstruction:
    """Tests for the admin precondition."""

    def test_rejects_non_admin_context(self, store):
        student = AuthContext(profile_id="student-1", role=ProfileRole.STUDENT)
        with pytest.raises(InsufficientPermissionsException):
            ModerationQueue(store, student)

    def test_starts_empty_with_default_filters(self, store):
        q = ModerationQueue(store, ADMIN)
        assert q.ideas == []
        assert q.search_term == ""
        assert q.category_filter == "all"
        assert q.featured_filter == FeaturedFilter.ALL
        assert q.loading is False


class TestLoad:
    """Tests for ModerationQueue.load."""

    @pytest.mark.asyncio
    async def test_load_replaces_working_set(self, store, pending):
        q = ModerationQueue(store, ADMIN)
        result = await q.load()

        assert result.ok
        assert result.action == ModerationAction.LOAD
        assert q.ideas == pending
        assert q.loading is False

    @pytest.mark.asyncio
    async def test_failed_load_empties_working_set(self, queue, store):
        store.fetch_error = IdeaStoreError("boom", status_code=500, code="internal_error")

        result = await queue.load()

        assert not result.ok
        assert result.error.message == "boom"
        assert result.error.status_code == 500
        assert queue.ideas == []
        assert queue.loading is False

    @pytest.mark.asyncio
    async def test_failed_load_never_raises(self, store):
        store.fetch_error = IdeaStoreError("unreachable", code="network_error")
        q = ModerationQueue(store, ADMIN)

        result = await q.load()

        assert result.error.code == "network_error"

    @pytest.mark.asyncio
    async def test_large_working_set_logs_warning(self, caplog_loguru):
        store = FakeIdeaStore([idea(i) for i in range(1, 4)])
        q = ModerationQueue(store, ADMIN, max_working_set=3)

        await q.load()

        assert any("working set limit" in message for message in caplog_loguru)


class TestViews:
    """Tests for filtered() and categories()."""

    @pytest.mark.asyncio
    async def test_categories(self, queue):
        assert queue.categories() == ["Education", "Energy"]

    @pytest.mark.asyncio
    async def test_filtered_uses_current_filters(self, queue):
        queue.set_filters(category="energy", featured="standard")
        assert [i.id for i in queue.filtered()] == [3]

        queue.set_filters(search_term="hopper", category="all", featured="all")
        assert [i.id for i in queue.filtered()] == [2]

    @pytest.mark.asyncio
    async def test_reset_filters(self, queue):
        queue.set_filters(search_term="x", category="Energy", featured="featured")
        queue.reset_filters()
        assert len(queue.filtered()) == 3

    def test_set_filters_rejects_unknown_featured_value(self, store):
        q = ModerationQueue(store, ADMIN)
        with pytest.raises(ValueError):
            q.set_filters(featured="maybe")


class TestVerdicts:
    """Tests for approve and reject."""

    @pytest.mark.asyncio
    async def test_approve_evicts_on_success(self, queue, store):
        result = await queue.approve(2)

        assert result.ok
        assert result.idea_id == 2
        assert store.updates == [(2, {"status": "approved"})]
        assert [i.id for i in queue.ideas] == [1, 3]

    @pytest.mark.asyncio
    async def test_reject_evicts_on_success(self, queue, store):
        result = await queue.reject(1)

        assert result.ok
        assert store.updates == [(1, {"status": "rejected"})]
        assert [i.id for i in queue.ideas] == [2, 3]

    @pytest.mark.asyncio
    async def test_failed_verdict_leaves_working_set_unchanged(self, queue, store):
        store.update_errors[2] = IdeaStoreError(
            "Idea 2 cannot move from approved to rejected",
            status_code=409,
            code="invalid_status_transition",
        )
        before = queue.ideas

        result = await queue.reject(2)

        assert not result.ok
        assert result.error.code == "invalid_status_transition"
        assert result.error.status_code == 409
        assert queue.ideas == before

    @pytest.mark.asyncio
    async def test_unknown_id_is_refused_without_dispatch(self, queue, store):
        result = await queue.approve(99)

        assert not result.ok
        assert result.error.code == "not_in_queue"
        assert store.updates == []

    @pytest.mark.asyncio
    async def test_categories_follow_evictions(self, queue):
        await queue.approve(2)
        assert queue.categories() == ["Energy"]


class TestFeaturing:
    """Tests for feature and unfeature."""

    @pytest.mark.asyncio
    async def test_feature_patches_in_place(self, queue, store):
        result = await queue.feature(3)

        assert result.ok
        assert store.updates == [(3, {"is_featured": True})]
        assert [i.id for i in queue.ideas] == [1, 2, 3]
        assert queue.get(3).is_featured is True
        assert queue.get(3).status == IdeaStatus.SUBMITTED

    @pytest.mark.asyncio
    async def test_unfeature_patches_in_place(self, queue):
        result = await queue.unfeature(1)

        assert result.ok
        assert queue.get(1).is_featured is False
        assert [i.id for i in queue.ideas] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_failed_feature_leaves_flag_unchanged(self, queue, store):
        store.update_errors[3] = IdeaStoreError("nope", status_code=403)

        result = await queue.feature(3)

        assert not result.ok
        assert queue.get(3).is_featured is False

    @pytest.mark.asyncio
    async def test_feature_does_not_mutate_previous_snapshot(self, queue):
        snapshot = queue.ideas
        await queue.feature(3)
        assert snapshot[2].is_featured is False


class TestConcurrentMutations:
    """Tests for the per-id in-flight guard."""

    @pytest.mark.asyncio
    async def test_second_mutation_on_same_id_is_refused(self, pending):
        store = GatedIdeaStore(pending)
        q = ModerationQueue(store, ADMIN)
        await q.load()

        first = asyncio.create_task(q.approve(1))
        await asyncio.sleep(0)
        assert q.is_in_flight(1)

        second = await q.reject(1)
        assert not second.ok
        assert second.error.code == "mutation_in_progress"

        store.gate.set()
        assert (await first).ok
        assert store.updates == [(1, {"status": "approved"})]
        assert q.get(1) is None
        assert not q.is_in_flight(1)

    @pytest.mark.asyncio
    async def test_mutations_on_different_ids_run_together(self, pending):
        store = GatedIdeaStore(pending)
        q = ModerationQueue(store, ADMIN)
        await q.load()

        tasks = [asyncio.create_task(q.approve(1)), asyncio.create_task(q.feature(2))]
        await asyncio.sleep(0)
        store.gate.set()
        results = await asyncio.gather(*tasks)

        assert all(r.ok for r in results)
        assert [i.id for i in q.ideas] == [2, 3]
        assert q.get(2).is_featured is True

    @pytest.mark.asyncio
    async def test_guard_released_after_failure(self, queue, store):
        store.update_errors[1] = IdeaStoreError("down", code="network_error")
        assert not (await queue.approve(1)).ok

        del store.update_errors[1]
        assert (await queue.approve(1)).ok

    @pytest.mark.asyncio
    async def test_second_load_while_loading_is_refused(self, pending):
        class SlowStore(FakeIdeaStore):
            def __init__(self, ideas):
                super().__init__(ideas)
                self.gate = asyncio.Event()

            async def fetch_pending(self):
                await self.gate.wait()
                return await super().fetch_pending()

        store = SlowStore(pending)
        q = ModerationQueue(store, ADMIN)

        first = asyncio.create_task(q.load())
        await asyncio.sleep(0)
        assert q.loading is True

        second = await q.load()
        assert second.error.code == "load_in_progress"

        store.gate.set()
        assert (await first).ok
        assert store.fetch_calls == 1


class TestTwoIdeaScenario:
    """AgriTech/EduPay working set driven through the queue."""

    @pytest.mark.asyncio
    async def test_approve_then_search(self):
        store = FakeIdeaStore(
            [
                idea(1, title="AgriTech", category="Technology", is_featured=False),
                idea(2, title="EduPay", category="Finance", is_featured=True),
            ]
        )
        q = ModerationQueue(store, ADMIN)
        await q.load()
        assert q.categories() == ["Finance", "Technology"]

        q.set_filters(search_term="agri")
        assert [i.id for i in q.filtered()] == [1]

        assert (await q.approve(1)).ok
        assert [i.id for i in q.ideas] == [2]
        assert q.filtered() == []


class TestOverHttp:
    """Queue behaviour when the HTTP store answers with something unexpected."""

    PENDING = {
        "ideas": [{"id": 1, "title": "Solar Backpack", "status": "submitted"}],
        "total": 1,
    }

    @staticmethod
    def http_store(handler) -> HttpIdeaStore:
        return HttpIdeaStore(
            "http://showcase.test", "token", transport=httpx.MockTransport(handler)
        )

    @pytest.mark.asyncio
    async def test_redirected_verdict_keeps_idea(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json=self.PENDING)
            return httpx.Response(
                307, headers={"Location": "https://elsewhere.test/api/admin/ideas/1"}
            )

        async with self.http_store(handler) as store:
            q = ModerationQueue(store, ADMIN)
            assert (await q.load()).ok

            result = await q.approve(1)

        assert not result.ok
        assert result.error.status_code == 307
        assert [i.id for i in q.ideas] == [1]

    @pytest.mark.asyncio
    async def test_undecodable_load_is_a_failed_result(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, headers={"Content-Encoding": "gzip"}, content=b"not gzip"
            )

        async with self.http_store(handler) as store:
            q = ModerationQueue(store, ADMIN)
            result = await q.load()

        assert not result.ok
        assert result.error.code == "malformed_response"
        assert q.ideas == []
