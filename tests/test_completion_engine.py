from __future__ import annotations

from datetime import timedelta

import pytest

from questpets.models.dc_models import ErrorKind
from questpets.services.completion import CompletionEngine

from .fakes import FakeBalanceHook

IMAGE = "https://example.com/lecture.jpg"


@pytest.fixture()
def balance() -> FakeBalanceHook:
    return FakeBalanceHook()


@pytest.fixture()
def engine(store, sessions, balance, clock) -> CompletionEngine:
    return CompletionEngine(store, sessions, balance, clock=clock)


@pytest.mark.asyncio
class TestCompleteTask:
    async def test_first_completion_is_recorded(self, engine, store):
        result = await engine.complete_task("tok", "attend lecture", IMAGE, 100)

        assert result.ok
        record = result.value
        assert record.account_id == "u1"
        assert record.task == "attend lecture"
        assert record.image == IMAGE
        assert record.timestamp.startswith("2024-03-01 09:30:00")
        assert store.completions == [record]

    async def test_second_completion_same_day_is_rejected(self, engine, store, clock):
        await engine.complete_task("tok", "attend lecture", IMAGE, 100)
        clock.now += timedelta(hours=10)

        result = await engine.complete_task("tok", "attend lecture", IMAGE, 100)

        assert result.error is ErrorKind.duplicate_completion
        assert len(store.completions) == 1

    async def test_same_task_next_day_is_allowed(self, engine, store, clock):
        await engine.complete_task("tok", "attend lecture", IMAGE, 100)
        clock.now += timedelta(days=1)

        result = await engine.complete_task("tok", "attend lecture", IMAGE, 100)

        assert result.ok
        assert len(store.completions) == 2

    async def test_other_task_same_day_is_allowed(self, engine, store):
        await engine.complete_task("tok", "run", IMAGE, 10)

        result = await engine.complete_task("tok", "read", IMAGE, 5)

        assert result.ok
        assert [record.task for record in store.completions] == ["run", "read"]

    async def test_other_account_is_not_blocked(self, engine, store):
        await engine.complete_task("tok", "run", IMAGE, 10)

        result = await engine.complete_task("tok2", "run", IMAGE, 10)

        assert result.ok
        assert result.value.account_id == "u2"

    async def test_invalid_session_persists_nothing(self, engine, store, balance):
        result = await engine.complete_task("bad-token", "run", IMAGE, 10)

        assert result.error is ErrorKind.invalid_session
        assert store.completions == []
        assert balance.credited == []

    async def test_reward_is_credited_once(self, engine, balance):
        await engine.complete_task("tok", "run", IMAGE, 10)
        await engine.complete_task("tok", "run", IMAGE, 10)

        assert balance.credited == [("u1", 10)]

    async def test_unknown_tasks_earn_nothing(self, engine, store, balance):
        for i in range(3):
            result = await engine.complete_task("tok", f"made-up {i}", IMAGE, 1_000_000)
            assert result.ok

        assert len(store.completions) == 3
        assert balance.credited == []

    async def test_catalog_reward_is_credited_not_claimed(self, engine, balance):
        await engine.complete_task("tok", "read", IMAGE, 1_000_000)

        assert balance.credited == [("u1", 5)]

    async def test_catalog_failure_saves_nothing(self, engine, store, balance):
        store.failing = "find_all_tasks"

        result = await engine.complete_task("tok", "run", IMAGE, 10)

        assert result.error is ErrorKind.store_failure
        assert store.completions == []
        assert balance.credited == []

    async def test_store_failure_is_reported(self, engine, store, balance):
        store.failing = "save_completion"

        result = await engine.complete_task("tok", "run", IMAGE, 10)

        assert result.error is ErrorKind.store_failure
        assert balance.credited == []

    async def test_record_ids_are_unique(self, engine):
        first = await engine.complete_task("tok", "run", IMAGE, 10)
        second = await engine.complete_task("tok", "read", IMAGE, 5)

        assert first.value.id != second.value.id


@pytest.mark.asyncio
class TestPurgeCompletions:
    async def test_purge_deletes_only_that_account(self, engine, store, clock):
        await engine.complete_task("tok", "run", IMAGE, 10)
        clock.now += timedelta(days=1)
        await engine.complete_task("tok", "run", IMAGE, 10)
        await engine.complete_task("tok2", "run", IMAGE, 10)

        result = await engine.purge_completions("u1")

        assert result.value == 2
        assert await store.find_completions_by_account("u1") == []
        assert len(await store.find_completions_by_account("u2")) == 1

    async def test_purge_without_records_succeeds(self, engine):
        result = await engine.purge_completions("nobody")

        assert result.ok
        assert result.value == 0

    async def test_purge_store_failure(self, engine, store):
        await engine.complete_task("tok", "run", IMAGE, 10)
        store.failing = "delete_completion_by_id"

        result = await engine.purge_completions("u1")

        assert result.error is ErrorKind.store_failure

    async def test_purge_own_completions(self, engine, store):
        await engine.complete_task("tok", "run", IMAGE, 10)
        await engine.complete_task("tok2", "run", IMAGE, 10)

        result = await engine.purge_own_completions("tok")

        assert result.value.account_id == "u1"
        assert result.value.deleted == 1
        assert len(store.completions) == 1

    async def test_purge_own_requires_session(self, engine, store):
        await engine.complete_task("tok", "run", IMAGE, 10)

        result = await engine.purge_own_completions("bad-token")

        assert result.error is ErrorKind.invalid_session
        assert len(store.completions) == 1


@pytest.mark.asyncio
class TestCompletionHistory:
    async def test_history_lists_own_records(self, engine):
        await engine.complete_task("tok", "run", IMAGE, 10)
        await engine.complete_task("tok2", "read", IMAGE, 5)

        result = await engine.completion_history("tok")

        assert [record.task for record in result.value] == ["run"]

    async def test_history_requires_valid_session(self, engine):
        result = await engine.completion_history("bad-token")

        assert result.error is ErrorKind.invalid_session
