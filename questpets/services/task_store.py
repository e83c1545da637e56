"""DB service layer for task use cases.

- Engines do not touch DB sessions directly; they call this module.
- This layer owns session boundaries, one session per store call.
- A failed CRUD call is raised as StoreError.
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import async_sessionmaker

from questpets.crud import CreateData, DeleteData, ReadData
from questpets.models.schema_models import (
    ActiveTaskSchema,
    CompletionRecordSchema,
    TaskSchema,
)
from questpets.services.result import StoreError


class TaskStore:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def find_all_tasks(self) -> List[TaskSchema]:
        async with self._session_factory() as session:
            tasks = await ReadData.read_task_list(session)
        if tasks is None:
            raise StoreError("Failed to read task list")
        return tasks

    async def find_all_active(self) -> List[ActiveTaskSchema]:
        async with self._session_factory() as session:
            active = await ReadData.read_active_list(session)
        if active is None:
            raise StoreError("Failed to read active task list")
        return active

    async def delete_all_active(self) -> None:
        async with self._session_factory() as session:
            success = await DeleteData.delete_active_list(session)
        if not success:
            raise StoreError("Failed to delete active task list")

    async def save_active(self, active_task: ActiveTaskSchema) -> None:
        async with self._session_factory() as session:
            success = await CreateData.create_active_task(active_task, session)
        if not success:
            raise StoreError(f"Failed to save active task {active_task.name}")

    async def replace_active(self, active_tasks: List[ActiveTaskSchema]) -> None:
        """Swap the whole active set in one transaction.

        NOTE: Do not call CRUD helpers that commit() inside this transaction.
        """
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await DeleteData.clear_active_list(session)
                    for active_task in active_tasks:
                        await CreateData.add_active_task(active_task, session)
        except Exception as e:
            logging.error(f"Failed to replace active task list: {e}")
            raise StoreError("Failed to replace active task list") from e

    async def save_completion(self, record: CompletionRecordSchema) -> None:
        async with self._session_factory() as session:
            success = await CreateData.create_completion_record(record, session)
        if not success:
            raise StoreError(f"Failed to save completion record {record.id}")

    async def find_completions_by_account(self, account_id: str) -> List[CompletionRecordSchema]:
        async with self._session_factory() as session:
            records = await ReadData.read_completion_records(account_id, session)
        if records is None:
            raise StoreError(f"Failed to read completion records of {account_id}")
        return records

    async def delete_completion_by_id(self, record_id: str) -> None:
        async with self._session_factory() as session:
            success = await DeleteData.delete_completion_record(record_id, session)
        if not success:
            raise StoreError(f"Failed to delete completion record {record_id}")

    async def seed_catalog(self, tasks: List[TaskSchema]) -> None:
        async with self._session_factory() as session:
            for task in tasks:
                if not await CreateData.create_default_task_data(task, session):
                    raise StoreError(f"Failed to seed task {task.name}")
