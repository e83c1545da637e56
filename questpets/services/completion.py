"""Task completion use cases.

A completion is accepted at most once per account, task name and calendar
day. The duplicate check and the insert are separate store calls, so two
concurrent requests for the same task can both pass the check.
"""

import logging
from datetime import datetime
from typing import Callable, List

from questpets.authentication.session_auth import BalanceHook, NoopBalanceHook, SessionVerifier
from questpets.domain.day_key import day_key, format_timestamp
from questpets.domain.task_rules import catalog_reward_of, is_duplicate_completion
from questpets.models.dc_models import ErrorKind, PurgeResultModel
from questpets.models.schema_models import CompletionRecordSchema
from questpets.models.schemas import new_record_id
from questpets.services.result import StoreError, TaskResult
from questpets.services.task_store import TaskStore


class CompletionEngine:
    def __init__(
        self,
        store: TaskStore,
        sessions: SessionVerifier,
        balance: BalanceHook | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.sessions = sessions
        self.balance = balance or NoopBalanceHook()
        self.clock = clock

    async def complete_task(
        self, session_id: str, task: str, image: str, reward: float
    ) -> TaskResult[CompletionRecordSchema]:
        """Record that the session's account completed a task today

        Args:
            session_id (str): Session token of the requesting account
            task (str): Name of the completed task
            image (str): URL of the proof image
            reward (float): Reward the client claims. Only the catalog reward of the
                task is credited, names missing from the catalog earn nothing

        Returns:
            TaskResult[CompletionRecordSchema]: The stored record, or invalid_session,
            duplicate_completion or store_failure
        """
        account_id = await self.sessions.verify_session(session_id)
        if account_id is None:
            logging.warning("Completion rejected: invalid session")
            return TaskResult.failure(ErrorKind.invalid_session)

        timestamp = format_timestamp(self.clock())
        today = day_key(timestamp)
        try:
            records = await self.store.find_completions_by_account(account_id)
            if is_duplicate_completion(records, task, today):
                logging.info(f"Completion rejected: {account_id} already completed '{task}' on {today}")
                return TaskResult.failure(ErrorKind.duplicate_completion)

            catalog_reward = catalog_reward_of(await self.store.find_all_tasks(), task)
            record = CompletionRecordSchema(
                id=new_record_id(),
                account_id=account_id,
                timestamp=timestamp,
                task=task,
                image=image,
            )
            await self.store.save_completion(record)
        except StoreError as e:
            logging.error(f"Completion of '{task}' for {account_id} failed: {e}")
            return TaskResult.failure(ErrorKind.store_failure)

        if catalog_reward is None:
            logging.warning(f"'{task}' is not in the task catalog, no reward credited to {account_id}")
        else:
            if catalog_reward != reward:
                logging.info(f"Claimed reward {reward} for '{task}' differs from catalog reward {catalog_reward}")
            await self.balance.credit_reward(account_id, catalog_reward)
        logging.info(f"{account_id} completed '{task}' on {today}")
        return TaskResult.success(record)

    async def purge_completions(self, account_id: str) -> TaskResult[int]:
        """Delete every completion record of an account, used when the account is deleted

        Returns:
            TaskResult[int]: Number of deleted records
        """
        try:
            records = await self.store.find_completions_by_account(account_id)
            for record in records:
                await self.store.delete_completion_by_id(record.id)
        except StoreError as e:
            logging.error(f"Purging completions of {account_id} failed: {e}")
            return TaskResult.failure(ErrorKind.store_failure)

        logging.info(f"Deleted {len(records)} completion records of {account_id}")
        return TaskResult.success(len(records))

    async def purge_own_completions(self, session_id: str) -> TaskResult[PurgeResultModel]:
        """Purge the completions of the account holding the session, part of deleting that account"""
        account_id = await self.sessions.verify_session(session_id)
        if account_id is None:
            logging.warning("Completion purge rejected: invalid session")
            return TaskResult.failure(ErrorKind.invalid_session)
        result = await self.purge_completions(account_id)
        if not result.ok:
            return TaskResult.failure(result.error)
        return TaskResult.success(PurgeResultModel(account_id=account_id, deleted=result.value))

    async def completion_history(self, session_id: str) -> TaskResult[List[CompletionRecordSchema]]:
        account_id = await self.sessions.verify_session(session_id)
        if account_id is None:
            return TaskResult.failure(ErrorKind.invalid_session)
        try:
            return TaskResult.success(await self.store.find_completions_by_account(account_id))
        except StoreError as e:
            logging.error(f"Reading completion history of {account_id} failed: {e}")
            return TaskResult.failure(ErrorKind.store_failure)
