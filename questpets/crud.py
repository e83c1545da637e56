from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete, select
from typing import List
import logging

from questpets.models.schema_models import (
    AccountSchema,
    ActiveTaskSchema,
    CompletionRecordSchema,
    TaskSchema,
)
from questpets.models.schemas import (
    Account,
    Task,
    TaskActive,
    TaskCompletionRecord,
)

# Reads return None and writes return False when the database call fails.
# The service layer decides what a failed call means for the request.


class ReadData:
    @staticmethod
    async def read_task_list(session: AsyncSession) -> List[TaskSchema] | None:
        """Read the whole task catalog in insertion order

        Returns:
            List[TaskSchema]: Every task that can become active
        """
        try:
            stmt = select(Task).order_by(Task.id)
            result = await session.execute(stmt)
            return [TaskSchema.model_validate(task) for task in result.scalars().all()]
        except Exception as e:
            logging.error(f"Failed to read task list: {e}")
            return None

    @staticmethod
    async def read_active_list(session: AsyncSession) -> List[ActiveTaskSchema] | None:
        """Read the current active task set in insertion order

        Returns:
            List[ActiveTaskSchema]: Active tasks, empty before the first rotation
        """
        try:
            stmt = select(TaskActive).order_by(TaskActive.id)
            result = await session.execute(stmt)
            return [ActiveTaskSchema.model_validate(task) for task in result.scalars().all()]
        except Exception as e:
            logging.error(f"Failed to read active task list: {e}")
            return None

    @staticmethod
    async def read_completion_records(
        account_id: str, session: AsyncSession
    ) -> List[CompletionRecordSchema] | None:
        """Read every completion record of an account

        Args:
            account_id (str): To identify the account

        Returns:
            List[CompletionRecordSchema]: Records ordered by timestamp
        """
        try:
            stmt = (
                select(TaskCompletionRecord)
                .where(TaskCompletionRecord.account_id == account_id)
                .order_by(TaskCompletionRecord.timestamp, TaskCompletionRecord.id)
            )
            result = await session.execute(stmt)
            return [
                CompletionRecordSchema.model_validate(record)
                for record in result.scalars().all()
            ]
        except Exception as e:
            logging.error(f"Failed to read completion records of {account_id}: {e}")
            return None

    @staticmethod
    async def read_account_by_session(session_id: str, session: AsyncSession) -> AccountSchema | None:
        """Read the account that currently holds the session id

        Args:
            session_id (str): Session token issued at login

        Returns:
            AccountSchema: The account, None if the session is unknown
        """
        try:
            stmt = select(Account).where(Account.session_id == session_id)
            result = await session.execute(stmt)
            account = result.scalars().first()
            if account is None:
                return None
            return AccountSchema.model_validate(account)
        except Exception as e:
            logging.error(f"Failed to read account by session: {e}")
            return None


class CreateData:
    @staticmethod
    async def add_active_task(active_task: ActiveTaskSchema, session: AsyncSession) -> None:
        """Add one active task entry without committing

        NOTE: Use inside session.begin(); errors propagate so the transaction rolls back.
        """
        session.add(
            TaskActive(
                name=active_task.name,
                reward=active_task.reward,
                timestamp=active_task.timestamp,
            )
        )

    @staticmethod
    async def create_active_task(active_task: ActiveTaskSchema, session: AsyncSession) -> bool:
        """Create one active task entry

        Args:
            active_task (ActiveTaskSchema): Catalog task stamped with the rotation timestamp
        """
        try:
            session.add(
                TaskActive(
                    name=active_task.name,
                    reward=active_task.reward,
                    timestamp=active_task.timestamp,
                )
            )
            await session.commit()
            return True
        except Exception as e:
            await session.rollback()
            logging.error(f"Failed to create active task {active_task.name}: {e}")
            return False

    @staticmethod
    async def create_completion_record(record: CompletionRecordSchema, session: AsyncSession) -> bool:
        """Create a task completion record

        Args:
            record (CompletionRecordSchema): Account, timestamp, task name and image url
        """
        try:
            session.add(
                TaskCompletionRecord(
                    id=record.id,
                    account_id=record.account_id,
                    timestamp=record.timestamp,
                    task=record.task,
                    image=record.image,
                )
            )
            await session.commit()
            return True
        except Exception as e:
            await session.rollback()
            logging.error(f"Failed to create completion record for {record.account_id}: {e}")
            return False

    @staticmethod
    async def create_default_task_data(task: TaskSchema, session: AsyncSession) -> bool:
        """Create a catalog task unless one with the same name exists

        Args:
            task (TaskSchema): Task name and reward
        """
        try:
            result = await session.execute(select(Task).where(Task.name == task.name))
            if result.scalars().first() is None:
                session.add(Task(name=task.name, reward=task.reward))
                await session.commit()
            return True
        except Exception as e:
            await session.rollback()
            logging.error(f"Failed to create default task data: {e}")
            return False


class UpdateData:
    @staticmethod
    async def update_balance(account_id: str, amount: float, session: AsyncSession) -> bool:
        """Add an amount to the balance of an account

        Args:
            account_id (str): To identify the account
            amount (float): Reward to add
        """
        try:
            stmt = select(Account).where(Account.account_id == account_id)
            result = await session.execute(stmt)
            account = result.scalars().first()
            if account is None:
                logging.warning(f"Account {account_id} not found, balance unchanged")
                return False
            account.balance = (account.balance or 0.0) + amount
            await session.commit()
            return True
        except Exception as e:
            await session.rollback()
            logging.error(f"Failed to update balance of {account_id}: {e}")
            return False


class DeleteData:
    @staticmethod
    async def clear_active_list(session: AsyncSession) -> None:
        """Delete every active task without committing

        NOTE: Use inside session.begin(); errors propagate so the transaction rolls back.
        """
        await session.execute(delete(TaskActive))

    @staticmethod
    async def delete_active_list(session: AsyncSession) -> bool:
        """Delete every active task"""
        try:
            await session.execute(delete(TaskActive))
            await session.commit()
            return True
        except Exception as e:
            await session.rollback()
            logging.error(f"Failed to delete active task list: {e}")
            return False

    @staticmethod
    async def delete_completion_record(record_id: str, session: AsyncSession) -> bool:
        """Delete one completion record

        Args:
            record_id (str): Unique id of the record
        """
        try:
            await session.execute(
                delete(TaskCompletionRecord).where(TaskCompletionRecord.id == record_id)
            )
            await session.commit()
            return True
        except Exception as e:
            await session.rollback()
            logging.error(f"Failed to delete completion record {record_id}: {e}")
            return False
