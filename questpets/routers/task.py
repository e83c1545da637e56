import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status

from questpets.models.dc_models import CompletionRequestModel, ErrorKind, PurgeResultModel
from questpets.models.schema_models import (
    ActiveTaskSchema,
    CompletionRecordSchema,
    TaskSchema,
)
from questpets.services.completion import CompletionEngine
from questpets.services.result import StoreError, TaskResult
from questpets.services.rotation import RotationEngine
from questpets.services.task_store import TaskStore

task_router = APIRouter()

CLIENT_ERRORS = (ErrorKind.invalid_session, ErrorKind.duplicate_completion)


def get_task_store(request: Request) -> TaskStore:
    return request.app.state.task_store


def get_completion_engine(request: Request) -> CompletionEngine:
    return request.app.state.completion_engine


def get_rotation_engine(request: Request) -> RotationEngine:
    return request.app.state.rotation_engine


def unwrap(result: TaskResult):
    """Return the result value or raise the HTTP error matching its kind

    Raises:
        HTTPException: 400 for invalid_session and duplicate_completion, 500 otherwise
    """
    if result.ok:
        return result.value
    if result.error in CLIENT_ERRORS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error.value)
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=result.error.value
    )


class CompletionAPI:
    @staticmethod
    @task_router.post("/complete_task", response_model=CompletionRecordSchema)
    async def complete_task(
        completion: CompletionRequestModel,
        engine: CompletionEngine = Depends(get_completion_engine),
    ):
        result = await engine.complete_task(
            completion.session_id, completion.task, completion.image, completion.reward
        )
        return unwrap(result)

    @staticmethod
    @task_router.get("/completions", response_model=List[CompletionRecordSchema])
    async def get_completions(
        session_id: str,
        engine: CompletionEngine = Depends(get_completion_engine),
    ):
        return unwrap(await engine.completion_history(session_id))

    @staticmethod
    @task_router.delete("/completions", response_model=PurgeResultModel)
    async def delete_all_completions(
        session_id: str,
        engine: CompletionEngine = Depends(get_completion_engine),
    ):
        # Only the account holding the session can purge, when it deletes itself
        return unwrap(await engine.purge_own_completions(session_id))


class ActiveTaskAPI:
    @staticmethod
    @task_router.get("/active_tasks", response_model=List[ActiveTaskSchema])
    async def get_active_tasks(
        session_id: str,
        engine: RotationEngine = Depends(get_rotation_engine),
    ):
        return unwrap(await engine.get_active_tasks(session_id))

    @staticmethod
    @task_router.get("/tasks", response_model=List[TaskSchema])
    async def get_tasks(store: TaskStore = Depends(get_task_store)):
        try:
            return await store.find_all_tasks()
        except StoreError as e:
            logging.error(f"Reading task catalog failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=ErrorKind.store_failure.value,
            )
