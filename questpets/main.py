from apscheduler.schedulers.asyncio import AsyncIOScheduler
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import AsyncEngine

from questpets import db
from questpets.authentication.session_auth import (
    AccountBalanceHook,
    AccountSessionVerifier,
    NoopBalanceHook,
)
from questpets.load_secrets import (
    catalog_sample_start,
    credit_rewards,
    log_level,
    rotation_check_minutes,
)
from questpets.models.schema_models import TaskSchema
from questpets.models.schemas import Base
from questpets.routers import task
from questpets.services.completion import CompletionEngine
from questpets.services.rotation import RotationEngine
from questpets.services.task_store import TaskStore

logging.basicConfig(level=log_level)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

DEFAULT_TASKS = [
    TaskSchema(name="attend lecture", reward=100),
    TaskSchema(name="go for a run", reward=50),
    TaskSchema(name="read a chapter", reward=30),
    TaskSchema(name="drink eight glasses of water", reward=20),
    TaskSchema(name="tidy your desk", reward=20),
    TaskSchema(name="sleep before midnight", reward=40),
]


def create_app(database_engine: AsyncEngine | None = None, default_tasks=DEFAULT_TASKS) -> FastAPI:
    """Build the application around a database engine. The module level engine is used by default."""
    database_engine = database_engine or db.engine
    session_factory = (
        db.Session if database_engine is db.engine else db.create_session_factory(database_engine)
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create tables, seed the task catalog and wire the task use cases.
        This function is called to start the server.
        """
        async with database_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        store = TaskStore(session_factory)
        await store.seed_catalog(default_tasks)

        sessions = AccountSessionVerifier(session_factory)
        balance = AccountBalanceHook(session_factory) if credit_rewards else NoopBalanceHook()
        app.state.task_store = store
        app.state.completion_engine = CompletionEngine(store, sessions, balance)
        app.state.rotation_engine = RotationEngine(
            store,
            sessions,
            sample_start=catalog_sample_start,
        )

        scheduler = AsyncIOScheduler()
        if rotation_check_minutes > 0:
            # Rotate ahead of the first request of the day
            scheduler.add_job(
                app.state.rotation_engine.rotate_if_stale,
                "interval",
                minutes=rotation_check_minutes,
            )
            scheduler.start()
        try:
            yield
        finally:
            if scheduler.running:
                scheduler.shutdown()
            logging.info("Stop Server")

    app = FastAPI(lifespan=lifespan)
    app.include_router(task.task_router)
    return app


app = create_app()


