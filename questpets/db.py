from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from questpets.load_secrets import database_url


def create_engine(url: str | None = None) -> AsyncEngine:
    """Create the async engine. Postgres gets a pool, sqlite runs with the driver defaults."""
    url = url or database_url()
    if url.startswith("postgresql"):
        return create_async_engine(url, pool_size=20, max_overflow=20)
    return create_async_engine(url, echo=False)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        autocommit=False,
        class_=AsyncSession,
        autoflush=True,
        expire_on_commit=False,
        bind=bind,
    )


engine = create_engine()

# Centralized session factory to avoid creating it in router modules.
Session = create_session_factory(engine)
