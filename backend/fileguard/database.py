"""Async engine, session factory and the ``get_db`` dependency.

Routes never touch the session directly; they hand it to a service:

    def get_policy_service(db: AsyncSession = Depends(get_db)):
        return ExtensionPolicyService(db)
"""
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from fileguard.config import settings


def _engine_kwargs(database_url: str) -> dict:
    # SQLite (local runs, tests) has no sized pool
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_size": 10, "max_overflow": 20, "pool_pre_ping": True}


engine = create_async_engine(settings.DATABASE_URL, echo=False, **_engine_kwargs(settings.DATABASE_URL))

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db():
    """Yield one session per request; closed when the response is sent."""
    async with async_session() as session:
        yield session
