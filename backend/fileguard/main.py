"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from fileguard.config import settings
from fileguard.database import engine, get_db
from fileguard.errors import BusinessRuleViolation
from fileguard.models import Base

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Install a basic log format unless uvicorn (or a test runner) already did."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logging.getLogger("fileguard").setLevel(level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed the default fixed extensions on startup."""
    configure_logging(settings.LOG_LEVEL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.SEED_DEFAULT_EXTENSIONS:
        from fileguard.services.seed_defaults import seed_default_fixed_extensions
        from fileguard.database import async_session
        async with async_session() as session:
            await seed_default_fixed_extensions(session)

    logger.info("FileGuard API started, storing uploads under %s", settings.FILE_STORAGE_PATH)

    yield

    await engine.dispose()


app = FastAPI(
    title="FileGuard API",
    version="1.0.0",
    description="File uploads guarded by a fixed/custom extension block policy.",
    lifespan=lifespan,
)

# CORS
origins = [o.strip() for o in settings.CORS_ORIGINS.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BusinessRuleViolation)
async def business_rule_violation_handler(request: Request, exc: BusinessRuleViolation):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/api/health")
async def health_check():
    """Verify API and database connectivity."""
    try:
        async for db in get_db():
            await db.execute(text("SELECT 1"))
            return {"status": "ok", "database": "connected"}
    except Exception as e:
        return {"status": "error", "database": str(e)}


# Register routers
from fileguard.routes.extensions import router as extensions_router
from fileguard.routes.files import router as files_router
app.include_router(extensions_router)
app.include_router(files_router)
