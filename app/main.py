"""Todo Streaks - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.errors import register_exception_handlers
from app.core.logging_config import configure_logging
from app.db.base import Base
from app.db.session import engine, AsyncSessionLocal
from app.routers import admin, auth, notes, rewards, todos
from app.services.accounts import seed_admin

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        admin_user = await seed_admin(db, settings)
        if admin_user is not None:
            logger.info("Bootstrap admin: %s", admin_user.email)

    logger.info("%s started (timezone=%s)", settings.app_name, settings.timezone)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Dated to-do lists, notes and a daily completion streak",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(todos.router)
app.include_router(notes.router)
app.include_router(rewards.router)
app.include_router(admin.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
