import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.core.database import supabase_connection
from src.core.settings import settings
from src.domains.auth.routes import router as auth_router
from src.domains.boards.routes import router as boards_router
from src.domains.commissions.routes import router as commissions_router
from src.domains.groups.routes import router as groups_router
from src.domains.invoices.routes import router as invoices_router
from src.domains.notifications.routes import router as notifications_router
from src.domains.scheduled_checks.routes import router as scheduled_checks_router
from src.domains.tasks.routes import router as tasks_router
from src.domains.users.routes import router as users_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup
    await supabase_connection.connect()
    logger.info("Operations dashboard API started")
    yield
    # Shutdown
    await supabase_connection.disconnect()


app = FastAPI(
    title="Operations Dashboard API",
    description="API for the multi-department operations dashboard",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL] if settings.FRONTEND_URL else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(boards_router, prefix="/api/v1")
app.include_router(commissions_router, prefix="/api/v1")
app.include_router(groups_router, prefix="/api/v1")
app.include_router(invoices_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(scheduled_checks_router, prefix="/api/v1")
app.include_router(tasks_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")


@app.get("/")
async def root() -> dict[str, str]:
    return {"message": "Operations Dashboard API is running"}


@app.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy"}
