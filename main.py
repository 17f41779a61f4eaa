import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
import uvicorn

from config import Settings
from database import Database
from routers import (
    addresses_router,
    payments_router,
    reminders_router,
    settings_router,
    tenancies_router,
)
from services import (
    InMemoryNotificationCenter,
    NotificationService,
    ReminderScheduler,
    TenancyStore,
    detach,
)

# Load .env
load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Catch up on reminders that should have been scheduled while the app was down
    if app.state.run_startup_checks:
        detach(app.state.scheduler.check_overdue_rent())
        detach(app.state.scheduler.check_renewals())
    yield
    app.state.database.close()


def create_app(
    settings: Optional[Settings] = None,
    notifications: Optional[NotificationService] = None,
    run_startup_checks: bool = True,
) -> FastAPI:
    """
    Build the application and its collaborators.

    One Database, TenancyStore and ReminderScheduler are created here and
    shared through ``app.state``.
    """
    settings = settings or Settings.from_env()

    database = Database(settings)
    database.open()
    store = TenancyStore(database)
    scheduler = ReminderScheduler.from_settings(
        settings,
        notifications or InMemoryNotificationCenter(),
        store=store,
    )

    app = FastAPI(title="Property Tenancy", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.store = store
    app.state.scheduler = scheduler
    app.state.run_startup_checks = run_startup_checks

    # CORS
    origins = [o for o in os.getenv("CORS_ORIGINS", "").split(",") if o]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(addresses_router)
    app.include_router(tenancies_router)
    app.include_router(payments_router)
    app.include_router(reminders_router)
    app.include_router(settings_router)

    @app.get("/api/health")
    def health():
        return {"status": "ok", "database": str(database.path)}

    logger.info("Property Tenancy API ready (database %s)", database.path)
    return app


if __name__ == "__main__":
    _settings = Settings.from_env()
    configure_logging(_settings.log_level)
    uvicorn.run(
        create_app(_settings),
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )
