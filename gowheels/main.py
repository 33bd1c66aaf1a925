from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from gowheels.api import bookings
from gowheels.core.config import Settings, get_settings
from gowheels.core.logger import logger, setup_logging
from gowheels.core.security import OriginAllowListMiddleware
from gowheels.services.booking_service import BookingService, BookingStore, Notifier
from gowheels.services.db_service import BookingRepository
from gowheels.services.notification_service import EmailNotifier


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"🚀 Starting {app.state.settings.PROJECT_NAME} ({app.state.settings.ENVIRONMENT})")
    await app.state.repository.connect()
    await app.state.notifier.verify()
    yield
    # Shutdown
    logger.info("🛑 Shutting down backend")


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[BookingStore] = None,
    notifier: Optional[Notifier] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    """
    Builds the application. Collaborators default to the Supabase repository
    and the SMTP notifier configured from `settings`.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)

    repository = repository or BookingRepository(settings)
    notifier = notifier or EmailNotifier(settings)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.repository = repository
    app.state.notifier = notifier
    app.state.booking_service = BookingService.from_settings(settings, repository, notifier, clock=clock)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )
    # Added last so it runs first
    app.add_middleware(OriginAllowListMiddleware, allowed_origins=settings.ALLOWED_ORIGINS)

    # Global Exception Handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"🔥 UNHANDLED ERROR: {exc}")
        return bookings.internal_error_response(request, exc)

    app.include_router(bookings.router, prefix="/api", tags=["Bookings"])

    @app.get("/", response_class=PlainTextResponse)
    async def index():
        return "🚗 Car Rental Backend is running"

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "environment": settings.ENVIRONMENT, "timestamp": datetime.now().isoformat()}

    return app


app = create_app()


def run():
    import uvicorn
    uvicorn.run("gowheels.main:app", host="0.0.0.0", port=get_settings().PORT)


if __name__ == "__main__":
    run()
