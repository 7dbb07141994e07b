import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.application.container import NotificationCenter, build_notification_center
from app.config import Settings, get_settings
from app.interfaces.api.routes import register_routes


def create_app(
    settings: Settings | None = None,
    center: NotificationCenter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = settings or get_settings()
    logging.getLogger("app").setLevel(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the notification center on startup and release it on shutdown."""

        notification_center = center or build_notification_center(settings)
        notification_center.start(asyncio.get_running_loop())
        app.state.notification_center = notification_center
        yield
        app.state.notification_center = None
        notification_center.shutdown()

    app = FastAPI(title="Debt Notifier", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
