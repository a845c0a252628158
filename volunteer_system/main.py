"""
Volunteer System — FastAPI Application.

This is the entry point for the application. All routers are
registered here, and the lifespan hook seeds the default roles
and runs the expiration sweeper for as long as the app is up.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from volunteer_system.config import get_settings
from volunteer_system.logging_config import configure_logging
from volunteer_system.models.base import SessionLocal
from volunteer_system.services.expiration_sweeper import ExpirationSweeper
from volunteer_system.services.locking import ActivityLocks
from volunteer_system.services.user_service import UserService
from volunteer_system.api.health import router as health_router
from volunteer_system.api.users import router as users_router
from volunteer_system.api.activities import router as activities_router
from volunteer_system.api.applications import router as applications_router

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)

    db = SessionLocal()
    try:
        UserService(db).ensure_default_roles()
        db.commit()
    finally:
        db.close()

    sweeper = ExpirationSweeper(
        SessionLocal, interval_seconds=settings.SWEEP_INTERVAL_SECONDS
    )
    if settings.SWEEPER_ENABLED:
        sweeper.start()
    app.state.sweeper = sweeper

    try:
        yield
    finally:
        sweeper.shutdown()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Volunteer activities, applications and their review",
    lifespan=lifespan,
)

# One lock registry per process, shared by every request.
app.state.activity_locks = ActivityLocks()

# Register routers
app.include_router(health_router)
app.include_router(users_router)
app.include_router(activities_router)
app.include_router(applications_router)


def run() -> None:
    import uvicorn

    uvicorn.run(
        "volunteer_system.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
