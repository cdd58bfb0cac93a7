# app/main.py
from fastapi import FastAPI

from app.api.routes import health, internal, projects, reports, users
from app.core.config import get_settings
from app.core.logging import setup_logging
from app.db.session import init_db_for_startup


def create_app() -> FastAPI:
    """
    Application factory for the Staffing Status service.
    """
    settings = get_settings()
    setup_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Backend service tracking employees, clients and projects, and\n"
            "deriving each employee's availability (Available / At Work) from\n"
            "project assignment and start dates, with a per-day status history."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(projects.router)
    app.include_router(users.router)
    app.include_router(reports.router)
    app.include_router(internal.router)

    @app.on_event("startup")
    async def on_startup() -> None:  # pragma: no cover
        await init_db_for_startup()

    return app


app = create_app()
