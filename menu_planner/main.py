"""Main entry point for Menu Planner."""

import logging

import uvicorn
from fastapi import FastAPI

from menu_planner import __version__
from menu_planner.api.routes import planner_error_handler, router as api_router
from menu_planner.config import get_settings
from menu_planner.services.errors import PlannerError

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr with a timestamped format."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title="Menu Planner API",
        description="Family meal plans, recipe details and shopping lists generated with Gemini",
        version=__version__,
    )
    app.include_router(api_router)
    app.add_exception_handler(PlannerError, planner_error_handler)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


api_app = create_app()


def run():
    """Entry point for running the API server."""
    settings = get_settings()
    configure_logging(settings.log_level)
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; every generation request will fail")
    logger.info("Menu Planner API running at http://%s:%d", settings.api_host, settings.api_port)
    logger.info("API docs at http://%s:%d/docs", settings.api_host, settings.api_port)
    uvicorn.run(api_app, host=settings.api_host, port=settings.api_port, log_level="warning")


if __name__ == "__main__":
    run()
