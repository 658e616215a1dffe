"""FastAPI application entrypoint.

Configures logging, error tracking and CORS, includes routers, and exposes a
healthcheck endpoint.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .deps import get_settings
from .routers import marketing as marketing_router
from .telemetry import init_observability
from .utils.env import load_env_file

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    load_env_file()
    settings = get_settings()
    status = init_observability(settings)
    logger.info(f"Observability initialized: {status}")

    app = FastAPI(
        title="Marketing Attribution API",
        description="""
        Attribution and ranking engine for the business-operations dashboard.

        This API provides endpoints for:
        - Resolving reporting period presets into concrete dates
        - Creative and campaign leaderboards (ROI, profit, CPL, CTR)
        - Summary cards and the daily metrics table
        - Lost-sale breakdown by reason

        ## Data Model

        - **Campaigns > Ad Sets > Creatives**: advertising hierarchy
        - **Daily metrics**: per-day, per-creative spend and volume
        - **Sales**: delivered sales are credited to their creative;
          lost sales are grouped by loss reason

        Every request carries its own snapshot; nothing is stored.
        """,
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(marketing_router.router)

    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok"}

    return app


app = create_app()
