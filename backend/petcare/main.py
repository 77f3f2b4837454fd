"""Module: main.

Application factory. Run with ``uvicorn petcare.main:create_app --factory``.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from petcare.api.v1.api import api_router
from petcare.core.config import Settings, get_settings
from petcare.core.errors import register_exception_handlers
from petcare.core.logging import configure_logging
from petcare.db.init_db import init_db
from petcare.db.session import build_engine, build_session_factory

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="PetCare Clinic API", version="0.1.0")

    # Per-app resources; request dependencies read them from app.state.
    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # Schema comes from ORM metadata; there are no migrations.
    init_db(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api/v1")

    logger.info("PetCare API ready (database: %s)", engine.url.render_as_string(hide_password=True))
    return app
