"""
Application factory.

Every component receives its configuration here, once; nothing below the
factory reads the environment.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from api.errors import register_exception_handlers
from api.middleware import register_middleware
from api.routes import router
from auth.password import PasswordHasher
from auth.tokens import TokenIssuer
from config.settings import Settings, get_settings
from database.session import build_engine, build_session_factory, init_db
from mail import build_mailer

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Password Reset Flow API",
        version="1.0.0",
        description="Registration, login and emailed-code password reset.",
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_issuer = TokenIssuer(settings.secret_key, settings.jwt_algorithm)
    app.state.mailer = build_mailer(settings)

    register_middleware(app, settings)
    register_exception_handlers(app)
    app.include_router(router)

    @app.on_event("startup")
    async def on_startup():
        await init_db(app.state.engine)
        logger.info("Application ready to accept requests.")

    @app.on_event("shutdown")
    async def on_shutdown():
        await app.state.engine.dispose()

    return app
