# storefront/main.py
import os
from contextlib import asynccontextmanager
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from starlette.concurrency import run_in_threadpool

from . import auth, cart, catalog
from .config import Settings
from .database import build_engine, build_session_maker, ensure_database_exists, init_models
from .errors import register_exception_handlers
from .logging_config import configure_logging

logger = structlog.get_logger(__name__)


def create_app(settings: Optional[Settings] = None, bootstrap_database: bool = True) -> FastAPI:
    """Wire settings, engine, session factory and routers into one app.

    With bootstrap_database the startup hook creates the database (Postgres
    only) and any missing tables.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level, settings.log_json)

    engine = build_engine(settings)
    session_maker = build_session_maker(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if bootstrap_database:
            await run_in_threadpool(ensure_database_exists, settings.sync_database_url)
            # development convenience; production deployments run alembic
            await init_models(engine)
        logger.info("Storefront API started", database=engine.url.render_as_string(hide_password=True))
        yield
        await engine.dispose()

    app = FastAPI(
        title="Storefront API",
        description="Product catalog, user authentication and shopping cart",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_maker = session_maker

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(catalog.router)
    app.include_router(cart.router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    # Bearer scheme in the OpenAPI document so /docs shows Authorize
    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        schema.setdefault("components", {}).setdefault("securitySchemes", {})
        schema["components"]["securitySchemes"]["BearerAuth"] = {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
        schema["security"] = [{"BearerAuth": []}]
        app.openapi_schema = schema
        return app.openapi_schema

    app.openapi = custom_openapi
    return app


def run():
    uvicorn.run(
        "storefront.main:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )


if __name__ == "__main__":
    run()
