import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contextlib import asynccontextmanager
from movies_api.db.mongo import close_client, get_client

from movies_api.core.logger import setup_json_logging, shutdown_logging
from movies_api.core.sentry import init_sentry
from movies_api.core.auth import ensure_auth_configured
from movies_api.core.config import settings
from movies_api.core.errors import register_error_handlers
from movies_api.core.middleware import (
    RateLimitMiddleware,
    RequestContextMiddleware,
    SecurityHeadersMiddleware,
)

from movies_api.api.v1.movies import router as movies_router
from movies_api.api.v1.actors import router as actors_router
from movies_api.api.v1.debug import include_debug_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 1) логи до всего
    setup_json_logging(service=settings.app_name)
    init_sentry(settings.sentry_dsn, environment=settings.env)
    # без секрета JWT в production не стартуем
    ensure_auth_configured()

    # 2) прогреваем Motor-клиент (недоступная Mongo не валит старт)
    await get_client()

    try:
        yield
    finally:
        await close_client()
        shutdown_logging()


def create_app() -> FastAPI:
    app = FastAPI(title="Movie Ratings Service", lifespan=lifespan)

    # порядок: последний добавленный middleware снаружи
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.rate_limit_max,
        window_s=settings.rate_limit_window_s,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
    )
    # наш trace_id + access JSON
    app.add_middleware(RequestContextMiddleware)

    register_error_handlers(app)
    include_debug_routes(app)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(movies_router)
    app.include_router(actors_router)
    return app


# приглушим штатный uvicorn-access, чтобы не было дублей
logging.getLogger("uvicorn.access").setLevel("WARNING")

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("movies_api.main:app", host=settings.host, port=settings.port)
