
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.middleware.ratelimit import RateLimitMiddleware, make_key_func
from app.config import settings
from app.db.session import init_db
from app.errors import register_exception_handlers
from app.content_groups.routes import router as content_groups_router
from app.documents.routes import router as documents_router
from app.summaries.routes import router as summaries_router
from app.web.routes_ui import router as ui_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(
        RateLimitMiddleware,
        window_seconds=settings.rate_limit_window_seconds,
        max_calls=settings.rate_limit_max_calls,
        key_func=make_key_func(settings.secret_key),
        include_routes=(("POST", "/api/generate-summary"), ("GET", "/ui/documents")),
    )

    register_exception_handlers(app)

    app.include_router(content_groups_router)
    app.include_router(documents_router)
    app.include_router(summaries_router)
    app.include_router(ui_router)

    @app.on_event("startup")
    def on_startup():
        init_db()

    @app.get("/", tags=["root"])
    def root():
        return {"name": settings.app_name, "env": settings.app_env}

    @app.get("/health", tags=["root"])
    def health():
        return {"status": "ok"}

    return app

app = create_app()
