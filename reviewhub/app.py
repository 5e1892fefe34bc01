from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from prometheus_fastapi_instrumentator import Instrumentator

from . import __version__
from .config import get_settings
from .database import Base, engine
from .errors import apply_error_handlers
from .logging_middleware import add_audit_middleware
from .routers import auth, reviews

settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.run_db_migrations:
        Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title="Reviews Service",
        description="Publishes and browses company reviews",
        version=__version__,
        lifespan=lifespan,
    )
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    apply_error_handlers(fastapi_app)
    add_audit_middleware(fastapi_app, "reviews")
    Instrumentator().instrument(fastapi_app).expose(fastapi_app)

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    fastapi_app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")

    fastapi_app.include_router(reviews.router)
    fastapi_app.include_router(auth.router)
    return fastapi_app


app = create_app()


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok", "service": "reviews"}
