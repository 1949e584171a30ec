from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from newsboard import __version__
from newsboard.api.deps import store_dependency
from newsboard.api.routes import auth_router, router as news_router
from newsboard.config import configure_logging, get_settings
from newsboard.db.store import ItemStore, close_store, get_store
from newsboard.errors import NewsboardError, ValidationError

logger = logging.getLogger("uvicorn.error")

settings = get_settings()
configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = get_store()
    if not await store.ping():
        logger.warning("News store (%s) is not reachable at startup", store.name)
    logger.info("Newsboard API %s started with %s store", __version__, store.name)

    yield

    await close_store()
    logger.info("Application shutting down")


app = FastAPI(
    title="Newsboard API",
    version=__version__,
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NewsboardError)
async def newsboard_error_handler(request: Request, exc: NewsboardError) -> ORJSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return ORJSONResponse(status_code=exc.status_code, content={"message": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
    """
    Malformed request bodies answer like a domain ValidationError: 400 with a message.
    """
    problems = []
    for error in exc.errors():
        field = str(error.get("loc", ["body"])[-1])
        problems.append(f"{field}: {error.get('msg', 'invalid value')}")
    return ORJSONResponse(
        status_code=ValidationError.status_code,
        content={"message": "Invalid request: " + "; ".join(problems)},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.get("/")
async def root():
    return {
        "status": "ok",
        "service": "newsboard",
        "version": __version__,
    }


@app.get("/health")
async def health(store: ItemStore = Depends(store_dependency)):
    reachable = await store.ping()
    return {
        "status": "healthy" if reachable else "degraded",
        "store": store.name,
        "time": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api")
async def api_root():
    return {
        "message": "Welcome to the Newsboard API",
        "version": __version__,
    }


app.include_router(news_router, prefix="/api")
app.include_router(auth_router, prefix="/api")


def run() -> None:
    import uvicorn

    uvicorn.run("newsboard.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
