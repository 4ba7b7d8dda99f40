import inspect
import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from openai import AsyncOpenAI

from routes.chat_route import router as chat_router
from routes.image_route import router as image_router
from routes.upload_route import router as upload_router
from services.chat.session_store import ChatSessionStore
from services.stability.image_generator import StabilityImageGenerator
from services.upload_store import UploadStore
from utils.errors import RelayError
from utils.settings import Settings, load_settings

LOGGER = logging.getLogger(__name__)


async def _close_quietly(client) -> None:
    """Close a client exposing `aclose` or `close`, sync or async."""
    if client is None:
        return
    aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
    if aclose is None:
        return
    try:
        if inspect.iscoroutinefunction(aclose):
            await aclose()
        else:
            result = aclose()
            if inspect.isawaitable(result):
                await result
    except Exception:
        LOGGER.warning("Error while closing %r during shutdown", client, exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the OpenAI async client
      - the shared httpx client and the Stability image generator
      - the in-memory chat session store
      - the upload directory
    and attach them to `app.state`.
    """
    settings: Settings = app.state.settings

    missing = settings.missing_credentials()
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    try:
        openai_client = AsyncOpenAI(api_key=settings.openai_api_key)
    except Exception as exc:
        raise RuntimeError("Failed to initialize OpenAI Async client") from exc

    http_client = httpx.AsyncClient(timeout=settings.stability_timeout_seconds)

    app.state.openai_client = openai_client
    app.state.http_client = http_client
    app.state.image_generator = StabilityImageGenerator(
        http_client, settings.stability_api_key, url=settings.stability_api_url
    )
    app.state.session_store = ChatSessionStore(
        max_sessions=settings.chat_max_sessions,
        ttl_seconds=settings.chat_session_ttl_seconds,
    )
    app.state.upload_store.ensure_directory()

    try:
        yield
    finally:
        await _close_quietly(getattr(app.state, "http_client", None))
        await _close_quietly(getattr(app.state, "openai_client", None))


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid request body."})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "A server error occurred."})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    settings = settings or load_settings()
    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.upload_store = UploadStore(settings.upload_dir)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports which provider clients are available.
        """
        state = request.app.state
        store = getattr(state, "session_store", None)
        return {
            "ok": True,
            "openai_available": getattr(state, "openai_client", None) is not None,
            "image_provider_available": getattr(state, "image_generator", None) is not None,
            "active_sessions": len(store) if store is not None else 0,
        }

    # Register application routers
    app.include_router(image_router)
    app.include_router(chat_router)
    app.include_router(upload_router)

    # Files left behind in the upload directory are served read-only.
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

    return app


def run() -> None:
    """Validate configuration and serve the app with uvicorn."""
    import uvicorn

    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format="[%(asctime)s] %(levelname)s %(name)s - %(message)s")

    missing = settings.missing_credentials()
    if missing:
        LOGGER.error("Environment variables %s are not set; refusing to start.", ", ".join(missing))
        sys.exit(1)

    LOGGER.info("Server running at http://localhost:%s", settings.port)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


app = create_app()


if __name__ == "__main__":
    run()
