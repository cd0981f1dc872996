"""
guildhall: FastAPI backend entry point.

REST API for servers, channels, messages, reactions and user profiles,
stored in the document store (see ``guildhall.store``).
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from guildhall.api import channels, health, messages, reactions, servers, users
from guildhall.api.deps import get_current_user_id
from guildhall.config import settings
from guildhall.core.errors import ChatError
from guildhall.database import init_db

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = {"error": True, "message": "Internal server error"}

# Pydantic error types that mean "absent, empty or not a string"
_MISSING_ERROR_TYPES = {"missing", "string_type", "string_too_short", "model_attributes_type", "dict_type"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(
    title="guildhall",
    description="Chat backend: servers, channels, messages and reactions",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
    docs_url="/docs",
)

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
# allow_origins=["*"] is incompatible with allow_credentials=True in the CORS
# spec. When the wildcard is present (dev), switch to allow_origin_regex=".*"
# which achieves the same effect without triggering Starlette's guard.
_cors_origins = [o for o in settings.CORS_ORIGINS if o != "*"]
_cors_regex = ".*" if len(_cors_origins) < len(settings.CORS_ORIGINS) else None

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_origin_regex=_cors_regex,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
# Everything except /health and /docs requires a bearer token.
_authenticated = [Depends(get_current_user_id)]

app.include_router(health.router)
app.include_router(users.router, dependencies=_authenticated)
app.include_router(servers.router, dependencies=_authenticated)
app.include_router(channels.router, dependencies=_authenticated)
app.include_router(messages.router, dependencies=_authenticated)
app.include_router(reactions.router, dependencies=_authenticated)

# ---------------------------------------------------------------------------
# Custom exception handlers
# ---------------------------------------------------------------------------


@app.exception_handler(ChatError)
async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content=INTERNAL_ERROR_BODY)

    logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.label, "message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first invalid field as a 400, e.g. "name is required"."""
    first = exc.errors()[0]
    loc = [part for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = str(loc[0]) if loc else "body"

    if first.get("type") == "json_invalid":
        message = "Request body is not valid JSON"
    elif first.get("type") in _MISSING_ERROR_TYPES:
        message = f"{field} is required"
    elif first.get("type") == "value_error" and "error" in first.get("ctx", {}):
        message = str(first["ctx"]["error"])
    else:
        message = f"{field} is invalid"

    return JSONResponse(status_code=400, content={"error": "Bad Request", "message": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
