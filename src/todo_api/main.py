import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .logging_utils import configure_logging, reset_request_id, set_request_id
from .routers import auth as auth_router
from .routers import todos as todos_router
from .settings import get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "root", "description": "Greeting endpoint."},
    {"name": "auth", "description": "Registration, login and logout with a session cookie."},
    {"name": "todoitems", "description": "CRUD operations for Todo items. Requires a session."},
]

_settings = get_settings()
configure_logging(_settings.log_level)

app = FastAPI(
    title="Todo Cookie API",
    description="Todo list API with cookie-based session authentication and an in-memory store.",
    version="0.1.0",
    openapi_tags=openapi_tags,
)

# Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """
    Tag the request with an id (incoming X-Request-ID or a fresh one), echo it
    back, and log one line per request.
    """
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    token = set_request_id(request_id)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms
        )
        response.headers["X-Request-ID"] = request_id
        return response
    finally:
        reset_request_id(token)


# Missing or blank fields are client errors (400), reported in a consistent JSON shape
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details, without echoed input ...],
            "message": "Request validation failed"
        }
    """
    errors = [
        {key: value for key, value in err.items() if key not in ("input", "ctx")}
        for err in exc.errors()
    ]
    logger.debug("Validation failed for %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=400,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": jsonable_encoder(errors),
        },
    )


# PUBLIC_INTERFACE
@app.get("/", summary="Greeting", tags=["root"], response_class=PlainTextResponse)
def root() -> str:
    """
    Plaintext greeting.
    """
    return "Hello World!"


# Include routers
app.include_router(auth_router.router, prefix="/auth")
app.include_router(auth_router.router, prefix="/tasks", include_in_schema=False)
app.include_router(todos_router.router)


# PUBLIC_INTERFACE
def main() -> None:
    """Serve the app with uvicorn on HOST:PORT."""
    import uvicorn

    settings = get_settings()
    logger.info("Starting on %s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
