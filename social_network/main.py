import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from social_network.cache import cache
from social_network.config import settings
from social_network.errors import AppError, ValidationFailedError
from social_network.middleware import RequestLogMiddleware
from social_network.routers import accounts, comments, posts

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await cache.connect()
    yield
    # Shutdown
    await cache.disconnect()

app = FastAPI(
    title="Social Network API",
    description="Accounts, posts, comments and follows over a relational store with a read-through cache",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

def _field_name(loc: tuple) -> str:
    # ("body", "content") -> "content"; ("query", "page") -> "page"
    parts = [str(p) for p in loc[1:]] or [str(p) for p in loc]
    return ".".join(parts) or "body"


@app.exception_handler(ValidationFailedError)
async def validation_failed_handler(request: Request, exc: ValidationFailedError) -> JSONResponse:
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc.errors)
    return JSONResponse(status_code=exc.http_status, content={"errors": exc.errors})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = {_field_name(tuple(err["loc"])): err["msg"] for err in exc.errors()}
    logger.info("%s %s rejected: %s", request.method, request.url.path, errors)
    return JSONResponse(status_code=400, content={"errors": errors})


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.info("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.http_status, content={"message": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# Routers: accounts last so /accounts/{account_id} does not shadow
# /accounts/comments and /accounts/posts.
app.include_router(comments.router)
app.include_router(posts.router)
app.include_router(accounts.router)


@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0", "cache": cache.stats}
