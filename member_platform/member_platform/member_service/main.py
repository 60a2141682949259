"""
Member Service - registration, login and profile API
"""
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from datetime import timedelta
import logging

import uvicorn

from .auth import TokenService
from .config import settings
from .dependencies import store_not_ready_body
from .errors import StoreUnavailableError
from .gateway import UserStoreGateway
from .routes import auth, health, profile

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger(__name__)


def log_environment() -> None:
    """Report which settings are present without revealing their values."""
    logger.info("Environment check:")
    logger.info("PORT: %s", settings.PORT)
    logger.info("DATABASE_URL scheme: %s", settings.DATABASE_URL.split("://", 1)[0])
    logger.info("JWT_SECRET exists: %s", bool(settings.JWT_SECRET))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the token service and start the store reconnect loop"""
    log_environment()

    # Refuses to start without a signing key
    app.state.tokens = TokenService(
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        expires_delta=timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    )

    app.state.store = UserStoreGateway.from_settings(settings)
    await app.state.store.start()
    try:
        yield
    finally:
        await app.state.store.stop()


app = FastAPI(
    title="Member Service",
    description="User registration, login and profile management",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_request: Request, exc: StarletteHTTPException):
    # A dict detail already is the full response body
    body = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": "Invalid request body", "errors": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(_request: Request, exc: StoreUnavailableError):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=store_not_ready_body(exc.state)
    )


# Include routers
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(health.router)


def run() -> None:
    """Console entry point."""
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
