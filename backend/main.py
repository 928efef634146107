"""Application factory and entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

import models  # noqa: F401  (registers tables on Base.metadata)
from config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ALGORITHM,
    ENV,
    LOG_LEVEL,
    REFRESH_TOKEN_EXPIRE_DAYS,
    RESET_TOKEN_EXPIRE_MINUTES,
    SECRET_KEY,
    validate_config,
)
from database import Base, engine
from routers import auth, users
from services.errors import AccountError, ForbiddenError
from services.token_service import TokenService


logger = logging.getLogger(__name__)

API_PREFIX = "/v1"

STATUS_BY_KIND = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "conflict": status.HTTP_409_CONFLICT,
    "not_found": status.HTTP_404_NOT_FOUND,
    "unauthorized": status.HTTP_401_UNAUTHORIZED,
    "expired": status.HTTP_401_UNAUTHORIZED,
    "server_misconfiguration": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "dependency_failure": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    # Role and ownership failures are authenticated requests: 403, not 401
    if isinstance(exc, ForbiddenError):
        status_code = status.HTTP_403_FORBIDDEN
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.kind},
    )


def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors()), "error": "validation"},
    )


def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Data store failure on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "detail": "Service temporarily unavailable. Please try again later.",
            "error": "dependency_failure",
        },
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    if ENV != "production":
        # Production schemas are managed by alembic
        Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    validate_config()
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Accounts API", lifespan=lifespan)

    app.state.token_service = TokenService(
        secret_key=SECRET_KEY,
        algorithm=ALGORITHM,
        access_ttl=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
        refresh_ttl=timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS),
        reset_ttl=timedelta(minutes=RESET_TOKEN_EXPIRE_MINUTES),
    )

    app.state.limiter = auth.limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(AccountError, account_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)

    app.include_router(auth.router, prefix=API_PREFIX, tags=["auth"])
    app.include_router(users.router, prefix=f"{API_PREFIX}/user", tags=["users"])

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
