import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from leettracker.api import api_router
from leettracker.core.config import settings
from leettracker.core.logging import configure_logging
from leettracker.db.init_db import init_db
from leettracker.dependencies import close_redis_client
from leettracker.services.storage import ProblemNotFoundError, UserConflictError

configure_logging()

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.project_name,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

if settings.cors_origins or settings.cors_origin_regex:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.cors_origins],
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(api_router, prefix=settings.api_prefix)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(ProblemNotFoundError)
async def problem_not_found_handler(request: Request, exc: ProblemNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Problem not found"})


@app.exception_handler(UserConflictError)
async def user_conflict_handler(request: Request, exc: UserConflictError) -> JSONResponse:
    logger.warning("Rejected profile for %s: %s", request.headers.get("x-user-id"), exc)
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": "Email already in use"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/healthz", tags=["health"])
async def healthz() -> dict[str, str]:
    """
    Light-weight liveness probe.
    """

    return {"status": "ok"}


@app.on_event("startup")
async def on_startup() -> None:
    await init_db()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await close_redis_client()
