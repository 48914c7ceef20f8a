import contextlib
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

from menucard.api.routes import auth, menu, public, restaurants, users
from menucard.core.config import settings
from menucard.core.error_codes import ErrorCode
from menucard.core.exceptions import AppException
from menucard.core.logging_config import configure_logging
from menucard.schemas.common import ErrorResponse
from menucard.services.cleanup import run_cleanup
from menucard.services.email import Mailer

configure_logging()
logger = logging.getLogger(__name__)

if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        integrations=[FastApiIntegration()],
        traces_sample_rate=0.2,
        environment=settings.ENV,
        release=settings.GIT_SHA,
    )

@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    scheduler: AsyncIOScheduler | None = None
    if settings.CLEANUP_ENABLED:
        scheduler = AsyncIOScheduler()
        scheduler.add_job(
            run_cleanup,
            IntervalTrigger(minutes=settings.CLEANUP_INTERVAL_MINUTES),
            id="purge-expired",
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)

app = FastAPI(title="Menucard API", version="0.1.0", lifespan=lifespan)
# mail capability handed to routes through get_mailer
app.state.mailer = Mailer(settings)

@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    payload = exc.detail if isinstance(exc.detail, dict) else {}
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error_code=payload.get("error_code", ErrorCode.INTERNAL_ERROR),
            user_message=payload.get("user_message"),
            details=payload.get("details"),
        ).model_dump(mode="json"),
    )

@app.exception_handler(RequestValidationError)
async def validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error_code=ErrorCode.VALIDATION_ERROR,
            user_message="Invalid request data",
            details={"errors": jsonable_errors(exc)},
        ).model_dump(mode="json"),
    )

def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx may carry exception instances that JSON cannot encode
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Map plain HTTPExceptions (unknown routes, wrong methods) into our envelope
    code_map = {
        401: ErrorCode.UNAUTHORIZED,
        404: ErrorCode.NOT_FOUND,
        409: ErrorCode.CONFLICT,
    }
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error_code=code_map.get(exc.status_code, ErrorCode.BAD_REQUEST),
            user_message=str(exc.detail) if exc.detail else None,
        ).model_dump(mode="json"),
    )

@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    # Try to distinguish unique constraint violations
    msg = str(exc.orig).lower() if exc.orig else ""
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, msg)
    if "unique" in msg or "duplicate" in msg:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=ErrorResponse(
                error_code=ErrorCode.UNIQUE_CONSTRAINT_VIOLATION,
                user_message="Unique constraint violated",
            ).model_dump(mode="json"),
        )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error_code=ErrorCode.DATABASE_ERROR,
            user_message="Database error",
        ).model_dump(mode="json"),
    )

@app.exception_handler(SQLAlchemyError)
async def sa_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error_code=ErrorCode.DATABASE_ERROR,
            user_message="Database error",
        ).model_dump(mode="json"),
    )

@app.exception_handler(Exception)
async def unhandled_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error_code=ErrorCode.INTERNAL_ERROR,
            user_message="Internal server error",
        ).model_dump(mode="json"),
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    # the session travels in a cookie
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(restaurants.router)
app.include_router(menu.router)
app.include_router(public.router)

@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}

def run():
    import uvicorn

    uvicorn.run("menucard.main:app", host="0.0.0.0", port=settings.SERVICE_PORT)

if __name__ == "__main__":
    run()
