from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.db import engine, Base
from .core.errors import AppError, Internal
from .core.logging_config import setup_logging
from .conversation.transcript import close_transcript_store
from .api.routes.auth import router as auth_router
from .api.routes.mood import router as mood_router
from .api.routes.misc import router as misc_router

app = FastAPI(title="Hear-U Mood Service", version=settings.API_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str, is_form_error: bool = False) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, "isFormError": is_form_error},
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("{} {} failed: {}: {}", request.method, request.url.path, type(exc).__name__, exc.message)
    return _error(exc.status_code, exc.message, exc.is_form_error)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return _error(422, message, True)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error("unhandled error on {} {}", request.method, request.url.path)
    err = Internal(None if settings.is_production else str(exc) or type(exc).__name__)
    return _error(err.status_code, err.message)


@app.on_event("startup")
def on_startup():
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE or None)
    Base.metadata.create_all(bind=engine)


@app.on_event("shutdown")
async def on_shutdown():
    await close_transcript_store()

app.include_router(misc_router)
app.include_router(auth_router)
app.include_router(mood_router)
