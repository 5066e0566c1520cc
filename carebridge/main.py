import time

import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from carebridge.config import get_settings
from carebridge.core.logging import setup_logging
from carebridge.crud import CRUDError, NotFoundError
from carebridge.database import create_tables
from carebridge.routers import doctor, notifications, patient

settings = get_settings()
setup_logging(settings)
logger = structlog.get_logger("carebridge.api")

app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug)


@app.on_event("startup")
def on_startup():
    create_tables()
    logger.info("startup.complete", environment=settings.environment)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its outcome; unexpected failures become a 500 with the raw message."""
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error("request.failed", method=request.method, path=request.url.path, error=str(e), exc_info=True)
        response = JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": str(e)})
    duration_ms = round((time.perf_counter() - start) * 1000, 1)
    logger.info(
        "request.completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=duration_ms,
    )
    return response


# ==================== ERROR RESPONSES ====================
# Every error body is {"message": ...}: 404 for unknown ids, 500 for everything else.

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": str(exc)})


@app.exception_handler(CRUDError)
async def store_error_handler(request: Request, exc: CRUDError):
    logger.error("store.error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    message = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=exc.headers)


app.include_router(patient.router, prefix="/api")
app.include_router(doctor.router, prefix="/api")
app.include_router(notifications.router, prefix="/api/patient", tags=["Patient Notifications"])
app.include_router(notifications.router, prefix="/api/doctor", tags=["Doctor Notifications"])


@app.get("/ping", response_class=PlainTextResponse, include_in_schema=False)
def ping():
    return "pong"


if __name__ == "__main__":
    uvicorn.run("carebridge.main:app", host="0.0.0.0", port=3000, reload=settings.debug)
