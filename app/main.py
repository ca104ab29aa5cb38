# app/main.py
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.db import engine
from app.core.errors import AuthError
from app.core.logging import configure_logging
from app.core.reset_db import init_db

configure_logging(settings.LOG_LEVEL)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(engine)
    logger.info("startup", db_backend=engine.url.get_backend_name())
    yield


app = FastAPI(title="Clinic Auth API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError):
    if exc.status_code >= 500:
        logger.error("request_failed", method=request.method, path=request.url.path,
                     code=exc.code, exc_info=exc.__cause__ or exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message, "code": exc.code},
                        headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request body", "code": "VALIDATION_ERROR"})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"error": "Route not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("unhandled_error", method=request.method, path=request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


from app.routers.health import router as health_router
from app.routers.auth import router as auth_router
from app.routers.users import router as users_router

routers = [
    health_router,
    auth_router,
    users_router,
]

for r in routers:
    app.include_router(r)
