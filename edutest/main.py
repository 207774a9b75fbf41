# -*- coding: utf-8 -*-
"""
Точка входа FastAPI-приложения EduTest.
"""

import uvicorn
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from edutest.api.deps import shutdown_attempt_service
from edutest.api.v1.attempts.routes import router as attempts_router
from edutest.api.v1.groups.routes import router as groups_router
from edutest.api.v1.results.routes import router as results_router
from edutest.api.v1.tests.routes import router as tests_router
from edutest.api.v1.users.routes import router as users_router
from edutest.clients.database_client import init_db
from edutest.config.logger import configure_logger
from edutest.config.settings import settings
from edutest.config.uvicorn_config import (get_uvicorn_config,
                                           setup_uvicorn_logging)
from edutest.utils.exceptions import APIException, ErrorCode

logger = configure_logger("edutest.main")

app = FastAPI(
    title="EduTest API",
    description="API платформы тестирования студентов EduTest",
    version="0.1.0",
    docs_url="/api/v1/docs",
    redoc_url="/api/v1/redoc",
    openapi_url="/api/v1/openapi.json",
)

# Настройка CORS из настроек
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.get_cors_methods(),
    allow_headers=settings.get_cors_headers(),
)


# Middleware для логирования всех запросов
@app.middleware("http")
async def log_all_requests(request: Request, call_next):
    if request.url.path.startswith("/api/"):
        logger.info(f"🌐 API запрос: {request.method} {request.url.path}")

    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            f"💥 Критическая ошибка API: {request.method} {request.url.path}"
        )
        raise

    if request.url.path.startswith("/api/"):
        if response.status_code >= 400:
            logger.warning(
                f"❌ API ошибка: {request.method} {request.url.path} → {response.status_code}"
            )
        else:
            logger.info(
                f"✅ API ответ: {request.method} {request.url.path} → {response.status_code}"
            )
    return response


# ---------------------------------------------------------------------------
# Обработчики ошибок: тело ответа {message, error_code}
# ---------------------------------------------------------------------------


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    error_code = getattr(exc.error_code, "value", exc.error_code)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail), "error_code": error_code},
        headers=exc.headers,
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail), "error_code": f"HTTP_{exc.status_code}"},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "; ".join(
        str(error.get("msg", "")).removeprefix("Value error, ") for error in errors
    )
    logger.warning(f"Невалидный запрос {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": message or "Некорректные данные запроса",
            "error_code": ErrorCode.VALIDATION_ERROR.value,
        },
    )


app.include_router(users_router, prefix="/api/v1/users")
app.include_router(groups_router, prefix="/api/v1/groups")
app.include_router(tests_router, prefix="/api/v1/tests")
app.include_router(results_router, prefix="/api/v1/test-results")
app.include_router(attempts_router, prefix="/api/v1/attempts")


@app.on_event("startup")
async def startup_event():
    setup_uvicorn_logging()
    logger.info(f"🔧 Конфигурация: {settings.get_config_source()}")
    await init_db()
    logger.info("✅ База данных инициализирована")


@app.on_event("shutdown")
async def shutdown_event():
    """Обработчик завершения приложения"""
    await shutdown_attempt_service()
    logger.info("🛑 Завершение работы EduTest API")


@app.get("/api/v1")
async def api_root():
    """Корневой эндпоинт API."""
    return {"message": "EduTest API работает", "version": app.version}


@app.get("/api/v1/health")
async def api_health():
    """Проверка живости приложения."""
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run(**get_uvicorn_config())
