# -*- coding: utf-8 -*-
"""
Конфигурация для Uvicorn с логами через loguru.
"""

import logging

from edutest.config.logger import InterceptHandler
from edutest.config.settings import settings

# Сторонние логгеры, которые перенаправляются в loguru, и их уровни
INTERCEPTED_LOGGERS = {
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "fastapi": logging.INFO,
    "sqlalchemy.engine": logging.INFO if settings.database_echo else logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
}


def setup_uvicorn_logging() -> None:
    """Настраивает перехват логов uvicorn, FastAPI и SQLAlchemy."""
    for name, level in INTERCEPTED_LOGGERS.items():
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False
        std_logger.setLevel(level)


def get_uvicorn_config() -> dict:
    """Параметры запуска uvicorn из настроек приложения."""
    return {
        "app": "edutest.main:app",
        "host": settings.app_host,
        "port": settings.app_port,
        "reload": settings.app_reload,
        # Логированием занимается loguru
        "log_config": None,
        "access_log": True,
    }
