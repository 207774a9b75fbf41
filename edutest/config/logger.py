# -*- coding: utf-8 -*-
"""
Настройка логирования EduTest с использованием loguru.
"""
import logging
import sys

from loguru import logger

from edutest.config.settings import settings

# Удаляем стандартный хендлер loguru; component по умолчанию для записей без bind
logger.remove()
logger.configure(extra={"component": "edutest"})


class InterceptHandler(logging.Handler):
    """Перехватывает стандартные логи и перенаправляет их в loguru."""

    def emit(self, record):
        # Пропускаем uvicorn INFO логи (Uvicorn running, Started server, etc.)
        if record.name.startswith("uvicorn") and record.levelno == logging.INFO:
            return

        # Пропускаем httpx/httpcore логи тестового клиента
        if record.name.startswith(("httpx", "httpcore")):
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


# Перехватываем все стандартные логи
logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

log_level = settings.log_level.upper()

# Формат для консоли (с цветами)
console_format = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[component]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Формат для файла (без цветов)
file_format = (
    "{time:YYYY-MM-DD HH:mm:ss} | "
    "{level: <8} | "
    "{extra[component]} | "
    "{name}:{function}:{line} - "
    "{message}"
)

logger.add(
    sys.stdout,
    format=console_format,
    level=log_level,
    colorize=True,
    backtrace=False,
    diagnose=False,
)

if settings.log_file:
    logger.add(
        settings.log_file,
        format=file_format,
        level="INFO",
        rotation=settings.log_rotation,
        encoding="utf-8",
        enqueue=True,
    )


def configure_logger(name: str = "edutest"):
    """
    Возвращает настроенный логгер.

    Args:
        name: Имя модуля, привязывается к записи как extra["component"]

    Returns:
        loguru.Logger: Настроенный логгер
    """
    return logger.bind(component=name)
