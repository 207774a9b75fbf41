# -*- coding: utf-8 -*-
"""
EduTest/edutest/config/settings.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Конфигурация настроек приложения с использованием Pydantic.

Модуль загружает конфигурацию из переменных окружения и .env файла,
предоставляя централизованную систему управления настройками.
"""

from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Корень репозитория (EduTest/)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Возможные пути к .env файлам
ROOT_ENV_PATH = (BASE_DIR.parent / ".env").resolve()
PROJECT_ENV_PATH = (BASE_DIR / ".env").resolve()


def _find_env_file() -> Path | None:
    # Приоритет: .env проекта, затем корневой .env
    return next((p for p in (PROJECT_ENV_PATH, ROOT_ENV_PATH) if p.exists()), None)


def _split_csv(value: str) -> list[str]:
    """Список из строки через запятую; "*" означает все значения."""
    if value.strip() == "*":
        return ["*"]
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Настройки приложения, загружаемые из окружения и .env файла."""

    model_config = SettingsConfigDict(
        env_file=_find_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Конфигурация базы данных
    database_url: str | None = None
    postgres_db: str | None = None
    postgres_user: str | None = None
    postgres_password: str | None = None
    postgres_host: str | None = None
    postgres_port: int = 5432
    database_echo: bool = False

    # Конфигурация JWT
    jwt_secret: str = "edutest-dev-secret"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440

    # Конфигурация приложения
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_reload: bool = False
    app_domain: str | None = None
    frontend_port: int | None = None

    # Конфигурация логирования
    log_level: str = "INFO"
    log_file: str | None = None
    log_rotation: str = "10 MB"

    # Конфигурация CORS
    cors_allow_origins: str = ""
    cors_allow_credentials: bool = True
    cors_allow_methods: str = "GET,POST,PUT,DELETE,OPTIONS"
    cors_allow_headers: str = "Authorization,Content-Type"

    # Таймер попыток: один тик в attempt_tick_seconds секунд
    attempt_timer_enabled: bool = True
    attempt_tick_seconds: float = 1.0

    def get_allowed_origins(self) -> list[str]:
        """Формирует список разрешённых origins для CORS.
        Приоритет: явные cors_allow_origins -> из домена/порта -> localhost для dev.
        """
        if self.cors_allow_origins:
            return _split_csv(self.cors_allow_origins)

        allowed: list[str] = []

        if self.app_domain:
            allowed.append(f"http://{self.app_domain}")
            allowed.append(f"https://{self.app_domain}")

        # Фронтенд Vite по умолчанию слушает 5173
        port = self.frontend_port or 5173
        allowed.extend(
            [
                f"http://localhost:{port}",
                f"http://127.0.0.1:{port}",
            ]
        )
        return allowed

    def get_cors_methods(self) -> list[str]:
        return _split_csv(self.cors_allow_methods)

    def get_cors_headers(self) -> list[str]:
        return _split_csv(self.cors_allow_headers)

    @model_validator(mode="after")
    def fill_database_url(self) -> "Settings":
        if not self.database_url:
            self.database_url = self._build_database_url()
        return self

    def _build_database_url(self) -> str:
        """Собирает URL базы данных из компонентов postgres_* либо возвращает SQLite."""
        if self.postgres_db and self.postgres_user and self.postgres_host:
            return (
                f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
                f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
            )
        return f"sqlite+aiosqlite:///{BASE_DIR / 'edutest.db'}"

    def get_config_source(self) -> str:
        env_file = self.model_config.get("env_file")
        return f".env: {env_file}" if env_file else "только переменные окружения"


settings = Settings()
