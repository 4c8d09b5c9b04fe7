#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyNine - Configuration
Централизованная конфигурация движка задач и веб-API

Версия: 1.0.0
Дата: 2025-10-06
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, List, Optional

import pytz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_MORNING_ROUTINE = ["morning meditation", "breakfast", "plan day"]
DEFAULT_NIGHT_ROUTINE = ["review day", "read", "prep tomorrow"]


class Settings(BaseSettings):
    """Настройки DailyNine"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===== ОСНОВНЫЕ НАСТРОЙКИ =====

    APP_NAME: str = Field(
        default="DailyNine",
        description="Название приложения"
    )

    VERSION: str = Field(
        default="1.0.0",
        description="Версия приложения"
    )

    ENVIRONMENT: str = Field(
        default="development",
        description="Среда выполнения (development/production/testing)"
    )

    DEBUG: bool = Field(
        default=True,
        description="Режим отладки"
    )

    # ===== СЕТЕВЫЕ НАСТРОЙКИ =====

    HOST: str = Field(
        default="0.0.0.0",
        description="Хост для запуска API"
    )

    PORT: int = Field(
        default=8000,
        description="Порт для запуска API"
    )

    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=["*"],
        description="Разрешенные источники для CORS"
    )

    USER_ID_HEADER: str = Field(
        default="X-User-Id",
        description="Заголовок с идентификатором пользователя от внешнего слоя авторизации"
    )

    # ===== ХРАНИЛИЩЕ =====

    STORE_BACKEND: str = Field(
        default="json",
        description="Бэкенд хранилища документов (json/memory)"
    )

    DATA_DIR: Path = Field(
        default=Path("data"),
        description="Директория с данными"
    )

    STORE_FILE: str = Field(
        default="documents.json",
        description="Имя файла хранилища документов"
    )

    BACKUP_DIR: Path = Field(
        default=Path("backups"),
        description="Директория бэкапов"
    )

    MAX_BACKUPS_KEEP: int = Field(
        default=10,
        description="Сколько бэкапов хранить"
    )

    # ===== ДАТЫ И ПЕРЕНОС ЗАДАЧ =====

    TIMEZONE: str = Field(
        default="UTC",
        description="Часовой пояс пользователя для вычисления календарного дня"
    )

    ROLLOVER_LOOKBACK: int = Field(
        default=10,
        description="Сколько последних записей просматривать при поиске предыдущего дня"
    )

    ROLLOVER_LOCKING: bool = Field(
        default=True,
        description="Сериализовать перенос задач по пользователю"
    )

    LOCK_TIMEOUT: float = Field(
        default=10.0,
        description="Таймаут блокировки пользователя в секундах"
    )

    REDIS_URL: Optional[str] = Field(
        default=None,
        description="URL Redis для распределенной блокировки (опционально)"
    )

    DEFAULT_MORNING_ROUTINE: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_MORNING_ROUTINE),
        description="Утренняя рутина нового пользователя"
    )

    DEFAULT_NIGHT_ROUTINE: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_NIGHT_ROUTINE),
        description="Вечерняя рутина нового пользователя"
    )

    # ===== ЛОГИРОВАНИЕ =====

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Уровень логирования (DEBUG/INFO/WARNING/ERROR/CRITICAL)"
    )

    LOG_FORMAT: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        description="Формат логов"
    )

    LOG_DIR: Path = Field(
        default=Path("logs"),
        description="Директория логов"
    )

    # ===== ВАЛИДАТОРЫ =====

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Валидация среды выполнения"""
        allowed_envs = ["development", "production", "testing", "staging"]
        if v.lower() not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of {allowed_envs}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Валидация уровня логирования"""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator("STORE_BACKEND")
    @classmethod
    def validate_store_backend(cls, v):
        allowed = ["json", "memory"]
        if v.lower() not in allowed:
            raise ValueError(f"STORE_BACKEND must be one of {allowed}")
        return v.lower()

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v):
        """Валидация порта"""
        if not 1 <= v <= 65535:
            raise ValueError("PORT must be between 1 and 65535")
        return v

    @field_validator("ROLLOVER_LOOKBACK")
    @classmethod
    def validate_lookback(cls, v):
        if v < 1:
            raise ValueError("ROLLOVER_LOOKBACK must be positive")
        return v

    @field_validator("TIMEZONE")
    @classmethod
    def validate_timezone(cls, v):
        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown TIMEZONE: {v}")
        return v

    @field_validator("ALLOWED_ORIGINS", "DEFAULT_MORNING_ROUTINE", "DEFAULT_NIGHT_ROUTINE", mode="before")
    @classmethod
    def split_comma_separated(cls, v):
        """Строку из переменной окружения разделяем по запятой"""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    # ===== МЕТОДЫ КОНФИГУРАЦИИ =====

    @property
    def store_path(self) -> Path:
        """Полный путь к файлу хранилища"""
        return self.DATA_DIR / self.STORE_FILE


@lru_cache()
def get_settings() -> Settings:
    """Получить глобальный экземпляр настроек"""
    return Settings()


settings = get_settings()
