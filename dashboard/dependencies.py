#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyNine - API Dependencies
Провайдеры сервисов и идентификатор пользователя для FastAPI

Версия: 1.0.0
Дата: 2025-10-06
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Query, Request, status

from config import Settings, get_settings
from models import validate_date_key
from services import (
    EntryService,
    LeaderboardService,
    RolloverEngine,
    RoutineService,
    ServiceManager,
    get_service_manager,
)
from utils.datetime_utils import today_str

logger = logging.getLogger(__name__)

# ===== СЕРВИСЫ =====


def get_app_settings(request: Request) -> Settings:
    """Настройки приложения, с которыми оно было создано"""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_services() -> ServiceManager:
    manager = get_service_manager()
    if not manager.initialized:
        logger.error("❌ Запрос до инициализации сервисов")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Сервисы не инициализированы"
        )
    return manager


def get_entry_service(manager: ServiceManager = Depends(get_services)) -> EntryService:
    return manager.entry_service


def get_routine_service(manager: ServiceManager = Depends(get_services)) -> RoutineService:
    return manager.routine_service


def get_rollover_engine(manager: ServiceManager = Depends(get_services)) -> RolloverEngine:
    return manager.rollover_engine


def get_leaderboard_service(manager: ServiceManager = Depends(get_services)) -> LeaderboardService:
    return manager.leaderboard_service


# ===== ПОЛЬЗОВАТЕЛЬ И ДАТА =====


def get_current_user_id(request: Request, app_settings: Settings = Depends(get_app_settings)) -> str:
    """
    Идентификатор пользователя из заголовка внешнего слоя авторизации

    Аутентификация выполняется до приложения, здесь только чтение.
    """
    user_id = (request.headers.get(app_settings.USER_ID_HEADER) or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Отсутствует заголовок {app_settings.USER_ID_HEADER}"
        )
    if "/" in user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Недопустимый идентификатор пользователя"
        )
    return user_id


def get_today(
    date: Optional[str] = Query(None, description="Календарный день YYYY-MM-DD вместо текущего"),
    app_settings: Settings = Depends(get_app_settings),
) -> str:
    """Календарный день пользователя: из запроса или по часовому поясу"""
    if date is None:
        return today_str(app_settings.TIMEZONE)
    return checked_date(date)


def checked_date(value: str) -> str:
    try:
        return validate_date_key(value)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
