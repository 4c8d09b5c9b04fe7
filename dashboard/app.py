#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyNine Web API - FastAPI Application
HTTP API дневного списка задач: перенос, рутины, рейтинг

Версия: 1.0.0
Дата: 2025-10-06
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from config import Settings, get_settings
from database import DocumentStore, StoreError
from services import InvalidDateError, LedgerError, close_all_services, get_service_manager, initialize_all_services
from shared.models import HealthCheck
from utils.locks import UserLockTimeout

from dashboard.api import entries, leaderboard, routines

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None, store: Optional[DocumentStore] = None) -> FastAPI:
    """Фабрика для создания приложения"""
    app_settings = app_settings or get_settings()
    app_start_time = time.time()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Управление жизненным циклом приложения"""
        nonlocal app_start_time

        # Startup
        logger.info(f"🚀 Запуск {app_settings.APP_NAME} API ({app_settings.ENVIRONMENT})...")
        app_start_time = time.time()
        await initialize_all_services(app_settings, store=store)
        logger.info(f"🌐 API доступен на: http://{app_settings.HOST}:{app_settings.PORT}")

        yield

        # Shutdown
        logger.info("🛑 Остановка API...")
        await close_all_services()
        logger.info("✅ Ресурсы очищены")

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Дневной список задач: девять выполненных задач в день",
        version=app_settings.VERSION,
        docs_url="/api/docs" if app_settings.DEBUG else None,
        redoc_url="/api/redoc" if app_settings.DEBUG else None,
        openapi_url="/api/openapi.json" if app_settings.DEBUG else None,
        lifespan=lifespan
    )
    app.state.settings = app_settings

    # ===== MIDDLEWARE =====

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Логирование запросов и время обработки"""
        start_time = time.time()
        client_ip = request.headers.get("X-Forwarded-For", request.client.host if request.client else "-")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} "
            f"- {response.status_code} "
            f"- {process_time:.3f}s "
            f"- {client_ip}"
        )
        response.headers["X-Process-Time"] = str(process_time)
        return response

    # ===== МАРШРУТЫ =====

    app.include_router(entries.router)
    app.include_router(routines.router)
    app.include_router(leaderboard.router)

    @app.get("/health", response_model=HealthCheck)
    async def health_check():
        """Health check для мониторинга"""
        manager = get_service_manager()
        health = manager.health_check()
        payload = HealthCheck(
            status="healthy" if health["status"] != "error" else "unhealthy",
            service="api",
            version=app_settings.VERSION,
            timestamp=time.time(),
            data={
                "services": health["services"],
                "environment": app_settings.ENVIRONMENT,
                "uptime_seconds": time.time() - app_start_time,
            }
        )
        if health["status"] == "error":
            logger.error("❌ Health check: сервисы недоступны")
            return JSONResponse(status_code=503, content=payload.model_dump())
        return payload

    # ===== ОБРАБОТЧИКИ ОШИБОК =====

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        return JSONResponse(status_code=404, content={"detail": str(exc), "status_code": 404})

    @app.exception_handler(InvalidDateError)
    async def invalid_date_handler(request: Request, exc: InvalidDateError):
        return JSONResponse(status_code=400, content={"detail": str(exc), "status_code": 400})

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(f"❌ Ошибка хранилища на {request.url.path}: {exc}")
        return JSONResponse(
            status_code=503,
            content={"detail": "Хранилище временно недоступно, повторите запрос", "status_code": 503}
        )

    @app.exception_handler(UserLockTimeout)
    async def lock_timeout_handler(request: Request, exc: UserLockTimeout):
        return JSONResponse(
            status_code=503,
            content={"detail": "Операция уже выполняется, повторите запрос", "status_code": 503}
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Обработчик HTTP исключений"""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "status_code": exc.status_code
            }
        )

    return app


app = create_app()
