#!/usr/bin/env python3
"""
Скрипт запуска HTTP API DailyNine
Использование: python scripts/start_web.py [--port PORT] [--host HOST] [--dev] [--reload]
"""

import argparse
import logging
import sys
from pathlib import Path

# Добавляем корневую папку в Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import uvicorn

from config import settings
from utils.logger import setup_logger

logger = logging.getLogger(__name__)


def main():
    """Главная функция запуска веб-сервера"""

    # Парсинг аргументов
    parser = argparse.ArgumentParser(description='Запуск HTTP API DailyNine')
    parser.add_argument('--port', type=int, default=settings.PORT, help='Порт сервера')
    parser.add_argument('--host', default=settings.HOST, help='Хост сервера')
    parser.add_argument('--dev', action='store_true', help='Режим разработки')
    parser.add_argument('--reload', action='store_true', help='Автоперезагрузка при изменениях')

    args = parser.parse_args()

    # Настройка логирования
    setup_logger(
        log_file=str(settings.LOG_DIR / "dailynine.log"),
        level="DEBUG" if args.dev else settings.LOG_LEVEL,
        fmt=settings.LOG_FORMAT,
    )

    if args.dev:
        logger.info("🔧 Режим разработки активирован")

    logger.info(f"🚀 Запуск веб-сервера на http://{args.host}:{args.port}")
    if settings.DEBUG:
        logger.info(f"📚 API документация: http://{args.host}:{args.port}/api/docs")

    # Запуск сервера
    try:
        uvicorn.run(
            "dashboard.app:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level="debug" if args.dev else "info",
            access_log=args.dev,
            server_header=False,
        )
    except KeyboardInterrupt:
        logger.info("👋 Сервер остановлен пользователем")


if __name__ == "__main__":
    main()
