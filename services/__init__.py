# services/__init__.py

"""
Модуль сервисов DailyNine

Хранилище, блокировки и сервисы журнала задач, переноса и рейтинга.
"""

import logging
from typing import Optional

from config import Settings
from database import DocumentStore, JsonDocumentStore, MemoryDocumentStore
from utils.locks import UserLockManager, create_redis_client

from .entry_service import EntryService
from .errors import EntryNotFoundError, InvalidDateError, LedgerError, RoutineNotFoundError, TaskNotFoundError
from .leaderboard_service import LeaderboardService
from .rollover_service import ManualRolloverResult, RolloverEngine, inject_routines
from .routine_service import RoutineService

logger = logging.getLogger(__name__)


def create_store(settings: Settings) -> DocumentStore:
    """Хранилище по настройке STORE_BACKEND"""
    if settings.STORE_BACKEND == "memory":
        logger.info("📂 Используется хранилище в памяти")
        return MemoryDocumentStore()
    return JsonDocumentStore(
        data_file=settings.store_path,
        backup_dir=settings.BACKUP_DIR,
        max_backups=settings.MAX_BACKUPS_KEEP,
    )


class ServiceManager:
    """
    Менеджер для управления всеми сервисами

    Обеспечивает:
    - Инициализацию сервисов в порядке зависимостей
    - Проверку состояния
    - Закрытие в обратном порядке
    """

    def __init__(self):
        self.store: Optional[DocumentStore] = None
        self.locks: Optional[UserLockManager] = None
        self.entry_service: Optional[EntryService] = None
        self.routine_service: Optional[RoutineService] = None
        self.rollover_engine: Optional[RolloverEngine] = None
        self.leaderboard_service: Optional[LeaderboardService] = None
        self.initialized = False

    async def initialize(self, settings: Settings, store: Optional[DocumentStore] = None) -> bool:
        """Инициализация всех сервисов"""
        try:
            logger.info("🔧 Инициализация сервисов DailyNine...")

            # 1. Хранилище
            self.store = store or create_store(settings)

            # 2. Блокировки (Redis, если настроен)
            redis_client = None
            if settings.ROLLOVER_LOCKING and settings.REDIS_URL:
                redis_client = await create_redis_client(settings.REDIS_URL)
            self.locks = UserLockManager(
                enabled=settings.ROLLOVER_LOCKING,
                timeout=settings.LOCK_TIMEOUT,
                redis_client=redis_client,
            )

            # 3. Сервисы журнала
            self.entry_service = EntryService(self.store)
            self.routine_service = RoutineService(
                self.store,
                default_morning=settings.DEFAULT_MORNING_ROUTINE,
                default_night=settings.DEFAULT_NIGHT_ROUTINE,
            )
            self.rollover_engine = RolloverEngine(
                self.store,
                self.entry_service,
                self.routine_service,
                locks=self.locks,
                lookback=settings.ROLLOVER_LOOKBACK,
            )
            self.leaderboard_service = LeaderboardService(self.entry_service, self.routine_service)

            self.initialized = True
            logger.info("✅ Все сервисы инициализированы успешно!")
            return True

        except Exception as e:
            logger.error(f"❌ Ошибка инициализации сервисов: {e}")
            await self.close()
            raise

    def health_check(self) -> dict:
        """Проверка состояния всех сервисов"""
        health = {
            "status": "healthy",
            "services": {},
        }

        if self.store:
            health["services"]["store"] = self.store.health_check()
        if self.locks:
            health["services"]["locks"] = {"status": "ok", "backend": self.locks.backend}

        service_statuses = [s.get("status", "unknown") for s in health["services"].values()]
        if not self.initialized:
            health["status"] = "error"
        elif "error" in service_statuses:
            health["status"] = "error"
        elif "warning" in service_statuses:
            health["status"] = "warning"

        return health

    async def close(self):
        """Закрытие всех сервисов"""
        logger.info("🛑 Закрытие сервисов...")

        self.leaderboard_service = None
        self.rollover_engine = None
        self.routine_service = None
        self.entry_service = None

        if self.locks:
            await self.locks.close()
            self.locks = None

        if self.store:
            await self.store.close()
            self.store = None

        self.initialized = False
        logger.info("✅ Все сервисы закрыты")


# Глобальный экземпляр менеджера сервисов
_service_manager = None


def get_service_manager() -> ServiceManager:
    """Получить глобальный менеджер сервисов"""
    global _service_manager
    if _service_manager is None:
        _service_manager = ServiceManager()
    return _service_manager


async def initialize_all_services(settings: Settings, store: Optional[DocumentStore] = None) -> ServiceManager:
    """Инициализация всех сервисов"""
    manager = get_service_manager()
    await manager.initialize(settings, store=store)
    return manager


async def close_all_services():
    """Закрытие всех сервисов"""
    global _service_manager
    if _service_manager:
        await _service_manager.close()
        _service_manager = None


def get_services_health() -> dict:
    """Получить состояние всех сервисов"""
    return get_service_manager().health_check()


__all__ = [
    'EntryService',
    'RoutineService',
    'RolloverEngine',
    'LeaderboardService',
    'ManualRolloverResult',
    'inject_routines',
    'LedgerError',
    'InvalidDateError',
    'EntryNotFoundError',
    'TaskNotFoundError',
    'RoutineNotFoundError',
    'ServiceManager',
    'create_store',
    'get_service_manager',
    'initialize_all_services',
    'close_all_services',
    'get_services_health',
]
