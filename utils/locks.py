import asyncio
import logging
import weakref
from contextlib import asynccontextmanager
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import LockError
from redis.exceptions import TimeoutError as RedisTimeoutError

logger = logging.getLogger(__name__)


class UserLockTimeout(Exception):
    """Не удалось захватить блокировку пользователя за отведенное время"""

    def __init__(self, user_id: str, timeout: float):
        super().__init__(f"Блокировка пользователя {user_id} не получена за {timeout}с")
        self.user_id = user_id
        self.timeout = timeout


class UserLockManager:
    """
    Блокировки операций переноса по пользователю

    Без Redis используется asyncio.Lock на пользователя (один процесс).
    С Redis блокировка общая для всех воркеров.
    """

    def __init__(self, enabled: bool = True, timeout: float = 10.0,
                 redis_client: Optional[redis.Redis] = None, prefix: str = "dailynine:lock"):
        self.enabled = enabled
        self.timeout = timeout
        self.redis = redis_client
        self.prefix = prefix
        self._local_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    @property
    def backend(self) -> str:
        if not self.enabled:
            return "disabled"
        return "redis" if self.redis is not None else "local"

    @asynccontextmanager
    async def hold(self, user_id: str):
        """Удерживать блокировку пользователя на время блока"""
        if not self.enabled:
            yield
            return

        if self.redis is not None:
            async with self._hold_redis(user_id):
                yield
        else:
            async with self._hold_local(user_id):
                yield

    @asynccontextmanager
    async def _hold_local(self, user_id: str):
        lock = self._local_locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._local_locks[user_id] = lock

        try:
            await asyncio.wait_for(lock.acquire(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"⚠️ Таймаут блокировки пользователя {user_id}")
            raise UserLockTimeout(user_id, self.timeout)

        try:
            yield
        finally:
            lock.release()

    @asynccontextmanager
    async def _hold_redis(self, user_id: str):
        lock = self.redis.lock(
            f"{self.prefix}:{user_id}",
            timeout=self.timeout,
            blocking_timeout=self.timeout,
        )
        if not await lock.acquire():
            logger.warning(f"⚠️ Таймаут Redis-блокировки пользователя {user_id}")
            raise UserLockTimeout(user_id, self.timeout)

        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError as e:
                # Блокировка истекла по таймауту до окончания операции
                logger.warning(f"⚠️ Redis-блокировка пользователя {user_id} уже снята: {e}")

    async def close(self):
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None


async def create_redis_client(url: str) -> Optional[redis.Redis]:
    """Подключение к Redis; при недоступности возвращает None"""
    try:
        logger.info("🔄 Подключение к Redis...")
        client = redis.from_url(url, encoding="utf-8", decode_responses=True, max_connections=10)
        await client.ping()
        logger.info("✅ Redis подключен")
        return client
    except (RedisConnectionError, RedisTimeoutError, OSError) as e:
        logger.warning(f"⚠️ Не удалось подключиться к Redis, используем локальные блокировки: {e}")
        return None
