import asyncio
import functools
import logging

logger = logging.getLogger(__name__)


def retry_on_exception(retries=3, delay=2, exceptions=(Exception,)):
    """Повторить корутину при ошибке; после последней попытки исключение пробрасывается"""
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            for attempt in range(1, retries + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    logger.warning(f"⚠️ {func.__name__}: попытка {attempt}/{retries} не удалась: {e}")
                    if attempt == retries:
                        raise
                    await asyncio.sleep(delay)
        return wrapper
    return decorator
