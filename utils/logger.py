import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


def setup_logger(log_file: Optional[str] = "logs/dailynine.log", level: str = "INFO",
                 fmt: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                 max_bytes: int = 10_000_000, backup_count: int = 5) -> logging.Logger:
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt)

    # Повторный вызов не должен дублировать обработчики
    for handler in list(logger.handlers):
        if getattr(handler, "_dailynine", False):
            logger.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console._dailynine = True
    logger.addHandler(console)

    if log_file:
        Path(log_file).parent.mkdir(exist_ok=True, parents=True)
        handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        handler.setFormatter(formatter)
        handler._dailynine = True
        logger.addHandler(handler)

    # Шум uvicorn.access не нужен вне отладки
    if logger.level > logging.DEBUG:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    return logger
