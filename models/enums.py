# models/enums.py

import logging
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class RoutineType(Enum):
    """Источник задачи: ручная или из рутины"""
    NONE = "none"
    MORNING = "morning"
    NIGHT = "night"

    def to_document(self) -> Optional[str]:
        # В документе ручная задача хранится как null
        return None if self is RoutineType.NONE else self.value

    @classmethod
    def from_document(cls, value: Optional[str]) -> "RoutineType":
        """Тип из документа; неизвестное значение читается как ручная задача"""
        if value is None or value == "":
            return cls.NONE
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"⚠️ Неизвестный routineType {value!r}, задача считается ручной")
            return cls.NONE


class LeaderboardWindow(str, Enum):
    """Окно агрегации таблицы лидеров"""
    TODAY = "today"
    WEEK = "week"

    @property
    def days(self) -> int:
        return 1 if self is LeaderboardWindow.TODAY else 7
