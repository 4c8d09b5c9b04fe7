# models/user.py

from dataclasses import dataclass, field
from typing import List, Optional

from models.enums import RoutineType


@dataclass
class RoutineRegistry:
    """Списки повторяющихся задач пользователя"""
    morning: List[str] = field(default_factory=list)
    night: List[str] = field(default_factory=list)

    def titles_for(self, routine_type: RoutineType) -> List[str]:
        if routine_type is RoutineType.MORNING:
            return self.morning
        if routine_type is RoutineType.NIGHT:
            return self.night
        raise ValueError("У ручных задач нет рутины")


@dataclass
class UserProfile:
    """Профиль пользователя: имя и рутины"""
    user_id: str
    display_name: str
    routines: RoutineRegistry = field(default_factory=RoutineRegistry)
    created_at: Optional[str] = None
    timestamp: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "displayName": self.display_name,
            "morningRoutine": list(self.routines.morning),
            "nightRoutine": list(self.routines.night),
            "createdAt": self.created_at,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, user_id: str, data: dict) -> "UserProfile":
        return cls(
            user_id=user_id,
            display_name=data.get("displayName") or user_id,
            routines=RoutineRegistry(
                morning=list(data.get("morningRoutine", [])),
                night=list(data.get("nightRoutine", [])),
            ),
            created_at=data.get("createdAt"),
            timestamp=data.get("timestamp"),
        )
