from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Dict, Any
from enum import Enum

from models import DAILY_GOAL, DailyEntry, LeaderboardRow, RoutineRegistry, RoutineType, TaskRecord, UserProfile
from utils.validators import MAX_TITLE_LENGTH, clean_title


class RoutineName(str, Enum):
    MORNING = "morning"
    NIGHT = "night"

    @property
    def routine_type(self) -> RoutineType:
        return RoutineType(self.value)


# Модели запросов
class TitleIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        return clean_title(v)


class DisplayNameIn(BaseModel):
    display_name: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)

    @field_validator('display_name')
    @classmethod
    def validate_display_name(cls, v):
        return clean_title(v)


# Модели ответов
class TaskOut(BaseModel):
    id: str
    title: str
    completed: bool
    routine_type: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_task(cls, task: TaskRecord) -> "TaskOut":
        return cls(
            id=task.id,
            title=task.title,
            completed=task.completed,
            routine_type=task.routine_type.to_document(),
            created_at=task.created_at,
        )


class EntryOut(BaseModel):
    date: str
    tasks: List[TaskOut] = []
    groups: Dict[str, List[str]] = {}  # рутина -> id задач в порядке показа
    completed_count: int = 0
    total_tasks: int = 0
    daily_goal: int = DAILY_GOAL
    goal_reached: bool = False
    rollover_applied: bool = False
    timestamp: Optional[str] = None
    exists: bool = True

    @classmethod
    def from_entry(cls, entry: DailyEntry, exists: bool = True) -> "EntryOut":
        return cls(
            date=entry.date,
            tasks=[TaskOut.from_task(t) for t in entry.tasks],
            groups={name: [t.id for t in tasks] for name, tasks in entry.grouped_tasks().items()},
            completed_count=entry.completed_count,
            total_tasks=entry.total_tasks,
            goal_reached=entry.is_perfect,
            rollover_applied=entry.rollover_applied,
            timestamp=entry.timestamp,
            exists=exists,
        )


class TaskChangeOut(BaseModel):
    entry: EntryOut
    task: TaskOut


class RolloverOut(BaseModel):
    rolled_count: int
    rolled_titles: List[str] = []
    today: EntryOut
    tomorrow: Optional[EntryOut] = None


class HistoryOut(BaseModel):
    entries: List[EntryOut] = []
    total: int = 0


class RoutinesOut(BaseModel):
    user_id: str
    display_name: Optional[str] = None
    morning: List[str] = []
    night: List[str] = []

    @classmethod
    def from_registry(cls, user_id: str, registry: RoutineRegistry,
                      display_name: Optional[str] = None) -> "RoutinesOut":
        return cls(user_id=user_id, display_name=display_name,
                   morning=list(registry.morning), night=list(registry.night))

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "RoutinesOut":
        return cls.from_registry(profile.user_id, profile.routines, profile.display_name)


class LeaderboardRowOut(BaseModel):
    rank: int
    user_id: str
    display_name: str
    window_completed_count: int
    perfect_day_count: int
    total_days_tracked: int
    average_per_day: float
    is_current_user: bool = False

    @classmethod
    def from_row(cls, row: LeaderboardRow) -> "LeaderboardRowOut":
        return cls(**row.to_dict())


class LeaderboardOut(BaseModel):
    window: str
    date: str
    rows: List[LeaderboardRowOut] = []


class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
    data: Optional[Dict[str, Any]] = None
