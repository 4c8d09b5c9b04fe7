# models/entry.py

from dataclasses import dataclass, field
from datetime import date as date_cls
from typing import Dict, Iterable, List, Optional, Set

from models.enums import RoutineType
from models.task import TaskRecord

# Дневная цель: девять выполненных задач
DAILY_GOAL = 9


def validate_date_key(value: str) -> str:
    """Проверить ключ даты формата YYYY-MM-DD"""
    try:
        parsed = date_cls.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValueError(f"Неверный формат даты: {value!r}, ожидается YYYY-MM-DD")
    if parsed.isoformat() != value:
        raise ValueError(f"Неверный формат даты: {value!r}, ожидается YYYY-MM-DD")
    return value


@dataclass
class DailyEntry:
    """
    Список задач пользователя на одну календарную дату

    Счетчики не хранятся отдельно: они вычисляются из tasks
    при каждой сериализации, поэтому любая запись их пересчитывает.
    """
    user_id: str
    date: str
    tasks: List[TaskRecord] = field(default_factory=list)
    rollover_applied: bool = False
    timestamp: Optional[str] = None

    def __post_init__(self):
        validate_date_key(self.date)

    # ===== СЧЕТЧИКИ =====

    @property
    def completed_count(self) -> int:
        return sum(1 for task in self.tasks if task.completed)

    @property
    def total_tasks(self) -> int:
        return len(self.tasks)

    @property
    def is_perfect(self) -> bool:
        return self.completed_count == DAILY_GOAL

    @property
    def has_tasks(self) -> bool:
        return bool(self.tasks)

    # ===== РАБОТА С ЗАДАЧАМИ =====

    def titles(self) -> Set[str]:
        return {task.title for task in self.tasks}

    def find_task(self, task_id: str) -> Optional[TaskRecord]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def append_tasks(self, tasks: Iterable[TaskRecord]) -> None:
        self.tasks.extend(tasks)

    def remove_tasks(self, task_ids: Iterable[str]) -> List[TaskRecord]:
        """Удалить задачи по id, вернуть удаленные"""
        ids = set(task_ids)
        removed = [task for task in self.tasks if task.id in ids]
        self.tasks = [task for task in self.tasks if task.id not in ids]
        return removed

    def carryover_candidates(self) -> List[TaskRecord]:
        return [task for task in self.tasks if task.is_carryover_candidate]

    def grouped_tasks(self) -> Dict[str, List[TaskRecord]]:
        """Задачи по группам рутины в порядке добавления"""
        groups: Dict[str, List[TaskRecord]] = {
            RoutineType.MORNING.value: [],
            RoutineType.NONE.value: [],
            RoutineType.NIGHT.value: [],
        }
        for task in self.tasks:
            groups[task.routine_type.value].append(task)
        return groups

    # ===== СЕРИАЛИЗАЦИЯ =====

    def to_dict(self) -> dict:
        """Полный документ записи с пересчитанными счетчиками"""
        return {
            "date": self.date,
            "tasks": [task.to_dict() for task in self.tasks],
            "completedCount": self.completed_count,
            "totalTasks": self.total_tasks,
            "rolloverApplied": self.rollover_applied,
            "timestamp": self.timestamp,
        }

    def tasks_payload(self) -> dict:
        """Поля, которые меняются при изменении списка задач"""
        return {
            "date": self.date,
            "tasks": [task.to_dict() for task in self.tasks],
            "completedCount": self.completed_count,
            "totalTasks": self.total_tasks,
        }

    @classmethod
    def from_dict(cls, user_id: str, date: str, data: dict) -> "DailyEntry":
        return cls(
            user_id=user_id,
            date=date,
            tasks=[TaskRecord.from_dict(t) for t in data.get("tasks", [])],
            rollover_applied=bool(data.get("rolloverApplied", False)),
            timestamp=data.get("timestamp"),
        )

    @classmethod
    def empty(cls, user_id: str, date: str) -> "DailyEntry":
        return cls(user_id=user_id, date=date)
