# models/task.py

import uuid
from dataclasses import dataclass, field

from models.enums import RoutineType
from utils.datetime_utils import utc_now_iso
from utils.validators import clean_title, is_valid_task_title


def new_task_id() -> str:
    return uuid.uuid4().hex


@dataclass
class TaskRecord:
    """
    Отдельная задача дня

    Название проверяется при создании через create(). Задачи из
    хранилища загружаются как есть, даже со старыми пустыми названиями.
    """
    id: str
    title: str
    completed: bool = False
    routine_type: RoutineType = RoutineType.NONE
    created_at: str = field(default_factory=utc_now_iso)

    @classmethod
    def create(cls, title: str, routine_type: RoutineType = RoutineType.NONE) -> "TaskRecord":
        """Новая задача со свежим id"""
        return cls(id=new_task_id(), title=clean_title(title), routine_type=routine_type)

    @property
    def is_routine(self) -> bool:
        return self.routine_type is not RoutineType.NONE

    @property
    def is_carryover_candidate(self) -> bool:
        """Переносятся только невыполненные ручные задачи с допустимым названием"""
        return not self.completed and not self.is_routine and is_valid_task_title(self.title)

    def carry_copy(self) -> "TaskRecord":
        """Копия для переноса: новый id, не выполнена, без рутины"""
        return TaskRecord.create(self.title)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "routineType": self.routine_type.to_document(),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TaskRecord":
        return cls(
            id=str(data.get("id") or new_task_id()),
            title=str(data.get("title") or ""),
            completed=bool(data.get("completed", False)),
            routine_type=RoutineType.from_document(data.get("routineType")),
            created_at=data.get("createdAt") or utc_now_iso(),
        )
