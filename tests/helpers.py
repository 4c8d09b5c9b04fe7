import asyncio
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from database import Direction, MemoryDocumentStore, StoreWriteError, entry_path, user_path
from models import DailyEntry, RoutineType, TaskRecord
from services import EntryService, LeaderboardService, RolloverEngine, RoutineService
from utils.locks import UserLockManager


# (название, выполнена, рутина)
TaskSpec = Tuple[str, bool, RoutineType]


def manual(title: str, completed: bool = False) -> TaskSpec:
    return (title, completed, RoutineType.NONE)


def morning(title: str, completed: bool = False) -> TaskSpec:
    return (title, completed, RoutineType.MORNING)


def night(title: str, completed: bool = False) -> TaskSpec:
    return (title, completed, RoutineType.NIGHT)


def make_entry(user_id: str, date: str, tasks: Sequence[TaskSpec] = (),
               rollover_applied: bool = False, timestamp: Optional[str] = None) -> DailyEntry:
    records = []
    for title, completed, routine_type in tasks:
        record = TaskRecord.create(title, routine_type)
        record.completed = completed
        records.append(record)
    return DailyEntry(
        user_id=user_id,
        date=date,
        tasks=records,
        rollover_applied=rollover_applied,
        timestamp=timestamp or f"{date}T21:00:00+00:00",
    )


async def seed_entry(store, user_id: str, date: str, tasks: Sequence[TaskSpec] = (),
                     rollover_applied: bool = False, timestamp: Optional[str] = None) -> DailyEntry:
    entry = make_entry(user_id, date, tasks, rollover_applied, timestamp)
    await store.set_document(entry_path(user_id, date), entry.to_dict(), merge=False)
    return entry


async def seed_profile(store, user_id: str, morning_titles: Sequence[str] = (),
                       night_titles: Sequence[str] = (), display_name: Optional[str] = None) -> None:
    await store.set_document(user_path(user_id), {
        "displayName": display_name or user_id,
        "morningRoutine": list(morning_titles),
        "nightRoutine": list(night_titles),
        "createdAt": "2025-01-01T00:00:00+00:00",
        "timestamp": "2025-01-01T00:00:00+00:00",
    }, merge=False)


def stored_entry(store: MemoryDocumentStore, user_id: str, date: str) -> Optional[dict]:
    return store.dump().get(entry_path(user_id, date))


def titles(entry: DailyEntry) -> List[str]:
    return [task.title for task in entry.tasks]


@dataclass
class Services:
    store: MemoryDocumentStore
    entries: EntryService
    routines: RoutineService
    engine: RolloverEngine
    leaderboard: LeaderboardService


def make_services(store: Optional[MemoryDocumentStore] = None, locking: bool = True,
                  default_morning: Sequence[str] = (), default_night: Sequence[str] = (),
                  lookback: int = 10) -> Services:
    store = store if store is not None else MemoryDocumentStore()
    entries = EntryService(store)
    routines = RoutineService(store, default_morning=list(default_morning), default_night=list(default_night))
    engine = RolloverEngine(
        store, entries, routines,
        locks=UserLockManager(enabled=locking, timeout=2.0),
        lookback=lookback,
    )
    return Services(
        store=store,
        entries=entries,
        routines=routines,
        engine=engine,
        leaderboard=LeaderboardService(entries, routines),
    )


class InterleavingStore(MemoryDocumentStore):
    """Отдает управление циклу событий после каждого чтения"""

    def __init__(self, documents=None):
        super().__init__(documents)
        self.commits: List[list] = []

    async def get_document(self, path):
        document = await super().get_document(path)
        await asyncio.sleep(0)
        return document

    async def query_collection(self, path, order_by=None, direction=Direction.DESCENDING, limit=None):
        documents = await super().query_collection(path, order_by=order_by, direction=direction, limit=limit)
        await asyncio.sleep(0)
        return documents

    async def _apply_writes(self, writes):
        self.commits.append(list(writes))
        await super()._apply_writes(writes)

    def source_flag_commits(self, path: str) -> int:
        """Сколько коммитов помечали path как источник переноса"""
        return sum(
            1 for writes in self.commits
            for write_path, fields, _ in writes
            if write_path == path and fields == {"rolloverApplied": True}
        )


class FailingStore(MemoryDocumentStore):
    """Отклоняет записи в дневные записи, пока не исчерпан счетчик"""

    def __init__(self, documents=None, failures: int = 0):
        super().__init__(documents)
        self.failures = failures
        self.rejected = 0

    async def _apply_writes(self, writes):
        if self.failures > 0 and any("/entries/" in path for path, _, _ in writes):
            self.failures -= 1
            self.rejected += 1
            raise StoreWriteError("запись отклонена")
        await super()._apply_writes(writes)
