# services/entry_service.py

import logging
from typing import List, Optional, Tuple

from database.paths import entries_collection, entry_path
from database.store import Direction, DocumentStore, WriteBatch
from models.entry import DailyEntry, validate_date_key
from models.task import TaskRecord
from services.errors import EntryNotFoundError, TaskNotFoundError
from utils.datetime_utils import utc_now_iso

logger = logging.getLogger(__name__)


class EntryService:
    """
    Дневные записи пользователя поверх хранилища документов

    Возможности:
    - Чтение записи и поиск последних записей по timestamp
    - Запись изменений списка задач с пересчетом счетчиков
    - Добавление, переключение и удаление задач
    - История прошлых дней
    """

    def __init__(self, store: DocumentStore):
        self.store = store
        logger.info("✅ EntryService инициализирован")

    # ===== ЧТЕНИЕ =====

    async def get_entry(self, user_id: str, date: str) -> Optional[DailyEntry]:
        """Запись на дату или None"""
        validate_date_key(date)
        document = await self.store.get_document(entry_path(user_id, date))
        if document is None:
            return None
        return DailyEntry.from_dict(user_id, document.id, document.data)

    async def load_entry(self, user_id: str, date: str) -> Tuple[DailyEntry, bool]:
        """Запись на дату (пустая, если ее нет) и признак существования"""
        entry = await self.get_entry(user_id, date)
        if entry is None:
            return DailyEntry.empty(user_id, date), False
        return entry, True

    async def query_recent(self, user_id: str, limit: int) -> List[DailyEntry]:
        """Последние записанные записи, новые первыми"""
        documents = await self.store.query_collection(
            entries_collection(user_id),
            order_by="timestamp",
            direction=Direction.DESCENDING,
            limit=limit,
        )
        return [DailyEntry.from_dict(user_id, doc.id, doc.data) for doc in documents]

    async def list_all_entries(self, user_id: str) -> List[DailyEntry]:
        documents = await self.store.query_collection(entries_collection(user_id))
        return [DailyEntry.from_dict(user_id, doc.id, doc.data) for doc in documents]

    async def list_history(self, user_id: str, before: Optional[str] = None,
                           limit: Optional[int] = None) -> List[DailyEntry]:
        """Прошлые записи по убыванию даты"""
        documents = await self.store.query_collection(
            entries_collection(user_id),
            order_by="date",
            direction=Direction.DESCENDING,
        )
        entries = [DailyEntry.from_dict(user_id, doc.id, doc.data) for doc in documents]
        if before:
            entries = [entry for entry in entries if entry.date < before]
        return entries[:limit] if limit is not None else entries

    # ===== ЗАПИСЬ =====

    def stage_tasks(self, batch: WriteBatch, entry: DailyEntry, created: bool = False) -> None:
        """Добавить в batch запись списка задач и счетчиков"""
        entry.timestamp = utc_now_iso()
        fields = entry.tasks_payload()
        fields["timestamp"] = entry.timestamp
        if created:
            fields["rolloverApplied"] = entry.rollover_applied
        batch.set(entry_path(entry.user_id, entry.date), fields, merge=True)

    def stage_rollover_applied(self, batch: WriteBatch, entry: DailyEntry) -> None:
        """Закрыть запись как источник переноса; timestamp не меняется"""
        entry.rollover_applied = True
        batch.set(entry_path(entry.user_id, entry.date), {"rolloverApplied": True}, merge=True)

    async def _save_tasks(self, entry: DailyEntry, created: bool) -> DailyEntry:
        batch = self.store.batch()
        self.stage_tasks(batch, entry, created=created)
        await batch.commit()
        return entry

    # ===== ОПЕРАЦИИ С ЗАДАЧАМИ =====

    async def add_task(self, user_id: str, date: str, title: str) -> Tuple[DailyEntry, TaskRecord]:
        """Добавить ручную задачу, запись создается при необходимости"""
        entry, exists = await self.load_entry(user_id, date)
        task = TaskRecord.create(title)
        entry.append_tasks([task])
        await self._save_tasks(entry, created=not exists)

        logger.info(f"✅ Задача {task.id} добавлена пользователю {user_id} на {date}: {task.title}")
        return entry, task

    async def toggle_task(self, user_id: str, date: str, task_id: str) -> Tuple[DailyEntry, TaskRecord]:
        """Переключить выполнение задачи"""
        entry = await self._require_entry(user_id, date)
        task = entry.find_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id, date)

        task.completed = not task.completed
        await self._save_tasks(entry, created=False)

        state = "выполнена" if task.completed else "снова открыта"
        logger.info(f"🔄 Задача {task_id} пользователя {user_id} {state} ({entry.completed_count}/{entry.total_tasks})")
        return entry, task

    async def delete_task(self, user_id: str, date: str, task_id: str) -> DailyEntry:
        """Удалить задачу из записи"""
        entry = await self._require_entry(user_id, date)
        if not entry.remove_tasks([task_id]):
            raise TaskNotFoundError(task_id, date)

        await self._save_tasks(entry, created=False)
        logger.info(f"🗑️ Задача {task_id} удалена у пользователя {user_id} на {date}")
        return entry

    async def _require_entry(self, user_id: str, date: str) -> DailyEntry:
        entry = await self.get_entry(user_id, date)
        if entry is None:
            raise EntryNotFoundError(user_id, date)
        return entry
