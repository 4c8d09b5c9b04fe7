# services/rollover_service.py

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from database.errors import StoreWriteError
from database.store import DocumentStore
from models.entry import DailyEntry, validate_date_key
from models.enums import RoutineType
from models.task import TaskRecord
from models.user import RoutineRegistry
from services.entry_service import EntryService
from services.errors import InvalidDateError
from services.routine_service import RoutineService
from utils.datetime_utils import add_days
from utils.decorators import retry_on_exception
from utils.locks import UserLockManager
from utils.validators import is_valid_task_title

logger = logging.getLogger(__name__)

# Порядок, в котором рутины добавляются в запись
INJECTION_ORDER = (RoutineType.MORNING, RoutineType.NIGHT)


@dataclass
class ManualRolloverResult:
    rolled_count: int
    today: DailyEntry
    tomorrow: Optional[DailyEntry] = None
    rolled_titles: List[str] = field(default_factory=list)


def inject_routines(entry: DailyEntry, routines: RoutineRegistry) -> List[TaskRecord]:
    """
    Добавить в запись задачи рутин, которых в ней еще нет

    Наличие проверяется по названию среди всех задач записи, включая
    ручные. Повтор названия внутри рутины добавляется один раз,
    недопустимые названия из старых профилей пропускаются.
    """
    present = entry.titles()
    injected: List[TaskRecord] = []
    for routine_type in INJECTION_ORDER:
        for title in routines.titles_for(routine_type):
            if not is_valid_task_title(title) or title in present:
                continue
            task = TaskRecord.create(title, routine_type)
            present.add(task.title)
            injected.append(task)
    entry.append_tasks(injected)
    return injected


class RolloverEngine:
    """
    Перенос невыполненных задач между днями и добавление рутин

    Возможности:
    - ensure_today: однократный перенос с последнего прошлого дня
    - plan_date: подготовка будущей даты без переноса
    - manual_rollover: немедленный перенос сегодняшних задач на завтра

    Дата "сегодня" всегда передается явно. Операции одного пользователя
    сериализуются через UserLockManager.
    """

    def __init__(self, store: DocumentStore, entries: EntryService, routines: RoutineService,
                 locks: Optional[UserLockManager] = None, lookback: int = 10):
        self.store = store
        self.entries = entries
        self.routines = routines
        self.locks = locks or UserLockManager()
        self.lookback = lookback
        logger.info(f"✅ RolloverEngine инициализирован (блокировки: {self.locks.backend})")

    # ===== ПЕРЕНОС ПРИ ОТКРЫТИИ ДНЯ =====

    @retry_on_exception(retries=2, delay=0.05, exceptions=(StoreWriteError,))
    async def ensure_today(self, user_id: str, today: str) -> DailyEntry:
        """Подготовить запись на сегодня: перенос и рутины"""
        validate_date_key(today)
        async with self.locks.hold(user_id):
            return await self._ensure_today(user_id, today)

    async def _ensure_today(self, user_id: str, today: str) -> DailyEntry:
        profile = await self.routines.get_profile(user_id)
        today_entry, exists = await self.entries.load_entry(user_id, today)
        batch = self.store.batch()
        changed = not exists
        carried: List[TaskRecord] = []

        if today_entry.has_tasks:
            logger.debug(f"⏭️ Запись {user_id}/{today} уже заполнена, перенос пропущен")
        else:
            source = await self.find_rollover_source(user_id, today)
            if source is not None:
                carried = [task.carry_copy() for task in source.carryover_candidates()]
                today_entry.append_tasks(carried)
                # Источник закрывается даже при пустом переносе
                self.entries.stage_rollover_applied(batch, source)
                changed = True
                logger.info(f"📦 Перенос {user_id}: {source.date} → {today}, задач: {len(carried)}")

        injected = inject_routines(today_entry, profile.routines)
        if injected:
            changed = True
            logger.info(f"🌅 В запись {user_id}/{today} добавлено задач рутин: {len(injected)}")

        if changed:
            self.entries.stage_tasks(batch, today_entry, created=not exists)
            await batch.commit()

        return today_entry

    async def find_rollover_source(self, user_id: str, today: str) -> Optional[DailyEntry]:
        """
        Последняя по timestamp запись с датой раньше today

        Возвращает None, если такой записи нет или она уже
        использовалась как источник переноса.
        """
        recent = await self.entries.query_recent(user_id, self.lookback)
        for entry in recent:
            if entry.date < today:
                if entry.rollover_applied:
                    logger.debug(f"🔒 Запись {user_id}/{entry.date} уже перенесена")
                    return None
                return entry
        return None

    # ===== ПЛАНИРОВАНИЕ =====

    @retry_on_exception(retries=2, delay=0.05, exceptions=(StoreWriteError,))
    async def plan_date(self, user_id: str, date: str, today: str) -> DailyEntry:
        """
        Открыть будущую дату с рутинами, без переноса

        Сегодня и прошлые даты отклоняются с InvalidDateError.
        """
        validate_date_key(date)
        validate_date_key(today)
        if date <= today:
            raise InvalidDateError(date, f"планировать можно только даты после {today}")
        async with self.locks.hold(user_id):
            profile = await self.routines.get_profile(user_id)
            entry, exists = await self.entries.load_entry(user_id, date)
            injected = inject_routines(entry, profile.routines)

            if injected or not exists:
                batch = self.store.batch()
                self.entries.stage_tasks(batch, entry, created=not exists)
                await batch.commit()
                logger.info(f"🗓️ Запись {user_id}/{date} запланирована, задач рутин: {len(injected)}")

            return entry

    # ===== РУЧНОЙ ПЕРЕНОС =====

    async def manual_rollover(self, user_id: str, today: str) -> ManualRolloverResult:
        """
        Перенести невыполненные ручные задачи сегодня на завтра

        Удаление из сегодняшней записи, флаг rolloverApplied и добавление
        в завтрашнюю запись применяются одним batch.
        """
        validate_date_key(today)
        async with self.locks.hold(user_id):
            today_entry = await self.entries.get_entry(user_id, today)
            if today_entry is None:
                logger.info(f"ℹ️ Ручной перенос {user_id}: записи на {today} нет")
                return ManualRolloverResult(rolled_count=0, today=DailyEntry.empty(user_id, today))

            moving = today_entry.carryover_candidates()
            today_entry.remove_tasks(task.id for task in moving)
            today_entry.rollover_applied = True

            batch = self.store.batch()
            self.entries.stage_tasks(batch, today_entry)
            self.entries.stage_rollover_applied(batch, today_entry)

            tomorrow_entry = None
            if moving:
                tomorrow_entry, exists = await self.entries.load_entry(user_id, add_days(today, 1))
                tomorrow_entry.append_tasks(task.carry_copy() for task in moving)
                self.entries.stage_tasks(batch, tomorrow_entry, created=not exists)

            await batch.commit()

            logger.info(f"➡️ Ручной перенос {user_id}: {today} → {add_days(today, 1)}, задач: {len(moving)}")
            return ManualRolloverResult(
                rolled_count=len(moving),
                today=today_entry,
                tomorrow=tomorrow_entry,
                rolled_titles=[task.title for task in moving],
            )
