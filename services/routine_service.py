# services/routine_service.py

import logging
from typing import List, Optional

from database.paths import USERS_COLLECTION, user_path
from database.store import DocumentStore
from models.enums import RoutineType
from models.user import RoutineRegistry, UserProfile
from services.errors import RoutineNotFoundError
from utils.datetime_utils import utc_now_iso
from utils.validators import clean_title

logger = logging.getLogger(__name__)

_ROUTINE_FIELDS = {
    RoutineType.MORNING: "morningRoutine",
    RoutineType.NIGHT: "nightRoutine",
}


class RoutineService:
    """
    Реестр рутин и профиль пользователя

    Рутины хранятся в документе users/{uid}. Изменение реестра не трогает
    уже добавленные в записи задачи: это независимые копии.
    """

    def __init__(self, store: DocumentStore, default_morning: Optional[List[str]] = None,
                 default_night: Optional[List[str]] = None):
        self.store = store
        self.default_morning = list(default_morning or [])
        self.default_night = list(default_night or [])
        logger.info("✅ RoutineService инициализирован")

    # ===== ПРОФИЛЬ =====

    async def get_profile(self, user_id: str) -> UserProfile:
        """Профиль пользователя; новый профиль получает рутины по умолчанию"""
        document = await self.store.get_document(user_path(user_id))
        if document is not None:
            return UserProfile.from_dict(user_id, document.data)

        now = utc_now_iso()
        profile = UserProfile(
            user_id=user_id,
            display_name=user_id,
            routines=RoutineRegistry(morning=list(self.default_morning), night=list(self.default_night)),
            created_at=now,
            timestamp=now,
        )
        await self.store.set_document(user_path(user_id), profile.to_dict(), merge=True)
        logger.info(f"👤 Создан профиль пользователя {user_id}")
        return profile

    async def list_profiles(self) -> List[UserProfile]:
        documents = await self.store.query_collection(USERS_COLLECTION)
        return [UserProfile.from_dict(doc.id, doc.data) for doc in documents]

    async def set_display_name(self, user_id: str, display_name: str) -> UserProfile:
        profile = await self.get_profile(user_id)
        profile.display_name = clean_title(display_name)
        profile.timestamp = utc_now_iso()
        await self.store.set_document(
            user_path(user_id),
            {"displayName": profile.display_name, "timestamp": profile.timestamp},
            merge=True,
        )
        logger.info(f"👤 Пользователь {user_id} сменил имя на {profile.display_name}")
        return profile

    # ===== РУТИНЫ =====

    async def get_routines(self, user_id: str) -> RoutineRegistry:
        profile = await self.get_profile(user_id)
        return profile.routines

    async def add_routine(self, user_id: str, routine_type: RoutineType, title: str) -> RoutineRegistry:
        """Добавить название в конец рутины"""
        profile = await self.get_profile(user_id)
        titles = profile.routines.titles_for(routine_type)
        titles.append(clean_title(title))
        await self._save_routine(profile, routine_type)

        logger.info(f"✅ В рутину {routine_type.value} пользователя {user_id} добавлено: {titles[-1]}")
        return profile.routines

    async def update_routine(self, user_id: str, routine_type: RoutineType, index: int,
                             title: str) -> RoutineRegistry:
        """Переименовать элемент рутины"""
        profile = await self.get_profile(user_id)
        titles = profile.routines.titles_for(routine_type)
        self._check_index(titles, routine_type, index)
        titles[index] = clean_title(title)
        await self._save_routine(profile, routine_type)

        logger.info(f"✅ Рутина {routine_type.value} пользователя {user_id}: элемент {index} обновлен")
        return profile.routines

    async def remove_routine(self, user_id: str, routine_type: RoutineType, index: int) -> RoutineRegistry:
        """Удалить элемент рутины; задачи в записях остаются"""
        profile = await self.get_profile(user_id)
        titles = profile.routines.titles_for(routine_type)
        self._check_index(titles, routine_type, index)
        removed = titles.pop(index)
        await self._save_routine(profile, routine_type)

        logger.info(f"🗑️ Из рутины {routine_type.value} пользователя {user_id} удалено: {removed}")
        return profile.routines

    @staticmethod
    def _check_index(titles: List[str], routine_type: RoutineType, index: int) -> None:
        if not 0 <= index < len(titles):
            raise RoutineNotFoundError(routine_type.value, index)

    async def _save_routine(self, profile: UserProfile, routine_type: RoutineType) -> None:
        profile.timestamp = utc_now_iso()
        await self.store.set_document(
            user_path(profile.user_id),
            {
                _ROUTINE_FIELDS[routine_type]: list(profile.routines.titles_for(routine_type)),
                "timestamp": profile.timestamp,
            },
            merge=True,
        )
