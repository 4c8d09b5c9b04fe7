# services/leaderboard_service.py

import logging
from typing import List

from models.entry import DailyEntry
from models.enums import LeaderboardWindow
from models.leaderboard import LeaderboardRow
from models.user import UserProfile
from services.entry_service import EntryService
from services.routine_service import RoutineService
from utils.datetime_utils import window_dates

logger = logging.getLogger(__name__)


def build_row(profile: UserProfile, entries: List[DailyEntry], window_keys: set) -> LeaderboardRow:
    """Статистика одного пользователя по всем его записям"""
    lifetime_completed = 0
    row = LeaderboardRow(user_id=profile.user_id, display_name=profile.display_name)

    for entry in entries:
        completed = entry.completed_count
        lifetime_completed += completed
        row.total_days_tracked += 1
        if entry.is_perfect:
            row.perfect_day_count += 1
        if entry.date in window_keys:
            row.window_completed_count += completed

    if row.total_days_tracked:
        row.average_per_day = round(lifetime_completed / row.total_days_tracked, 2)
    return row


def rank_rows(rows: List[LeaderboardRow]) -> List[LeaderboardRow]:
    """Сортировка: выполнено за окно, затем идеальные дни"""
    rows.sort(key=lambda r: (-r.window_completed_count, -r.perfect_day_count, r.user_id))
    for position, row in enumerate(rows, start=1):
        row.rank = position
    return rows


class LeaderboardService:
    """
    Рейтинг пользователей за окно дат

    Полный перебор: все пользователи и все их записи на каждый запрос.
    """

    def __init__(self, entries: EntryService, routines: RoutineService):
        self.entries = entries
        self.routines = routines
        logger.info("✅ LeaderboardService инициализирован")

    async def load_leaderboard(self, user_id: str, window: LeaderboardWindow, today: str) -> List[LeaderboardRow]:
        window = LeaderboardWindow(window)
        window_keys = set(window_dates(today, window.days))

        rows = []
        profiles = await self.routines.list_profiles()
        for profile in profiles:
            entries = await self.entries.list_all_entries(profile.user_id)
            if not entries:
                continue
            row = build_row(profile, entries, window_keys)
            row.is_current_user = profile.user_id == user_id
            rows.append(row)

        rank_rows(rows)
        logger.info(f"🏆 Рейтинг ({window.value}, {today}): пользователей {len(rows)}, "
                    f"просмотрено профилей {len(profiles)}")
        return rows
