#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyNine - Models Package
Модели данных дневного списка задач

Версия: 1.0.0
"""

from .enums import (
    RoutineType,
    LeaderboardWindow
)

from .task import (
    TaskRecord,
    new_task_id
)

from .entry import (
    DAILY_GOAL,
    DailyEntry,
    validate_date_key
)

from .user import (
    RoutineRegistry,
    UserProfile
)

from .leaderboard import LeaderboardRow

__all__ = [
    # Enums
    'RoutineType',
    'LeaderboardWindow',

    # Task models
    'TaskRecord',
    'new_task_id',

    # Entry models
    'DAILY_GOAL',
    'DailyEntry',
    'validate_date_key',

    # User models
    'RoutineRegistry',
    'UserProfile',

    # Leaderboard
    'LeaderboardRow'
]
