from datetime import date, datetime, timedelta, timezone
from typing import List

import pytz


def now_local(tz_name: str = "UTC") -> datetime:
    return datetime.now(pytz.timezone(tz_name))


def today_str(tz_name: str = "UTC") -> str:
    """Календарный день пользователя в формате YYYY-MM-DD"""
    return now_local(tz_name).strftime("%Y-%m-%d")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_date(date_str: str) -> date:
    return datetime.strptime(date_str, "%Y-%m-%d").date()


def add_days(date_str: str, days: int) -> str:
    return (parse_date(date_str) + timedelta(days=days)).isoformat()


def window_dates(end_date: str, days: int) -> List[str]:
    """Даты окна из days дней, заканчивающегося end_date включительно"""
    end = parse_date(end_date)
    return [(end - timedelta(days=offset)).isoformat() for offset in range(days - 1, -1, -1)]
