from fastapi import APIRouter, HTTPException, Depends, Query, status
from typing import Optional
import logging

from dashboard.dependencies import (
    checked_date,
    get_current_user_id,
    get_entry_service,
    get_rollover_engine,
    get_today,
)
from services import EntryService, RolloverEngine
from shared.models import EntryOut, HistoryOut, RolloverOut, TaskChangeOut, TaskOut, TitleIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/entries", tags=["entries"])


# ===== ПЕРЕНОС И ПЛАНИРОВАНИЕ =====

@router.post("/today", response_model=EntryOut)
async def ensure_today(
    user_id: str = Depends(get_current_user_id),
    today: str = Depends(get_today),
    engine: RolloverEngine = Depends(get_rollover_engine),
):
    """Открыть сегодняшний день: перенос задач со вчера и рутины"""
    entry = await engine.ensure_today(user_id, today)
    return EntryOut.from_entry(entry)


@router.post("/rollover", response_model=RolloverOut)
async def manual_rollover(
    user_id: str = Depends(get_current_user_id),
    today: str = Depends(get_today),
    engine: RolloverEngine = Depends(get_rollover_engine),
):
    """Перенести невыполненные задачи на завтра прямо сейчас"""
    result = await engine.manual_rollover(user_id, today)
    return RolloverOut(
        rolled_count=result.rolled_count,
        rolled_titles=result.rolled_titles,
        today=EntryOut.from_entry(result.today, exists=result.today.timestamp is not None),
        tomorrow=EntryOut.from_entry(result.tomorrow) if result.tomorrow else None,
    )


@router.post("/{day}/plan", response_model=EntryOut)
async def plan_date(
    day: str,
    user_id: str = Depends(get_current_user_id),
    today: str = Depends(get_today),
    engine: RolloverEngine = Depends(get_rollover_engine),
):
    """Подготовить будущую дату с рутинами, без переноса"""
    entry = await engine.plan_date(user_id, checked_date(day), today)
    return EntryOut.from_entry(entry)


# ===== ЗАПИСИ =====

@router.get("", response_model=HistoryOut)
async def list_history(
    before: Optional[str] = Query(None, description="Только даты раньше этой"),
    limit: int = Query(30, ge=1, le=366),
    user_id: str = Depends(get_current_user_id),
    entries: EntryService = Depends(get_entry_service),
):
    """История дней, новые первыми"""
    if before is not None:
        before = checked_date(before)
    history = await entries.list_history(user_id, before=before, limit=limit)
    return HistoryOut(entries=[EntryOut.from_entry(e) for e in history], total=len(history))


@router.get("/{date}", response_model=EntryOut)
async def get_entry(
    date: str,
    user_id: str = Depends(get_current_user_id),
    entries: EntryService = Depends(get_entry_service),
):
    entry = await entries.get_entry(user_id, checked_date(date))
    if entry is None:
        raise HTTPException(status_code=404, detail="Запись не найдена")
    return EntryOut.from_entry(entry)


# ===== ЗАДАЧИ =====

@router.post("/{date}/tasks", response_model=TaskChangeOut, status_code=status.HTTP_201_CREATED)
async def add_task(
    date: str,
    body: TitleIn,
    user_id: str = Depends(get_current_user_id),
    entries: EntryService = Depends(get_entry_service),
):
    entry, task = await entries.add_task(user_id, checked_date(date), body.title)
    return TaskChangeOut(entry=EntryOut.from_entry(entry), task=TaskOut.from_task(task))


@router.post("/{date}/tasks/{task_id}/toggle", response_model=TaskChangeOut)
async def toggle_task(
    date: str,
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    entries: EntryService = Depends(get_entry_service),
):
    entry, task = await entries.toggle_task(user_id, checked_date(date), task_id)
    return TaskChangeOut(entry=EntryOut.from_entry(entry), task=TaskOut.from_task(task))


@router.delete("/{date}/tasks/{task_id}", response_model=EntryOut)
async def delete_task(
    date: str,
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    entries: EntryService = Depends(get_entry_service),
):
    entry = await entries.delete_task(user_id, checked_date(date), task_id)
    return EntryOut.from_entry(entry)
