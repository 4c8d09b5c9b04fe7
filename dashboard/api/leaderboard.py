from fastapi import APIRouter, Depends, Query
import logging

from dashboard.dependencies import get_current_user_id, get_leaderboard_service, get_today
from models import LeaderboardWindow
from services import LeaderboardService
from shared.models import LeaderboardOut, LeaderboardRowOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


@router.get("", response_model=LeaderboardOut)
async def get_leaderboard(
    window: LeaderboardWindow = Query(LeaderboardWindow.TODAY),
    user_id: str = Depends(get_current_user_id),
    today: str = Depends(get_today),
    leaderboard: LeaderboardService = Depends(get_leaderboard_service),
):
    """Рейтинг: выполнено за окно, при равенстве больше идеальных дней"""
    rows = await leaderboard.load_leaderboard(user_id, window, today)
    return LeaderboardOut(
        window=window.value,
        date=today,
        rows=[LeaderboardRowOut.from_row(row) for row in rows],
    )
