from fastapi import APIRouter, Depends, status
import logging

from dashboard.dependencies import get_current_user_id, get_routine_service
from services import RoutineService
from shared.models import DisplayNameIn, RoutineName, RoutinesOut, TitleIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/routines", tags=["routines"])


@router.get("", response_model=RoutinesOut)
async def get_routines(
    user_id: str = Depends(get_current_user_id),
    routines: RoutineService = Depends(get_routine_service),
):
    """Утренняя и вечерняя рутины пользователя"""
    profile = await routines.get_profile(user_id)
    return RoutinesOut.from_profile(profile)


@router.put("/display-name", response_model=RoutinesOut)
async def set_display_name(
    body: DisplayNameIn,
    user_id: str = Depends(get_current_user_id),
    routines: RoutineService = Depends(get_routine_service),
):
    profile = await routines.set_display_name(user_id, body.display_name)
    return RoutinesOut.from_profile(profile)


@router.post("/{routine}", response_model=RoutinesOut, status_code=status.HTTP_201_CREATED)
async def add_routine(
    routine: RoutineName,
    body: TitleIn,
    user_id: str = Depends(get_current_user_id),
    routines: RoutineService = Depends(get_routine_service),
):
    registry = await routines.add_routine(user_id, routine.routine_type, body.title)
    return RoutinesOut.from_registry(user_id, registry)


@router.put("/{routine}/{index}", response_model=RoutinesOut)
async def update_routine(
    routine: RoutineName,
    index: int,
    body: TitleIn,
    user_id: str = Depends(get_current_user_id),
    routines: RoutineService = Depends(get_routine_service),
):
    registry = await routines.update_routine(user_id, routine.routine_type, index, body.title)
    return RoutinesOut.from_registry(user_id, registry)


@router.delete("/{routine}/{index}", response_model=RoutinesOut)
async def remove_routine(
    routine: RoutineName,
    index: int,
    user_id: str = Depends(get_current_user_id),
    routines: RoutineService = Depends(get_routine_service),
):
    """Удалить элемент рутины; уже добавленные задачи не меняются"""
    registry = await routines.remove_routine(user_id, routine.routine_type, index)
    return RoutinesOut.from_registry(user_id, registry)
