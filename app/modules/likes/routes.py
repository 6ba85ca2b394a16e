from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.groups.schemas import GroupResponse
from app.modules.groups.service import GroupService
from app.modules.likes.schemas import LikeCreate, LikeResult
from app.modules.likes.service import LikeService
from app.core.dependencies import get_current_user_id, check_group_member
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/likes", tags=["likes"])


def get_like_service(supabase: Client = Depends(get_supabase)) -> LikeService:
    return LikeService(supabase)


@router.post("", response_model=LikeResult, status_code=201)
async def like_group(
    like_data: LikeCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: LikeService = Depends(get_like_service),
    supabase: Client = Depends(get_supabase)
):
    """Like another group on behalf of one of the caller's groups"""
    check_group_member(like_data.from_group_id, user_data, supabase)
    GroupService(supabase).get_group_or_404(like_data.to_group_id)
    return service.like_group(like_data.from_group_id, like_data.to_group_id)


@router.get("/{group_id}/outgoing", response_model=List[str])
async def list_liked_groups(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: LikeService = Depends(get_like_service),
    supabase: Client = Depends(get_supabase)
):
    """Ids of groups this group has liked"""
    check_group_member(group_id, user_data, supabase)
    return service.get_liked_groups(group_id)


@router.get("/{group_id}/incoming", response_model=List[str])
async def list_groups_who_liked(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: LikeService = Depends(get_like_service),
    supabase: Client = Depends(get_supabase)
):
    """Ids of groups that liked this group"""
    check_group_member(group_id, user_data, supabase)
    return service.get_groups_who_liked(group_id)


@router.get("/{group_id}/admirers", response_model=List[GroupResponse])
async def list_admirers(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: LikeService = Depends(get_like_service),
    supabase: Client = Depends(get_supabase)
):
    """Groups that liked this group and are waiting for a like back"""
    check_group_member(group_id, user_data, supabase)
    return service.get_pending_admirers(group_id)


@router.get("/{group_id}/candidates", response_model=List[GroupResponse])
async def list_candidates(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: LikeService = Depends(get_like_service),
    supabase: Client = Depends(get_supabase)
):
    """Groups this group can still browse and like"""
    check_group_member(group_id, user_data, supabase)
    return service.get_browse_candidates(group_id, user_data["id"])
