from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.groups.service import GroupService
from app.modules.matches.schemas import MatchResponse, MatchDetailResponse
from app.modules.matches.service import MatchService
from app.core.dependencies import get_current_user_id, check_group_member
from supabase import Client
from typing import List, Dict, Optional
from datetime import datetime

router = APIRouter(prefix="/matches", tags=["matches"])


def get_match_service(supabase: Client = Depends(get_supabase)) -> MatchService:
    return MatchService(supabase)


@router.get("", response_model=List[MatchResponse])
async def list_my_matches(
    since: Optional[datetime] = None,
    user_data: Dict = Depends(get_current_user_id),
    service: MatchService = Depends(get_match_service),
    supabase: Client = Depends(get_supabase)
):
    """Matches of any group the caller created or belongs to; poll with since= for new ones"""
    group_ids = [g.id for g in GroupService(supabase).get_my_groups(user_data["id"])]
    return service.get_matches_since(group_ids, since)


@router.get("/group/{group_id}", response_model=List[MatchDetailResponse])
async def list_group_matches(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: MatchService = Depends(get_match_service),
    supabase: Client = Depends(get_supabase)
):
    """Matches of one group with the other group and chat room resolved"""
    check_group_member(group_id, user_data, supabase)
    return service.get_match_details(group_id)
