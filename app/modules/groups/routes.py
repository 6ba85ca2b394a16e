from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from pydantic import BaseModel
from app.database.supabase_client import get_supabase
from app.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupCreatedResponse, GroupMemberAdd
)
from app.modules.groups.service import GroupService
from app.modules.join_requests.service import JoinRequestService
from app.modules.photos.service import PhotoService
from app.core.dependencies import (
    get_current_user_id, check_group_creator, to_creator_profile, get_photo_service
)
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/groups", tags=["groups"])


class JoinLinkResponse(BaseModel):
    group: GroupResponse
    is_member: bool
    has_pending_request: bool


def get_group_service(supabase: Client = Depends(get_supabase)) -> GroupService:
    return GroupService(supabase)


@router.post("", response_model=GroupCreatedResponse, status_code=201)
async def create_group(
    group_data: GroupCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service)
):
    """Create a new group with the caller as creator and first member"""
    group_id = service.create_group(to_creator_profile(user_data), group_data)
    return GroupCreatedResponse(id=group_id)


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    user_data: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service)
):
    """List all active groups"""
    return service.get_all_groups()


@router.get("/mine", response_model=List[GroupResponse])
async def list_my_groups(
    repair: bool = False,
    user_data: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service)
):
    """Groups the caller created or belongs to. repair=true first re-adds the caller to groups they created."""
    groups = service.get_my_groups(user_data["id"])
    if repair and service.ensure_creator_in_all_groups(groups, to_creator_profile(user_data)):
        groups = service.get_my_groups(user_data["id"])
    return groups


@router.get("/join/{group_id}", response_model=JoinLinkResponse)
async def resolve_join_link(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    """Resolve a shared join link"""
    group = service.get_group_or_404(group_id)
    if not group.is_active:
        raise HTTPException(status_code=404, detail="Group not found")
    return JoinLinkResponse(
        group=group,
        is_member=group.has_member(user_data["id"]),
        has_pending_request=JoinRequestService(supabase).has_pending_request(group_id, user_data["id"]),
    )


@router.post("/join/{group_id}", response_model=GroupResponse)
async def join_via_link(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service)
):
    """Join a group directly from a shared link"""
    group = service.get_group_or_404(group_id)
    if not group.is_active:
        raise HTTPException(status_code=404, detail="Group not found")
    profile = to_creator_profile(user_data)
    service.add_member_to_group(group_id, GroupMemberAdd(
        user_id=profile.user_id,
        name=profile.display_name or "New Member",
        photo_url=profile.photo_url,
    ))
    return service.get_group_or_404(group_id)


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service)
):
    """Get group by ID"""
    return service.get_group_or_404(group_id)


@router.put("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: str,
    group_data: GroupUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    """Update group (creator only)"""
    check_group_creator(group_id, current_user, supabase)
    return service.update_group(group_id, group_data)


@router.delete("/{group_id}", status_code=204)
async def deactivate_group(
    group_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    """Deactivate group (creator only). Groups are soft-deleted."""
    check_group_creator(group_id, current_user, supabase)
    service.deactivate_group(group_id)
    return None


@router.post("/{group_id}/members", status_code=201)
async def add_member(
    group_id: str,
    member_data: GroupMemberAdd,
    current_user: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    """Add a member to the group (creator only)"""
    check_group_creator(group_id, current_user, supabase)
    service.add_member_to_group(group_id, member_data)
    return {"message": "Member added", "group_id": group_id, "user_id": member_data.user_id}


@router.delete("/{group_id}/members/{user_id}", status_code=204)
async def remove_member(
    group_id: str,
    user_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    """Remove a member (creator, or the member leaving on their own)"""
    group = service.get_group_or_404(group_id)
    if current_user["id"] != user_id:
        check_group_creator(group_id, current_user, supabase)
    if user_id == group.created_by:
        raise HTTPException(status_code=400, detail="The group creator cannot be removed")
    if not service.remove_member_from_group(group_id, user_id):
        raise HTTPException(status_code=404, detail="Member not found")
    return None


@router.post("/{group_id}/ensure-creator", response_model=GroupResponse)
async def ensure_creator(
    group_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    """Re-add the creator to the member list, refreshing their name and photo"""
    check_group_creator(group_id, current_user, supabase)
    service.ensure_creator_in_group_members(group_id, to_creator_profile(current_user))
    return service.get_group_or_404(group_id)


@router.post("/{group_id}/photo", response_model=GroupResponse)
async def upload_group_photo(
    group_id: str,
    file: UploadFile = File(...),
    current_user: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service),
    photos: PhotoService = Depends(get_photo_service),
    supabase: Client = Depends(get_supabase)
):
    """Upload a new group photo (creator only)"""
    check_group_creator(group_id, current_user, supabase)
    content = await file.read()
    url = photos.upload_group_photo(content, group_id, content_type=file.content_type)
    return service.update_group(group_id, GroupUpdate(photo_url=url))
