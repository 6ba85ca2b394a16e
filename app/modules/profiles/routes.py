from fastapi import APIRouter, Depends, UploadFile, File
from app.config import settings
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService, user_display_name
from app.modules.photos.service import PhotoService
from app.modules.profiles.schemas import ProfileUpdate, ProfileSyncResponse
from app.modules.profiles.service import ProfileService
from app.core.dependencies import get_current_user_id, get_auth_service, get_photo_service
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/profile", tags=["profile"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase, max_workers=settings.profile_sync_workers)


@router.put("", response_model=ProfileSyncResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    user_data: Dict = Depends(get_current_user_id),
    auth_service: AuthService = Depends(get_auth_service),
    service: ProfileService = Depends(get_profile_service)
):
    """Update display name and photo, then copy them into every group membership"""
    user_id = user_data["id"]
    auth_service.update_profile(user_id, profile_data.display_name, profile_data.photo_url)
    updated = service.sync_user_profile_to_groups(user_id, profile_data.display_name, profile_data.photo_url)
    return ProfileSyncResponse(
        user_id=user_id,
        display_name=profile_data.display_name,
        photo_url=profile_data.photo_url or None,
        groups_updated=updated,
    )


@router.post("/photo", response_model=ProfileSyncResponse)
async def upload_profile_photo(
    file: UploadFile = File(...),
    user_data: Dict = Depends(get_current_user_id),
    auth_service: AuthService = Depends(get_auth_service),
    photos: PhotoService = Depends(get_photo_service),
    service: ProfileService = Depends(get_profile_service)
):
    """Upload a member photo and use it everywhere the caller is a member"""
    user_id = user_data["id"]
    display_name = user_display_name(user_data)
    content = await file.read()
    url = photos.upload_member_photo(content, user_id, content_type=file.content_type)
    auth_service.update_avatar(user_id, url)
    updated = service.update_member_photo_in_groups(user_id, url)
    return ProfileSyncResponse(user_id=user_id, display_name=display_name, photo_url=url, groups_updated=updated)
