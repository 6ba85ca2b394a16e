"""
Core dependencies for route protection and access checking
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config import settings
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService, user_display_name, user_photo_url
from app.modules.chat.schemas import ChatRoomResponse
from app.modules.groups.schemas import CreatorProfile, GroupResponse
from app.modules.groups.service import GroupService
from app.modules.photos.service import PhotoService, build_photo_storage
from supabase import Client
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    token = credentials.credentials
    return auth_service.get_current_user(token)


def to_creator_profile(user_data: Dict[str, Any]) -> CreatorProfile:
    """Identity-provider view of the caller, as copied into member records"""
    return CreatorProfile(
        user_id=user_data["id"],
        display_name=user_display_name(user_data),
        email=user_data.get("email"),
        photo_url=user_photo_url(user_data),
    )


def check_group_creator(group_id: str, user_data: dict, supabase: Client) -> GroupResponse:
    """Only the creator may manage a group (edit, deactivate, members, join requests)"""
    group = GroupService(supabase).get_group_or_404(group_id)
    if group.created_by != user_data["id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the group creator can perform this action"
        )
    return group


def check_group_member(group_id: str, user_data: dict, supabase: Client) -> GroupResponse:
    """Allow the creator or anyone in the group's member list"""
    group = GroupService(supabase).get_group_or_404(group_id)
    user_id = user_data["id"]
    if group.created_by == user_id or group.has_member(user_id):
        return group
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You must be a member of this group"
    )


def check_chat_member(chat_room: ChatRoomResponse, user_data: dict) -> None:
    if user_data["id"] not in chat_room.member_ids:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not a member of this chat room"
        )


def get_photo_service(request: Request, supabase: Client = Depends(get_supabase)) -> PhotoService:
    """Storage backend is built on first use and kept on app.state"""
    storage = getattr(request.app.state, "photo_storage", None)
    if storage is None:
        try:
            storage = build_photo_storage(settings, supabase)
        except ValueError as e:
            logger.error(f"Photo storage unavailable: {e}")
            raise HTTPException(status_code=503, detail="Photo storage is not configured")
        request.app.state.photo_storage = storage
    return PhotoService(storage)
