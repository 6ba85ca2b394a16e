from fastapi import APIRouter, Depends, HTTPException, Query
from app.config import settings
from app.database.supabase_client import get_supabase
from app.modules.auth.service import user_display_name
from app.modules.chat.schemas import (
    ChatRoomResponse, MessageCreate, MessageResponse, MessageCreatedResponse
)
from app.modules.chat.service import ChatService
from app.core.dependencies import get_current_user_id, check_chat_member
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/chat", tags=["chat"])


def get_chat_service(supabase: Client = Depends(get_supabase)) -> ChatService:
    return ChatService(supabase)


@router.get("/rooms", response_model=List[ChatRoomResponse])
async def list_my_rooms(
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    """Chat rooms the caller is part of"""
    return service.get_user_chat_rooms(user_data["id"])


@router.get("/rooms/by-match/{match_id}", response_model=ChatRoomResponse)
async def get_room_by_match(
    match_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    """Chat room of a match"""
    room = service.get_chat_room_by_match_id(match_id)
    if room is None:
        raise HTTPException(status_code=404, detail="Chat room not found")
    check_chat_member(room, user_data)
    return room


@router.get("/rooms/{chat_room_id}", response_model=ChatRoomResponse)
async def get_room(
    chat_room_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    room = service.get_chat_room_or_404(chat_room_id)
    check_chat_member(room, user_data)
    return room


@router.get("/rooms/{chat_room_id}/messages", response_model=List[MessageResponse])
async def list_messages(
    chat_room_id: str,
    limit: Optional[int] = Query(None, ge=1, le=500),
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    """Latest messages, oldest first"""
    room = service.get_chat_room_or_404(chat_room_id)
    check_chat_member(room, user_data)
    return service.get_chat_messages(chat_room_id, limit or settings.chat_message_limit)


@router.post("/rooms/{chat_room_id}/messages", response_model=MessageCreatedResponse, status_code=201)
async def send_message(
    chat_room_id: str,
    message_data: MessageCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    """Send a message as the caller"""
    room = service.get_chat_room_or_404(chat_room_id)
    check_chat_member(room, user_data)
    message_id = service.send_message(
        chat_room_id, user_data["id"], user_display_name(user_data), message_data.message
    )
    return MessageCreatedResponse(id=message_id)
