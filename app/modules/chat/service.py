from supabase import Client
from app.core.clock import utc_now_iso
from app.modules.chat.schemas import ChatRoomResponse, MessageResponse
from app.modules.groups.service import GroupService
from datetime import datetime, timezone
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

CHAT_ROOMS_TABLE = "chat_rooms"
MESSAGES_TABLE = "messages"

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class ChatService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.groups = GroupService(supabase)

    def create_chat_room(self, match_id: str, group_id1: str, group_id2: str) -> str:
        """Create the chat room for a match, seeded with every member of both groups"""
        group1 = self.groups.get_group(group_id1)
        group2 = self.groups.get_group(group_id2)
        if group1 is None or group2 is None:
            raise HTTPException(status_code=404, detail="Groups not found")

        member_ids = [m.user_id for m in group1.members] + [m.user_id for m in group2.members]

        try:
            result = self.supabase.table(CHAT_ROOMS_TABLE).insert({
                "match_id": match_id,
                "group_id1": group_id1,
                "group_id2": group_id2,
                "group1_name": group1.name,
                "group2_name": group2.name,
                "member_ids": member_ids,
                "created_at": utc_now_iso(),
            }).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create chat room")
        return result.data[0]["id"]

    def get_chat_room(self, chat_room_id: str) -> Optional[ChatRoomResponse]:
        try:
            result = self.supabase.table(CHAT_ROOMS_TABLE)\
                .select("*")\
                .eq("id", chat_room_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result or not result.data:
            return None
        return ChatRoomResponse(**result.data)

    def get_chat_room_or_404(self, chat_room_id: str) -> ChatRoomResponse:
        room = self.get_chat_room(chat_room_id)
        if room is None:
            raise HTTPException(status_code=404, detail="Chat room not found")
        return room

    def get_chat_room_by_match_id(self, match_id: str) -> Optional[ChatRoomResponse]:
        try:
            result = self.supabase.table(CHAT_ROOMS_TABLE)\
                .select("*")\
                .eq("match_id", match_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            return None
        return ChatRoomResponse(**result.data[0])

    def get_user_chat_rooms(self, user_id: str) -> List[ChatRoomResponse]:
        """Rooms whose member list contains the user, most recently active first"""
        try:
            result = self.supabase.table(CHAT_ROOMS_TABLE)\
                .select("*")\
                .contains("member_ids", [user_id])\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        rooms = [ChatRoomResponse(**room) for room in result.data]
        rooms.sort(key=lambda r: r.last_message_at or r.created_at or _EPOCH, reverse=True)
        return rooms

    def send_message(self, chat_room_id: str, sender_id: str, sender_name: str, message: str) -> str:
        """Store a message and bump the room's last-message preview"""
        text = message.strip()
        if not text:
            raise HTTPException(status_code=400, detail="Message cannot be empty")

        try:
            now = utc_now_iso()
            result = self.supabase.table(MESSAGES_TABLE).insert({
                "chat_room_id": chat_room_id,
                "sender_id": sender_id,
                "sender_name": sender_name,
                "message": text,
                "created_at": now,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to send message")

            self.supabase.table(CHAT_ROOMS_TABLE)\
                .update({"last_message_at": now, "last_message": text})\
                .eq("id", chat_room_id)\
                .execute()

            return result.data[0]["id"]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_chat_messages(self, chat_room_id: str, limit: int = 50) -> List[MessageResponse]:
        """Newest `limit` messages, returned oldest first"""
        try:
            result = self.supabase.table(MESSAGES_TABLE)\
                .select("*")\
                .eq("chat_room_id", chat_room_id)\
                .order("created_at", desc=True)\
                .limit(limit)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        messages = [MessageResponse(**m) for m in result.data]
        messages.reverse()
        return messages
