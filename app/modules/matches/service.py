from supabase import Client
from app.core.clock import utc_now_iso
from app.modules.chat.service import ChatService, CHAT_ROOMS_TABLE
from app.modules.groups.service import GroupService
from app.modules.matches.schemas import MatchResponse, MatchDetailResponse
from typing import Dict, List, Optional
from datetime import datetime, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

MATCHES_TABLE = "matches"


class MatchService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def check_if_match(self, group_id1: str, group_id2: str) -> bool:
        """True when group_id2 has already liked group_id1"""
        from app.modules.likes.service import LIKES_TABLE

        try:
            result = self.supabase.table(LIKES_TABLE)\
                .select("id")\
                .eq("from_group_id", group_id2)\
                .eq("to_group_id", group_id1)\
                .limit(1)\
                .execute()
            return bool(result.data)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_match(self, group_id1: str, group_id2: str) -> str:
        """Record a match and provision its chat room. A chat room failure does not undo the match."""
        try:
            result = self.supabase.table(MATCHES_TABLE).insert({
                "group_id1": group_id1,
                "group_id2": group_id2,
                "matched_at": utc_now_iso(),
            }).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create match")
        match_id = result.data[0]["id"]
        logger.info(f"Match {match_id} created between {group_id1} and {group_id2}")

        try:
            chat_room_id = ChatService(self.supabase).create_chat_room(match_id, group_id1, group_id2)
            logger.info(f"Chat room created: {chat_room_id} for match: {match_id}")
        except Exception:
            # The match stands without a room; nothing retries this
            logger.exception(f"Error creating chat room for match {match_id}")

        return match_id

    def _matches_where(self, column: str, group_id: str) -> List[dict]:
        result = self.supabase.table(MATCHES_TABLE)\
            .select("*")\
            .eq(column, group_id)\
            .execute()
        return result.data or []

    def get_group_matches(self, group_id: str) -> List[MatchResponse]:
        """Matches where the group is on either side, newest first"""
        try:
            rows: Dict[str, dict] = {}
            for row in self._matches_where("group_id1", group_id) + self._matches_where("group_id2", group_id):
                rows.setdefault(row["id"], row)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        matches = [MatchResponse(**row) for row in rows.values()]
        matches.sort(key=lambda m: m.matched_at, reverse=True)
        return matches

    def are_groups_matched(self, group_id1: str, group_id2: str) -> bool:
        """True when a match exists for the pair in either orientation"""
        try:
            for first, second in ((group_id1, group_id2), (group_id2, group_id1)):
                result = self.supabase.table(MATCHES_TABLE)\
                    .select("id")\
                    .eq("group_id1", first)\
                    .eq("group_id2", second)\
                    .limit(1)\
                    .execute()
                if result.data:
                    return True
            return False
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_match_details(self, group_id: str) -> List[MatchDetailResponse]:
        """Matches of a group with the other group and chat room resolved; matches whose other group is gone are dropped"""
        groups = GroupService(self.supabase)
        chat = ChatService(self.supabase)
        details = []
        for match in self.get_group_matches(group_id):
            other = groups.get_group(match.other_group_id(group_id))
            if other is None:
                continue
            room = chat.get_chat_room_by_match_id(match.id)
            details.append(MatchDetailResponse(
                id=match.id,
                matched_at=match.matched_at,
                your_group_id=group_id,
                matched_group=other.model_dump(mode="json"),
                chat_room_id=room.id if room else None,
            ))
        return details

    def get_matches_since(self, group_ids: List[str], since: Optional[datetime] = None) -> List[MatchResponse]:
        """New matches involving any of the given groups (match notifications)"""
        if since is not None and since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)
        found: Dict[str, MatchResponse] = {}
        for group_id in group_ids:
            for match in self.get_group_matches(group_id):
                if since is None or match.matched_at > since:
                    found.setdefault(match.id, match)
        return sorted(found.values(), key=lambda m: m.matched_at, reverse=True)

    def find_matches_without_chat_room(self) -> List[MatchResponse]:
        """Matches whose chat room was never created (chat provisioning failed after the match write)"""
        try:
            matches = self.supabase.table(MATCHES_TABLE).select("*").execute().data or []
            rooms = self.supabase.table(CHAT_ROOMS_TABLE).select("match_id").execute().data or []
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        with_room = {r["match_id"] for r in rooms}
        return [MatchResponse(**m) for m in matches if m["id"] not in with_room]
