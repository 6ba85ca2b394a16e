from supabase import Client
from app.core.clock import utc_now_iso
from app.modules.groups.schemas import GroupResponse
from app.modules.groups.service import GroupService
from app.modules.likes.schemas import LikeResult
from app.modules.matches.service import MatchService
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

LIKES_TABLE = "likes"


class LikeService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.matches = MatchService(supabase)

    def like_group(self, from_group_id: str, to_group_id: str) -> LikeResult:
        """Record a like; when the other group already liked back, create the match and its chat room"""
        try:
            self.supabase.table(LIKES_TABLE).insert({
                "from_group_id": from_group_id,
                "to_group_id": to_group_id,
                "created_at": utc_now_iso(),
            }).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if self.matches.check_if_match(from_group_id, to_group_id):
            # group that liked first goes first
            match_id = self.matches.create_match(to_group_id, from_group_id)
            return LikeResult(liked=True, matched=True, match_id=match_id)

        return LikeResult(liked=True, matched=False)

    def has_liked_group(self, from_group_id: str, to_group_id: str) -> bool:
        try:
            result = self.supabase.table(LIKES_TABLE)\
                .select("id")\
                .eq("from_group_id", from_group_id)\
                .eq("to_group_id", to_group_id)\
                .limit(1)\
                .execute()
            return bool(result.data)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_liked_groups(self, group_id: str) -> List[str]:
        """Ids of groups this group has liked"""
        try:
            result = self.supabase.table(LIKES_TABLE)\
                .select("to_group_id")\
                .eq("from_group_id", group_id)\
                .execute()
            return [row["to_group_id"] for row in result.data]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_groups_who_liked(self, group_id: str) -> List[str]:
        """Ids of groups that liked this group"""
        try:
            result = self.supabase.table(LIKES_TABLE)\
                .select("from_group_id")\
                .eq("to_group_id", group_id)\
                .execute()
            return [row["from_group_id"] for row in result.data]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_pending_admirers(self, group_id: str) -> List[GroupResponse]:
        """Groups that liked this group and are not matched with it yet"""
        groups = GroupService(self.supabase)
        admirers = []
        for liker_id in dict.fromkeys(self.get_groups_who_liked(group_id)):
            if self.matches.are_groups_matched(group_id, liker_id):
                continue
            group = groups.get_group(liker_id)
            if group is not None:
                admirers.append(group)
        return admirers

    def get_browse_candidates(self, selected_group_id: str, user_id: str) -> List[GroupResponse]:
        """
        Active groups the selected group can still like. Excludes the group itself,
        groups it already liked or matched, and groups the user created or belongs to.
        """
        liked = set(self.get_liked_groups(selected_group_id))
        candidates = []
        for group in GroupService(self.supabase).get_all_groups():
            if group.id == selected_group_id or group.id in liked:
                continue
            if group.created_by == user_id or group.has_member(user_id):
                continue
            if self.matches.are_groups_matched(selected_group_id, group.id):
                continue
            candidates.append(group)
        logger.debug(f"{len(candidates)} browse candidates for group {selected_group_id}")
        return candidates
