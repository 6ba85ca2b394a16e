from concurrent.futures import ThreadPoolExecutor
from supabase import Client
from app.modules.groups.schemas import GroupResponse
from app.modules.groups.service import GroupService, GROUPS_TABLE, clean_member_data
from app.core.clock import utc_now_iso
from typing import Callable, Dict, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

MemberRewrite = Callable[[Dict[str, str]], Dict[str, str]]


class ProfileService:
    def __init__(self, supabase: Client, max_workers: int = 8):
        self.supabase = supabase
        self.max_workers = max_workers

    def _rewrite_memberships(self, user_id: str, rewrite: MemberRewrite) -> int:
        """Apply `rewrite` to the user's member row in every active group that has one; returns groups written"""
        groups = GroupService(self.supabase).get_all_groups()

        def update_group(group: GroupResponse) -> bool:
            members = [m.model_dump() for m in group.members]
            index = next((i for i, m in enumerate(members) if m["user_id"] == user_id), None)
            if index is None:
                return False
            updated = [
                rewrite(m) if i == index else clean_member_data(m)
                for i, m in enumerate(members)
            ]
            self.supabase.table(GROUPS_TABLE)\
                .update({"members": updated, "updated_at": utc_now_iso()})\
                .eq("id", group.id)\
                .execute()
            return True

        try:
            with ThreadPoolExecutor(max_workers=max(1, self.max_workers)) as pool:
                written = sum(pool.map(update_group, groups))
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        logger.info(f"Profile of {user_id} synced to {written} of {len(groups)} active groups")
        return written

    def sync_user_profile_to_groups(self, user_id: str, display_name: str, photo_url: Optional[str]) -> int:
        """Set name and photo everywhere the user is a member; an empty photo removes it"""
        def rewrite(member: Dict[str, str]) -> Dict[str, str]:
            updated = {"user_id": member["user_id"], "name": display_name}
            if member.get("bio"):
                updated["bio"] = member["bio"]
            if photo_url:
                updated["photo_url"] = photo_url
            return updated

        return self._rewrite_memberships(user_id, rewrite)

    def update_member_photo_in_groups(
        self,
        user_id: str,
        new_photo_url: Optional[str],
        new_display_name: Optional[str] = None
    ) -> int:
        """Replace the photo (and optionally the name); missing values keep what is stored"""
        def rewrite(member: Dict[str, str]) -> Dict[str, str]:
            updated = {"user_id": member["user_id"], "name": new_display_name or member.get("name") or ""}
            if member.get("bio"):
                updated["bio"] = member["bio"]
            photo = new_photo_url or member.get("photo_url")
            if photo:
                updated["photo_url"] = photo
            return updated

        return self._rewrite_memberships(user_id, rewrite)
