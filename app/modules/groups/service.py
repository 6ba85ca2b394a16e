from supabase import Client
from app.core.clock import utc_now_iso
from app.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupMember, GroupMemberAdd, CreatorProfile
)
from typing import Any, Dict, Iterable, List, Optional, Union
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

GROUPS_TABLE = "groups"

MemberLike = Union[GroupMember, GroupMemberAdd, Dict[str, Any]]


def clean_member_data(member: MemberLike) -> Dict[str, str]:
    """Member record with empty optional fields dropped, as stored in groups.members."""
    if not isinstance(member, dict):
        member = member.model_dump()
    clean = {
        "user_id": member["user_id"],
        "name": member.get("name") or "",
    }
    if member.get("bio"):
        clean["bio"] = member["bio"]
    if member.get("photo_url"):
        clean["photo_url"] = member["photo_url"]
    return clean


def creator_display_name(creator: CreatorProfile) -> str:
    if creator.display_name:
        return creator.display_name
    if creator.email:
        return creator.email.split("@")[0]
    return "User"


class GroupService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _fetch_group_row(self, group_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table(GROUPS_TABLE)\
            .select("*")\
            .eq("id", group_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            return None
        return result.data

    def _write_members(self, group_id: str, members: List[Dict[str, str]]) -> None:
        self.supabase.table(GROUPS_TABLE)\
            .update({"members": members, "updated_at": utc_now_iso()})\
            .eq("id", group_id)\
            .execute()

    def create_group(self, creator: CreatorProfile, group_data: GroupCreate) -> str:
        """Create a new group with the creator as first member"""
        try:
            user_id = creator.user_id
            creator_member = {"user_id": user_id, "name": creator_display_name(creator)}
            if creator.photo_url:
                creator_member["photo_url"] = creator.photo_url
            members = [creator_member]
            seen = {user_id}
            for member in group_data.members:
                if member.user_id in seen:
                    continue
                seen.add(member.user_id)
                members.append(clean_member_data(member))

            now = utc_now_iso()
            row = {
                "name": group_data.name,
                "bio": group_data.bio,
                "members": members,
                "created_by": user_id,
                "is_active": True,
                "created_at": now,
                "updated_at": now,
            }
            if group_data.photo_url:
                row["photo_url"] = group_data.photo_url

            result = self.supabase.table(GROUPS_TABLE).insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create group")

            group_id = result.data[0]["id"]
            logger.info(f"Group {group_id} created by {user_id}")
            return group_id
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_group(self, group_id: str) -> Optional[GroupResponse]:
        """Get a group by ID, or None when it does not exist"""
        try:
            row = self._fetch_group_row(group_id)
            return GroupResponse(**row) if row else None
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_group_or_404(self, group_id: str) -> GroupResponse:
        group = self.get_group(group_id)
        if group is None:
            raise HTTPException(status_code=404, detail="Group not found")
        return group

    def get_all_groups(self) -> List[GroupResponse]:
        """All active groups (browse)"""
        try:
            result = self.supabase.table(GROUPS_TABLE)\
                .select("*")\
                .eq("is_active", True)\
                .execute()
            return [GroupResponse(**group) for group in result.data]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_user_groups(self, user_id: str) -> List[GroupResponse]:
        """Active groups created by the user"""
        try:
            result = self.supabase.table(GROUPS_TABLE)\
                .select("*")\
                .eq("created_by", user_id)\
                .eq("is_active", True)\
                .execute()
            return [GroupResponse(**group) for group in result.data]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_groups_by_member(self, user_id: str) -> List[GroupResponse]:
        # members is an embedded list, so this is a scan over every active group
        return [g for g in self.get_all_groups() if g.has_member(user_id)]

    def get_my_groups(self, user_id: str) -> List[GroupResponse]:
        """Groups the user created or belongs to, created ones first, without duplicates"""
        groups: Dict[str, GroupResponse] = {}
        for group in self.get_user_groups(user_id) + self.get_groups_by_member(user_id):
            groups.setdefault(group.id, group)
        return list(groups.values())

    def update_group(self, group_id: str, group_data: GroupUpdate) -> GroupResponse:
        """Update group profile fields"""
        try:
            update_data = {"updated_at": utc_now_iso()}
            if group_data.name:
                update_data["name"] = group_data.name
            if group_data.bio is not None:
                update_data["bio"] = group_data.bio
            if group_data.photo_url is not None:
                update_data["photo_url"] = group_data.photo_url or None

            result = self.supabase.table(GROUPS_TABLE)\
                .update(update_data)\
                .eq("id", group_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Group not found")

            return GroupResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def deactivate_group(self, group_id: str) -> None:
        """Soft delete: groups are never removed from the table"""
        try:
            result = self.supabase.table(GROUPS_TABLE)\
                .update({"is_active": False, "updated_at": utc_now_iso()})\
                .eq("id", group_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Group not found")
            logger.info(f"Group {group_id} deactivated")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def add_member_to_group(self, group_id: str, member: GroupMemberAdd) -> None:
        """Append a member; fails without writing when the user is already in the group"""
        try:
            row = self._fetch_group_row(group_id)
            if not row:
                raise HTTPException(status_code=404, detail="Group not found")

            members = row.get("members") or []
            if any(m.get("user_id") == member.user_id for m in members):
                raise HTTPException(status_code=400, detail="User is already a member of this group")

            updated = [clean_member_data(m) for m in members] + [clean_member_data(member)]
            self._write_members(group_id, updated)
            logger.info(f"User {member.user_id} added to group {group_id}")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def remove_member_from_group(self, group_id: str, user_id: str) -> bool:
        """Remove a member; returns False when the user was not a member"""
        try:
            row = self._fetch_group_row(group_id)
            if not row:
                raise HTTPException(status_code=404, detail="Group not found")

            members = row.get("members") or []
            remaining = [clean_member_data(m) for m in members if m.get("user_id") != user_id]
            if len(remaining) == len(members):
                return False

            self._write_members(group_id, remaining)
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def ensure_creator_in_group_members(self, group_id: str, creator: CreatorProfile) -> None:
        """Add the creator to the member list, or refresh their name/photo if already there"""
        try:
            row = self._fetch_group_row(group_id)
            if not row:
                return

            members = row.get("members") or []
            name = creator_display_name(creator)
            index = next(
                (i for i, m in enumerate(members) if m.get("user_id") == creator.user_id),
                None,
            )

            if index is None:
                creator_member = {"user_id": creator.user_id, "name": name}
                if creator.photo_url:
                    creator_member["photo_url"] = creator.photo_url
                updated = [clean_member_data(m) for m in members] + [creator_member]
                logger.info(f"Re-added creator {creator.user_id} to group {group_id}")
            else:
                updated = []
                for i, m in enumerate(members):
                    if i != index:
                        updated.append(clean_member_data(m))
                        continue
                    refreshed = {"user_id": creator.user_id, "name": name}
                    if m.get("bio"):
                        refreshed["bio"] = m["bio"]
                    if creator.photo_url:
                        refreshed["photo_url"] = creator.photo_url
                    updated.append(refreshed)

            self._write_members(group_id, updated)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def ensure_creator_in_all_groups(self, groups: Iterable[GroupResponse], creator: CreatorProfile) -> int:
        """Run the creator repair on every group in `groups` the creator owns. Returns how many were checked."""
        owned = [g for g in groups if g.created_by == creator.user_id]
        for group in owned:
            self.ensure_creator_in_group_members(group.id, creator)
        return len(owned)
