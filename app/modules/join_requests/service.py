from supabase import Client
from app.core.clock import utc_now_iso
from app.modules.groups.schemas import GroupMemberAdd
from app.modules.groups.service import GroupService
from app.modules.join_requests.schemas import JoinRequestResponse
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

JOIN_REQUESTS_TABLE = "join_requests"

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"


class JoinRequestService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_join_request(
        self,
        group_id: str,
        user_id: str,
        user_name: str,
        user_email: Optional[str] = None,
        user_photo_url: Optional[str] = None
    ) -> str:
        """File a pending request; empty optional fields are left out of the row"""
        try:
            now = utc_now_iso()
            row = {
                "group_id": group_id,
                "user_id": user_id,
                "user_name": user_name,
                "status": STATUS_PENDING,
                "created_at": now,
                "updated_at": now,
            }
            if user_email:
                row["user_email"] = user_email
            if user_photo_url:
                row["user_photo_url"] = user_photo_url

            result = self.supabase.table(JOIN_REQUESTS_TABLE).insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create join request")
            return result.data[0]["id"]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _list_requests(self, column: str, value: str, status: Optional[str]) -> List[JoinRequestResponse]:
        try:
            query = self.supabase.table(JOIN_REQUESTS_TABLE)\
                .select("*")\
                .eq(column, value)
            if status:
                query = query.eq("status", status)
            result = query.order("created_at", desc=True).execute()
            return [JoinRequestResponse(**r) for r in result.data]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_group_join_requests(self, group_id: str, status: Optional[str] = None) -> List[JoinRequestResponse]:
        """Requests for a group, newest first"""
        return self._list_requests("group_id", group_id, status)

    def get_user_join_requests(self, user_id: str, status: Optional[str] = None) -> List[JoinRequestResponse]:
        """Requests filed by a user, newest first"""
        return self._list_requests("user_id", user_id, status)

    def has_pending_request(self, group_id: str, user_id: str) -> bool:
        # Advisory only: two concurrent creates can both see False
        try:
            result = self.supabase.table(JOIN_REQUESTS_TABLE)\
                .select("id")\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .eq("status", STATUS_PENDING)\
                .limit(1)\
                .execute()
            return bool(result.data)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_join_request(self, request_id: str) -> Optional[JoinRequestResponse]:
        try:
            result = self.supabase.table(JOIN_REQUESTS_TABLE)\
                .select("*")\
                .eq("id", request_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result or not result.data:
            return None
        return JoinRequestResponse(**result.data)

    def get_join_request_or_404(self, request_id: str) -> JoinRequestResponse:
        request = self.get_join_request(request_id)
        if request is None:
            raise HTTPException(status_code=404, detail="Join request not found")
        return request

    def _set_status(self, request_id: str, status: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table(JOIN_REQUESTS_TABLE)\
                .update({"status": status, "updated_at": utc_now_iso()})\
                .eq("id", request_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Join request not found")
        return result.data[0]

    def approve_join_request(self, request_id: str) -> None:
        """
        Add the requester to the group and mark the request approved.

        The pending check and the status write are separate calls, so two
        concurrent approvals can both pass the check. The second one is then
        stopped by the duplicate-member guard in add_member_to_group.
        """
        request = self.get_join_request_or_404(request_id)
        if request.status != STATUS_PENDING:
            raise HTTPException(status_code=400, detail="Request has already been processed")

        GroupService(self.supabase).add_member_to_group(
            request.group_id,
            GroupMemberAdd(
                user_id=request.user_id,
                name=request.user_name,
                photo_url=request.user_photo_url,
            ),
        )
        self._set_status(request_id, STATUS_APPROVED)
        logger.info(f"Join request {request_id} approved: {request.user_id} joined {request.group_id}")

    def reject_join_request(self, request_id: str) -> None:
        """Mark rejected without re-checking the current status"""
        self._set_status(request_id, STATUS_REJECTED)

    def cancel_join_request(self, request_id: str) -> None:
        """Requester withdrawal; stored as rejected, same as an owner denial"""
        self._set_status(request_id, STATUS_REJECTED)
