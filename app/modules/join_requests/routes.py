from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_supabase
from app.modules.auth.service import user_display_name, user_photo_url
from app.modules.groups.service import GroupService
from app.modules.join_requests.schemas import (
    JoinRequestResponse, JoinRequestCreatedResponse, JoinRequestStatus
)
from app.modules.join_requests.service import JoinRequestService
from app.core.dependencies import get_current_user_id, check_group_creator
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(tags=["join-requests"])


def get_join_request_service(supabase: Client = Depends(get_supabase)) -> JoinRequestService:
    return JoinRequestService(supabase)


@router.post("/groups/{group_id}/join-requests", response_model=JoinRequestCreatedResponse, status_code=201)
async def create_join_request(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: JoinRequestService = Depends(get_join_request_service),
    supabase: Client = Depends(get_supabase)
):
    """Ask to join a group"""
    group = GroupService(supabase).get_group_or_404(group_id)
    if not group.is_active:
        raise HTTPException(status_code=404, detail="Group not found")
    if group.has_member(user_data["id"]):
        raise HTTPException(status_code=400, detail="You are already a member of this group")
    if service.has_pending_request(group_id, user_data["id"]):
        raise HTTPException(status_code=400, detail="You already have a pending request for this group")
    request_id = service.create_join_request(
        group_id,
        user_data["id"],
        user_display_name(user_data),
        user_email=user_data.get("email"),
        user_photo_url=user_photo_url(user_data),
    )
    return JoinRequestCreatedResponse(id=request_id)


@router.get("/groups/{group_id}/join-requests", response_model=List[JoinRequestResponse])
async def list_group_join_requests(
    group_id: str,
    status: Optional[JoinRequestStatus] = None,
    user_data: Dict = Depends(get_current_user_id),
    service: JoinRequestService = Depends(get_join_request_service),
    supabase: Client = Depends(get_supabase)
):
    """Requests for a group (creator only)"""
    check_group_creator(group_id, user_data, supabase)
    return service.get_group_join_requests(group_id, status)


@router.get("/join-requests/mine", response_model=List[JoinRequestResponse])
async def list_my_join_requests(
    status: Optional[JoinRequestStatus] = None,
    user_data: Dict = Depends(get_current_user_id),
    service: JoinRequestService = Depends(get_join_request_service)
):
    """Requests filed by the caller"""
    return service.get_user_join_requests(user_data["id"], status)


@router.post("/join-requests/{request_id}/approve", status_code=200)
async def approve_join_request(
    request_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: JoinRequestService = Depends(get_join_request_service),
    supabase: Client = Depends(get_supabase)
):
    """Approve a pending request and add the requester to the group (creator only)"""
    request = service.get_join_request_or_404(request_id)
    check_group_creator(request.group_id, user_data, supabase)
    service.approve_join_request(request_id)
    return {"message": "Join request approved", "id": request_id}


@router.post("/join-requests/{request_id}/reject", status_code=200)
async def reject_join_request(
    request_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: JoinRequestService = Depends(get_join_request_service),
    supabase: Client = Depends(get_supabase)
):
    """Reject a request (creator only)"""
    request = service.get_join_request_or_404(request_id)
    check_group_creator(request.group_id, user_data, supabase)
    service.reject_join_request(request_id)
    return {"message": "Join request rejected", "id": request_id}


@router.post("/join-requests/{request_id}/cancel", status_code=200)
async def cancel_join_request(
    request_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: JoinRequestService = Depends(get_join_request_service)
):
    """Withdraw the caller's own request"""
    request = service.get_join_request_or_404(request_id)
    if request.user_id != user_data["id"]:
        raise HTTPException(status_code=403, detail="You can only cancel your own requests")
    service.cancel_join_request(request_id)
    return {"message": "Join request cancelled", "id": request_id}
