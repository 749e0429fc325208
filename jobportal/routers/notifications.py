# 🔹 FILE: jobportal/routers/notifications.py
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from .. import schemas
from ..dependencies import get_current_profile, get_gateway, unwrap
from ..gateway import Gateway
from ..models import Profile
from ..services import notifications as notification_service

router = APIRouter()


@router.get("/", response_model=schemas.NotificationList)
def list_notifications(
    filter: Literal["all", "unread"] = Query("all"),
    gateway: Gateway = Depends(get_gateway),
    profile: Profile = Depends(get_current_profile),
):
    rows = unwrap(notification_service.list_notifications(gateway, profile.id))
    return {
        "items": notification_service.filter_notifications(rows, filter),
        "unread_count": notification_service.unread_count(rows),
    }


@router.post("/read-all", response_model=schemas.UpdatedOut)
def mark_all_read(gateway: Gateway = Depends(get_gateway), profile: Profile = Depends(get_current_profile)):
    return {"updated": unwrap(notification_service.mark_all_as_read(gateway, profile.id))}


@router.post("/{notification_id}/read", response_model=schemas.NotificationOut)
def mark_read(
    notification_id: UUID,
    gateway: Gateway = Depends(get_gateway),
    profile: Profile = Depends(get_current_profile),
):
    return unwrap(notification_service.mark_as_read(gateway, profile.id, notification_id))


@router.delete("/{notification_id}", status_code=204)
def delete_notification(
    notification_id: UUID,
    gateway: Gateway = Depends(get_gateway),
    profile: Profile = Depends(get_current_profile),
):
    unwrap(notification_service.delete_notification(gateway, profile.id, notification_id))
