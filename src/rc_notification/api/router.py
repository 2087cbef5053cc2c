"""Notification outbox endpoints for the signed-in account."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.rc_common.database import get_db_session
from src.rc_common.response import success_response
from src.rc_gateway.auth.capabilities import Actor
from src.rc_gateway.auth.dependencies import get_current_actor
from src.rc_notification.application.schemas import NotificationOut
from src.rc_notification.application.service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])
_service = NotificationService()


@router.get("")
async def list_notifications(
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=settings.MAX_PAGE_SIZE),
    is_read: bool | None = Query(None, alias="isRead"),
) -> dict:
    items, pagination = await _service.list_notifications(db, actor, is_read, page, limit)
    return success_response(
        notifications=[NotificationOut.from_domain(n).to_json() for n in items],
        pagination=pagination,
    )


@router.get("/unread")
async def list_unread(
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    items = await _service.list_unread(db, actor)
    return success_response(notifications=[NotificationOut.from_domain(n).to_json() for n in items])


@router.get("/unread-count")
async def unread_count(
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    return success_response(count=await _service.unread_count(db, actor))


@router.put("/read-all")
async def mark_all_read(
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        count = await _service.mark_all_read(db, actor)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return success_response("All notifications marked as read", count=count)


@router.put("/{notification_id}/read")
async def mark_read(
    notification_id: uuid.UUID,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        notification = await _service.mark_read(db, actor, str(notification_id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return success_response(
        "Notification marked as read", notification=NotificationOut.from_domain(notification)
    )


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: uuid.UUID,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        await _service.delete(db, actor, str(notification_id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return success_response("Notification deleted")
