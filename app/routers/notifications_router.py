# /app/routers/notifications_router.py

import asyncio
import contextlib
import logging

from fastapi import APIRouter, Depends, Query, Response, WebSocket, WebSocketDisconnect, status

from ..core.deps import get_current_context, require_staff, resolve_user_from_token, build_context
from ..models import notification_model
from ..models.user_model import CurrentContext
from ..services import notification_service
from ..services.database_service import DatabaseService, DatabaseServiceFactory, get_db_service, get_db_service_factory
from ..services.notification_helpers.channel import Subscription, notification_channel
from ..services.notification_helpers.reducer import reduce_feed

logger = logging.getLogger(__name__)

router = APIRouter()

# --- REST ENDPOINTS ---

@router.get("", response_model=notification_model.NotificationFeed, summary="Get My Notifications and Unread Count")
def get_notifications(ctx: CurrentContext = Depends(get_current_context), db: DatabaseService = Depends(get_db_service)):
    return notification_service.get_feed(ctx=ctx, db=db)

@router.post("", response_model=notification_model.Notification, status_code=status.HTTP_201_CREATED, summary="Notify a User")
def create_notification(payload: notification_model.NotificationCreate, ctx: CurrentContext = Depends(require_staff), db: DatabaseService = Depends(get_db_service)):
    return notification_service.create_notification(payload=payload, ctx=ctx, db=db)

@router.post("/read-all", response_model=notification_model.MarkAllReadResponse, summary="Mark All My Notifications as Read")
def mark_all_as_read(ctx: CurrentContext = Depends(get_current_context), db: DatabaseService = Depends(get_db_service)):
    return notification_service.mark_all_as_read(ctx=ctx, db=db)

@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT, summary="Mark One Notification as Read")
def mark_as_read(notification_id: str, ctx: CurrentContext = Depends(get_current_context), db: DatabaseService = Depends(get_db_service)):
    notification_service.mark_as_read(notification_id=notification_id, ctx=ctx, db=db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# --- WEBSOCKET ENDPOINT ---

async def _forward_events(websocket: WebSocket, events: Subscription, feed: notification_model.NotificationFeed):
    async for event in events:
        feed = reduce_feed(feed, event)
        await websocket.send_json({"type": "feed", "payload": feed.model_dump(mode="json")})


async def _drain_incoming(websocket: WebSocket):
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket,
    token: str = Query(...),
    db_factory: DatabaseServiceFactory = Depends(get_db_service_factory)
):
    """
    Sends the caller's current feed on connect, then a fresh feed every time
    a notification is pushed or read. Incoming messages are ignored.

    The stream ends when either direction stops: the client disconnects, or
    sending to it fails.
    """
    db = db_factory()
    try:
        user = resolve_user_from_token(token, db)
        if user is None:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return
        ctx = build_context(user, db)
        # Subscribe before reading the feed; the reducer drops anything seen twice.
        events = notification_channel.subscribe(ctx.user_id)
        try:
            feed = notification_service.get_feed(ctx=ctx, db=db)
        except Exception:
            events.close()
            raise
    finally:
        db.close()

    with events:
        await websocket.accept()
        await websocket.send_json({"type": "feed", "payload": feed.model_dump(mode="json")})
        forwarder = asyncio.create_task(_forward_events(websocket, events, feed))
        receiver = asyncio.create_task(_drain_incoming(websocket))
        done, pending = await asyncio.wait({forwarder, receiver}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        for task in done:
            if task.exception() is not None:
                logger.warning("Notification stream for user %s failed: %s", ctx.user_id, task.exception())
    logger.info("Notification stream closed for user %s.", ctx.user_id)
