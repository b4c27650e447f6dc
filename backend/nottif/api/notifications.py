"""
Notification API routes: ad-hoc sends, test sends and webhook configuration.
"""
from typing import Optional
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from loguru import logger

from nottif.api.dependencies import get_orchestrator
from nottif.models.event import EventSource
from nottif.models.identity import Identity
from nottif.services.orchestrator import Orchestrator
from nottif.utils.errors import ConfigWriteError, ErrorCode, raise_error

router = APIRouter(prefix="/api", tags=["notifications"])


class SendRequest(BaseModel):
    content: str = ""
    username: Optional[str] = None
    avatar_url: Optional[str] = None


class WebhookUpdateRequest(BaseModel):
    url: str


@router.get("/healthcheck", response_class=PlainTextResponse)
async def healthcheck():
    return "OK"


@router.post("/send")
async def send_notification(body: SendRequest, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """Send a message to the webhook and record it as an API event."""
    if not body.content:
        raise_error(ErrorCode.VALIDATION_ERROR, "Content field is required", status_code=400, log=False)

    identity = Identity(username=body.username or None, avatar_url=body.avatar_url or None)
    if not await orchestrator.record_and_notify(EventSource.API, body.content, identity):
        raise_error(ErrorCode.EXTERNAL_SERVICE_ERROR, "Failed to send notification")

    return {"status": "sent"}


@router.post("/webhook/test")
async def test_webhook(orchestrator: Orchestrator = Depends(get_orchestrator)):
    """Send a fixed test message to the configured webhook."""
    if not await orchestrator.send_test_notification():
        raise_error(ErrorCode.EXTERNAL_SERVICE_ERROR, "Failed to send test notification")
    return {"status": "sent"}


@router.post("/webhook/update")
async def update_webhook(body: WebhookUpdateRequest, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """Persist a new webhook URL and use it for all following sends."""
    try:
        await orchestrator.update_webhook_url(body.url)
    except ConfigWriteError as e:
        logger.error(f"Webhook update not saved: {e}")
        raise_error(ErrorCode.CONFIG_ERROR, "Failed to save config", log=False)

    await orchestrator.record_event(EventSource.SYSTEM, "Updated Webhook URL", True)
    return {"status": "updated"}
