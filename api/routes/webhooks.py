"""
Webhook Routes for SiteBoss.

Receives Facebook Messenger page events, decides an auto-reply for
each inbound text message and sends it back through Messenger.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from ..channels.base import ChannelMessage
from ..services import Services
from .deps import require_services

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Webhook Request Models ────────────────────────────────────────

class MessengerParty(BaseModel):
    id: str


class MessengerMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    mid: Optional[str] = None
    text: Optional[str] = None
    is_echo: bool = False


class MessagingEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sender: MessengerParty
    recipient: Optional[MessengerParty] = None
    timestamp: Optional[int] = None
    message: Optional[MessengerMessage] = None


class PageEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    time: Optional[int] = None
    messaging: List[MessagingEvent] = Field(default_factory=list)


class MessengerWebhook(BaseModel):
    model_config = ConfigDict(extra="ignore")

    object: str
    entry: List[PageEntry] = Field(default_factory=list)


# ── Endpoints ─────────────────────────────────────────────────────

@router.get("/webhook", response_class=PlainTextResponse)
async def verify_webhook(
    hub_mode: Optional[str] = Query(default=None, alias="hub.mode"),
    hub_verify_token: Optional[str] = Query(default=None, alias="hub.verify_token"),
    hub_challenge: str = Query(default="", alias="hub.challenge"),
    services: Services = Depends(require_services),
):
    """
    Messenger webhook verification handshake.
    Echoes hub.challenge when the verify token matches.
    """
    expected = services.settings.fb_verify_token
    if hub_mode == "subscribe" and expected and hub_verify_token == expected:
        logger.info("Messenger webhook verified")
        return hub_challenge

    logger.warning("Messenger webhook verification failed")
    raise HTTPException(status_code=403, detail="Verification failed")


@router.post("/webhook")
async def receive_webhook(
    payload: MessengerWebhook,
    background_tasks: BackgroundTasks,
    services: Services = Depends(require_services),
):
    """
    Receive Messenger page events.
    Declines and price ranges are replied to automatically; anything
    else is left for a human.
    """
    if payload.object != "page":
        raise HTTPException(status_code=404, detail="Unsupported webhook object")

    replies: List[Dict[str, Any]] = []
    for entry in payload.entry:
        for event in entry.messaging:
            message = event.message
            if message is None or message.is_echo or not message.text:
                continue

            decision = services.reply_decider.decide(message.text)
            logger.info(
                f"Messenger message decided: {decision.action.value}",
                extra={"sender_id": event.sender.id, "mid": message.mid},
            )
            replies.append({"sender_id": event.sender.id, **decision.to_dict()})

            if decision.should_reply and services.settings.auto_reply_enabled:
                background_tasks.add_task(
                    _dispatch_reply,
                    services=services,
                    recipient_id=event.sender.id,
                    text=decision.message,
                )

    return {"status": "EVENT_RECEIVED", "replies": replies}


# ── Helpers ───────────────────────────────────────────────────────

async def _dispatch_reply(services: Services, recipient_id: str, text: str):
    """Send an auto-reply through Messenger (background task)."""
    if services.messenger is None:
        logger.warning(f"Messenger not configured, reply to {recipient_id} dropped")
        return

    result = await services.messenger.send_message(
        ChannelMessage(to=recipient_id, content=text)
    )
    if not result.success:
        logger.error(f"Auto-reply to {recipient_id} failed: {result.error}")
