"""
Facebook Messenger Channel Provider for SiteBoss.

Sends replies to page conversations through the Graph API Send API.
"""

import logging
from typing import Optional

import httpx

from .base import ChannelProvider, ChannelMessage, ChannelResponse

logger = logging.getLogger(__name__)


class FacebookMessenger(ChannelProvider):
    """Messenger via the Meta Graph API."""

    BASE_URL = "https://graph.facebook.com"

    def __init__(
        self,
        page_access_token: str,
        api_version: str = "v19.0",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.page_access_token = page_access_token
        self.api_version = api_version
        self._transport = transport

    @property
    def messages_url(self) -> str:
        return f"{self.BASE_URL}/{self.api_version}/me/messages"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport)

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.page_access_token}"}

    async def send_message(self, message: ChannelMessage) -> ChannelResponse:
        payload = {
            "recipient": {"id": message.to},
            "messaging_type": "RESPONSE",
            "message": {"text": message.content},
        }
        try:
            async with self._client() as client:
                resp = await client.post(
                    self.messages_url,
                    json=payload,
                    headers=self._headers(),
                    timeout=10,
                )
                logger.info(f"Messenger reply status: {resp.status_code}")
                resp.raise_for_status()
                data = resp.json()
                message_id = data.get("message_id") if isinstance(data, dict) else None
                return ChannelResponse(success=True, message_id=message_id)
        except Exception as e:
            logger.error(f"Messenger send failed: {e}")
            return ChannelResponse(success=False, error=str(e))

    async def health_check(self) -> bool:
        try:
            async with self._client() as client:
                resp = await client.get(
                    f"{self.BASE_URL}/{self.api_version}/me",
                    headers=self._headers(),
                    timeout=5,
                )
                return resp.status_code == 200
        except Exception:
            return False
