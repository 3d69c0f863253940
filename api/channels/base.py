"""
Abstract Channel Provider for SiteBoss.

Base class for outbound messaging integrations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class ChannelMessage:
    """Message to send via a channel."""
    to: str  # Page-scoped sender id
    content: str


@dataclass
class ChannelResponse:
    """Response from channel send operation."""
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class ChannelProvider(ABC):
    """Abstract base class for messaging channels."""

    @abstractmethod
    async def send_message(self, message: ChannelMessage) -> ChannelResponse:
        """Send a text message."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if channel is operational."""
        ...
