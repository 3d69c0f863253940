"""
Outbound messaging channels.
"""

from .base import ChannelProvider, ChannelMessage, ChannelResponse
from .messenger import FacebookMessenger

__all__ = ["ChannelProvider", "ChannelMessage", "ChannelResponse", "FacebookMessenger"]
