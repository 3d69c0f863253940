"""
API Routes for SiteBoss.
"""

from . import webhooks, quotes, policies

__all__ = ["webhooks", "quotes", "policies"]
