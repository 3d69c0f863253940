"""
API Module for SiteBoss.

FastAPI application with routes for:
- Facebook Messenger webhook (auto-replies)
- Lead extraction, evaluation and quoting
- Deposits, payment chasing and job gates
"""

from .main import create_app, app

__all__ = ["create_app", "app"]
