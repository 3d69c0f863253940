"""
Shared route dependencies.
"""

from fastapi import HTTPException

from ..services import Services, get_services


def require_services() -> Services:
    """Get initialized services, or 503 while they aren't ready."""
    services = get_services()
    if not services.is_ready:
        raise HTTPException(status_code=503, detail="Services not initialized")
    return services
