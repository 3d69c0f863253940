"""
Quoting API Routes for SiteBoss.

Exposes lead extraction, rule evaluation, pricing and reply decisions
for the website chat widget and internal tools.
"""

import logging
from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..services import Services
from .deps import require_services

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Request / Response Models ─────────────────────────────────────

class MessageRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)


class LeadInput(BaseModel):
    """Raw lead fields; normalized by the engine."""
    service: str = ""
    budget: Optional[float] = None
    qty: Optional[float] = None
    height: Optional[Union[str, float]] = None
    access: Optional[str] = None
    ground: Optional[str] = None
    wet_season: bool = False


class ReplyResponse(BaseModel):
    action: str
    message: Optional[str] = None


class DecisionResponse(BaseModel):
    allowed: bool
    rule_id: Optional[str] = None
    action: Optional[str] = None
    message: Optional[str] = None


class QuoteResponse(BaseModel):
    ok: bool
    reason: Optional[str] = None
    service: Optional[str] = None
    qty: Optional[float] = None
    factors: Optional[Dict[str, Any]] = None
    raw: Optional[int] = None
    low: Optional[int] = None
    high: Optional[int] = None


# ── Endpoints ─────────────────────────────────────────────────────

@router.post("/replies/decide", response_model=ReplyResponse, response_model_exclude_none=True)
async def decide_reply(request: MessageRequest, services: Services = Depends(require_services)):
    """Decide the auto-reply (decline / range / pass) for a message."""
    decision = services.reply_decider.decide(request.message)
    return decision.to_dict()


@router.post("/leads/extract")
async def extract_lead(request: MessageRequest, services: Services = Depends(require_services)):
    """Extract a structured lead from a message."""
    return services.lead_extractor.extract(request.message).to_dict()


@router.post("/leads/evaluate", response_model=DecisionResponse, response_model_exclude_none=True)
async def evaluate_lead(lead: LeadInput, services: Services = Depends(require_services)):
    """Evaluate a lead against the decline rules."""
    return services.rules_engine.evaluate(lead.model_dump()).to_dict()


@router.post("/quotes", response_model=QuoteResponse, response_model_exclude_none=True)
async def price_lead(lead: LeadInput, services: Services = Depends(require_services)):
    """Compute a price range for a lead (independent of the decline rules)."""
    return services.rules_engine.quote(lead.model_dump()).to_dict()
