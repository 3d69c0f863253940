"""
Payment & Job Policy Routes for SiteBoss.

Deposits, invoice chasing and the hard gates on booking and variation
work.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..services import Services
from .deps import require_services

logger = logging.getLogger(__name__)

router = APIRouter()


class DepositRequest(BaseModel):
    total: float = Field(..., ge=0)


class DepositResponse(BaseModel):
    total: float
    deposit: int


class ChaseStep(BaseModel):
    day: int
    type: str


class AccountStatus(BaseModel):
    is_overdue: bool = False


class JobStatus(BaseModel):
    deposit_paid: bool = False


class VariationStatus(BaseModel):
    approved: bool = False


class GateResponse(BaseModel):
    result: bool


@router.post("/deposits", response_model=DepositResponse)
async def deposit_amount(request: DepositRequest, services: Services = Depends(require_services)):
    """Deposit due on a job total."""
    return DepositResponse(
        total=request.total,
        deposit=services.rules_engine.deposit_amount(request.total),
    )


@router.get("/payment-chasing/schedule", response_model=List[ChaseStep])
async def payment_chase_schedule(services: Services = Depends(require_services)):
    """Configured reminder schedule (days after invoice)."""
    return services.rules_engine.payment_chase_schedule()


@router.post("/policies/block-new-work", response_model=GateResponse)
async def block_new_work(account: AccountStatus, services: Services = Depends(require_services)):
    """Whether new work must be refused for this account."""
    return GateResponse(result=services.rules_engine.should_block_new_work(account))


@router.post("/policies/schedule-job", response_model=GateResponse)
async def schedule_job(job: JobStatus, services: Services = Depends(require_services)):
    """Whether a job may be scheduled (deposit paid)."""
    return GateResponse(result=services.rules_engine.can_schedule_job(job))


@router.post("/policies/variation-work", response_model=GateResponse)
async def variation_work(variation: VariationStatus, services: Services = Depends(require_services)):
    """Whether variation work may proceed (approved)."""
    return GateResponse(result=services.rules_engine.can_do_variation_work(variation))
