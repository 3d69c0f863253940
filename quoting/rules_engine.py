"""
Rules & Pricing Engine for SiteBoss.

Decides whether a lead is worth taking on and, when it is, prices it
from the core configuration:

    raw  = qty * base_rate * height * access * ground * season
    low  = raw * range.low_factor
    high = raw * range.high_factor

All figures are rounded to the nearest $10.
"""

import math
import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional
from dataclasses import dataclass, field

from .core_config import CoreConfig
from .normalization import (
    Access,
    MAX_BUDGET,
    MAX_JOB_TOTAL,
    MAX_QTY,
    clamp_number,
    normalize_access,
    normalize_ground,
    normalize_height,
    round10,
    round_half_away,
)

logger = logging.getLogger(__name__)

DECLINE_ACTION = "decline"

RULE_UNSUPPORTED_SERVICE = "unsupported_service"
RULE_MIN_JOB_VALUE = "min_job_value"
RULE_TIGHT_ACCESS_MIN = "tight_access_min"

REASON_UNSUPPORTED_SERVICE = "unsupported_service"
REASON_MISSING_BASE_RATE = "missing_base_rate"


@dataclass
class Decision:
    """Result of evaluating a lead against the business rules."""
    allowed: bool
    rule_id: Optional[str] = None
    action: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def decline(cls, rule_id: str, message: str) -> "Decision":
        return cls(allowed=False, rule_id=rule_id, action=DECLINE_ACTION, message=message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        if self.allowed:
            return {"allowed": True}
        return {
            "allowed": False,
            "rule_id": self.rule_id,
            "action": self.action,
            "message": self.message,
        }


@dataclass
class Quote:
    """Price range for a lead, or the reason one couldn't be produced."""
    ok: bool
    reason: Optional[str] = None
    service: Optional[str] = None
    qty: float = 0.0
    factors: Dict[str, Any] = field(default_factory=dict)
    raw: int = 0
    low: int = 0
    high: int = 0

    @classmethod
    def failed(cls, reason: str) -> "Quote":
        return cls(ok=False, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        if not self.ok:
            return {"ok": False, "reason": self.reason}
        return {
            "ok": True,
            "service": self.service,
            "qty": self.qty,
            "factors": self.factors,
            "raw": self.raw,
            "low": self.low,
            "high": self.high,
        }


def _field(source: Any, name: str, default: Any = None) -> Any:
    """Read a field from a mapping or an attribute-style object."""
    if source is None:
        return default
    if isinstance(source, Mapping):
        return source.get(name, default)
    return getattr(source, name, default)


def _service_key(source: Any) -> str:
    service = _field(source, "service")
    if isinstance(service, Enum):
        service = service.value
    if not isinstance(service, str):
        return ""
    return service.strip()


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


class RulesEngine:
    """
    Evaluates leads and prices jobs against a CoreConfig.

    Every method is a pure function of its arguments and the (frozen)
    configuration, so one engine can be shared by concurrent requests.

    Decline rules, first match wins:
    - unsupported_service: service not in supported_services
    - min_job_value: budget below minimum_job_value
    - tight_access_min: tight access and budget below tight_access_minimum
    """

    def __init__(self, config: CoreConfig):
        """
        Initialize the rules engine.

        Args:
            config: Loaded core configuration
        """
        self.config = config

    # ── Lead qualification ───────────────────────────────────────────

    def is_service_supported(self, service: Optional[str]) -> bool:
        return service in self.config.business_rules.supported_services

    def evaluate(self, lead: Any) -> Decision:
        """
        Decide whether a lead is allowed.

        Args:
            lead: Lead, or any mapping/object with service, budget and access

        Returns:
            Decision (allowed, or declined with rule id and message)
        """
        rules = self.config.business_rules
        budget = clamp_number(_field(lead, "budget"), 0, MAX_BUDGET)
        service = _service_key(lead)
        access = normalize_access(_field(lead, "access"))

        if not self.is_service_supported(service):
            return self._decline(RULE_UNSUPPORTED_SERVICE)

        if budget < rules.minimum_job_value:
            return self._decline(RULE_MIN_JOB_VALUE)

        if access == Access.TIGHT and budget < rules.tight_access_minimum:
            return self._decline(RULE_TIGHT_ACCESS_MIN)

        return Decision(allowed=True)

    def _decline(self, rule_id: str) -> Decision:
        logger.info(f"Lead declined by rule: {rule_id}")
        return Decision.decline(rule_id, self.config.rule_message(rule_id))

    # ── Pricing ──────────────────────────────────────────────────────

    def quote(self, lead: Any) -> Quote:
        """
        Price a job.

        Accepts raw, non-normalized input (e.g. height "1800", access
        "limited") as well as an extracted Lead.

        Returns:
            Quote with rounded raw/low/high figures and the resolved factors,
            or a failed Quote with a reason code
        """
        pricing = self.config.pricing_engine
        service = _service_key(lead)
        qty = clamp_number(_field(lead, "qty"), 0, MAX_QTY)
        height_key = normalize_height(_field(lead, "height"))
        access_key = normalize_access(_field(lead, "access")).value
        ground_key = normalize_ground(_field(lead, "ground")).value
        wet_season = bool(_field(lead, "wet_season", False))

        if not self.is_service_supported(service):
            return Quote.failed(REASON_UNSUPPORTED_SERVICE)

        base_rate = pricing.base_rates.get(service)
        if not _is_number(base_rate):
            logger.warning(f"No usable base rate for service: {service}")
            return Quote.failed(REASON_MISSING_BASE_RATE)

        multipliers = pricing.multipliers
        height_factor = multipliers.height.get(height_key, 1.0)
        access_factor = multipliers.access.get(access_key, 1.0)
        ground_factor = multipliers.ground.get(ground_key, 1.0)
        season_factor = self.config.business_rules.wet_season_multiplier if wet_season else 1.0

        raw = (qty * base_rate) * height_factor * access_factor * ground_factor * season_factor
        low = raw * pricing.range.low_factor
        high = raw * pricing.range.high_factor

        return Quote(
            ok=True,
            service=service,
            qty=qty,
            factors={
                "height_key": height_key,
                "height_factor": height_factor,
                "access_key": access_key,
                "access_factor": access_factor,
                "ground_key": ground_key,
                "ground_factor": ground_factor,
                "season_factor": season_factor,
            },
            raw=round10(raw),
            low=round10(low),
            high=round10(high),
        )

    # ── Money & job gates ────────────────────────────────────────────

    def deposit_amount(self, total: Any) -> int:
        """Deposit due on a job total, rounded to whole dollars."""
        amount = clamp_number(total, 0, MAX_JOB_TOTAL)
        pct = clamp_number(self.config.business_rules.deposit_percentage_default, 0, 1)
        return round_half_away(amount * pct)

    def payment_chase_schedule(self) -> List[Dict[str, Any]]:
        """Reminder days after the invoice date, in configured order."""
        return [
            {"day": step.day, "type": step.type}
            for step in self.config.payment_chasing.schedule
        ]

    def should_block_new_work(self, account: Any) -> bool:
        if not self.config.business_rules.block_new_work_if_overdue:
            return False
        return bool(_field(account, "is_overdue", False))

    def can_schedule_job(self, job: Any) -> bool:
        # No deposit, no booking
        return bool(_field(job, "deposit_paid", False))

    def can_do_variation_work(self, variation: Any) -> bool:
        # No signed-off variation, no extra work
        return bool(_field(variation, "approved", False))
