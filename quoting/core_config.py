"""
Core configuration models for SiteBoss quoting.

The core document (business rules, pricing engine, decline rules and
payment chasing) is loaded once at start-up and treated as read-only
for the lifetime of the process.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DEFAULT_RULE_MESSAGE = "Thanks for reaching out."


class CoreConfigError(ValueError):
    """Raised when the core configuration is missing or fails integrity checks."""


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class BusinessRules(_Frozen):
    supported_services: Tuple[str, ...]
    minimum_job_value: float = 1500.0
    tight_access_minimum: float = 0.0
    wet_season_multiplier: float = 1.0
    deposit_percentage_default: float = 0.0
    block_new_work_if_overdue: bool = False

    @field_validator("supported_services")
    @classmethod
    def _services_required(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError("supported_services missing")
        return value


class Multipliers(_Frozen):
    height: Dict[str, float] = Field(default_factory=dict)
    access: Dict[str, float] = Field(default_factory=dict)
    ground: Dict[str, float] = Field(default_factory=dict)


class PriceRange(_Frozen):
    low_factor: float = 1.0
    high_factor: float = 1.0


class PricingEngine(_Frozen):
    # Kept untyped so a bad rate surfaces as missing_base_rate at quote time
    base_rates: Dict[str, Any]
    multipliers: Multipliers = Field(default_factory=Multipliers)
    range: PriceRange = Field(default_factory=PriceRange)

    @field_validator("base_rates")
    @classmethod
    def _rates_required(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        if not value:
            raise ValueError("base_rates missing")
        return value


class DeclineRule(_Frozen):
    id: str
    message: Optional[str] = None


class LeadFiltering(_Frozen):
    rules: Tuple[DeclineRule, ...] = ()


class ChaseStep(_Frozen):
    day: int
    type: str


class PaymentChasing(_Frozen):
    schedule: Tuple[ChaseStep, ...] = ()


class CoreConfig(_Frozen):
    """Versioned business configuration consumed by the rules engine."""

    version: str = "1.0"
    business_rules: BusinessRules
    pricing_engine: PricingEngine
    lead_filtering: LeadFiltering = Field(default_factory=LeadFiltering)
    payment_chasing: PaymentChasing = Field(default_factory=PaymentChasing)

    def rule_message(self, rule_id: str) -> str:
        """Get the decline message for a rule, or a generic thank-you."""
        for rule in self.lead_filtering.rules:
            if rule.id == rule_id:
                return rule.message or DEFAULT_RULE_MESSAGE
        return DEFAULT_RULE_MESSAGE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CoreConfig":
        """Validate a raw document, raising CoreConfigError on bad input."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise CoreConfigError(f"Core config invalid: {e}") from e


def load_core_config(path: Union[str, Path]) -> CoreConfig:
    """
    Load and validate the core configuration document.

    Args:
        path: Path to the JSON document

    Returns:
        Validated, frozen CoreConfig

    Raises:
        CoreConfigError: if the file can't be read or fails validation
    """
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise CoreConfigError(f"Core config unreadable: {config_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CoreConfigError(f"Core config is not valid JSON: {config_path}: {e}") from e

    if not isinstance(raw, dict):
        raise CoreConfigError(f"Core config must be a JSON object: {config_path}")

    config = CoreConfig.from_dict(raw)
    logger.info(
        f"Loaded core config v{config.version} from {config_path} "
        f"({len(config.business_rules.supported_services)} services)"
    )
    return config
