"""
Lead Extraction for SiteBoss.

Turns a raw chat message into a structured lead:
- Service requested (fencing, retaining walls, excavation, ...)
- Budget
- Quantity in metres
- Fence height
- Site access difficulty

Extraction is keyword/pattern based and never raises; anything it
can't find falls back to a documented default.
"""

import re
import logging
from enum import Enum
from typing import Any, Dict, Optional, Tuple
from dataclasses import dataclass

from .normalization import (
    Access,
    Ground,
    DEFAULT_HEIGHT,
    MAX_BUDGET,
    MAX_QTY,
    clamp_number,
    round_half_away,
)

logger = logging.getLogger(__name__)

FALLBACK_MINIMUM_JOB_VALUE = 1500.0


class Service(str, Enum):
    """Service categories recognised in messages."""
    PRESSURE_WASHING = "pressure_washing"
    RETAINING_WALLS = "retaining_walls"
    EXCAVATION = "excavation"
    LANDSCAPING = "landscaping"
    COLORBOND_FENCING = "colorbond_fencing"
    ALUMINIUM_FENCING = "aluminium_fencing"
    TIMBER_FENCING = "timber_fencing"


@dataclass
class Lead:
    """Structured lead derived from a single message."""

    service: str = ""  # "" when no service was recognised
    budget: float = 0.0
    qty: float = 0.0
    height: str = DEFAULT_HEIGHT
    access: Access = Access.EASY
    ground: Ground = Ground.UNKNOWN
    wet_season: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "service": self.service,
            "budget": self.budget,
            "qty": self.qty,
            "height": self.height,
            "access": self.access.value,
            "ground": self.ground.value,
            "wet_season": self.wet_season,
        }


class LeadExtractor:
    """
    Extracts a Lead from a customer message.

    Service detection walks SERVICE_KEYWORDS in order and the first
    group with a hit wins, so "pressure wash the fence" is pressure
    washing, not fencing. A bare "fence" falls through to colorbond.
    """

    SERVICE_KEYWORDS: Tuple[Tuple[Tuple[str, ...], Service], ...] = (
        (("pressure", "wash"), Service.PRESSURE_WASHING),
        (("retaining", "sleeper"), Service.RETAINING_WALLS),
        (("excav", "digger", "bobcat"), Service.EXCAVATION),
        (("landscap", "turf", "garden"), Service.LANDSCAPING),
        (("colorbond", "colourbond"), Service.COLORBOND_FENCING),
        (("aluminium", "aluminum", "pool fence"), Service.ALUMINIUM_FENCING),
        (("timber", "paling", "pailing"), Service.TIMBER_FENCING),
        (("fence", "fencing"), Service.COLORBOND_FENCING),
    )

    TIGHT_ACCESS_KEYWORDS = ("tight access", "no access", "behind shed", "narrow")
    RESTRICTED_ACCESS_KEYWORDS = ("restricted", "limited", "stairs", "steep")

    BUDGET_WORD = "budget"
    BUDGET_SUFFIX_MULTIPLIERS = {
        "k": 1000,
        "grand": 1000,
    }

    def __init__(self, minimum_job_value: Optional[float] = None):
        """
        Initialize the lead extractor.

        Args:
            minimum_job_value: Budget assumed when the message names no
                figure at all. Falls back to 1500 when not configured.
        """
        if minimum_job_value is None:
            minimum_job_value = FALLBACK_MINIMUM_JOB_VALUE
        self.minimum_job_value = float(minimum_job_value)

        self._build_patterns()

    def _build_patterns(self):
        """Build regex patterns for lead extraction."""
        # 20m, 20 m, 20 metres
        self.metres_pattern = re.compile(r'(\d+(?:\.\d+)?)\s*(m|metre|metres)\b')

        # Only the standard panel heights
        self.height_pattern = re.compile(r'\b(1\.2|1\.5|1\.8|2\.1)\s*m\b')

        # $4,500 or $4500.00 (cents dropped)
        self.dollar_pattern = re.compile(r'\$\s*(\d+(?:,\d{3})*)(?:\.\d{2})?')

        # budget 5k, budget around 3 grand
        self.budget_suffix_pattern = re.compile(
            r'\bbudget\b[^0-9]{0,10}(\d+(?:\.\d+)?)\s*(k|grand)\b'
        )

    def extract(self, message: Optional[str]) -> Lead:
        """
        Extract a lead from a message.

        Args:
            message: Customer message

        Returns:
            Lead with every field populated (defaults where nothing matched)
        """
        text = message or ""
        text_lower = text.lower()

        lead = Lead(
            service=self._extract_service(text_lower),
            budget=self._extract_budget(text, text_lower),
            qty=self._extract_qty(text_lower),
            height=self._extract_height(text_lower),
            access=self._extract_access(text_lower),
        )
        logger.debug(f"Extracted lead: {lead.to_dict()}")
        return lead

    def _extract_service(self, text_lower: str) -> str:
        """Detect the service category; "" when nothing matches."""
        for keywords, service in self.SERVICE_KEYWORDS:
            if any(kw in text_lower for kw in keywords):
                return service.value
        return ""

    def _extract_qty(self, text_lower: str) -> float:
        """Extract the first metre figure from the message."""
        match = self.metres_pattern.search(text_lower)
        if not match:
            return 0.0
        return clamp_number(match.group(1), 0, MAX_QTY)

    def _extract_height(self, text_lower: str) -> str:
        """Extract the fence height, defaulting to 1.8m."""
        match = self.height_pattern.search(text_lower)
        if match:
            return f"{match.group(1)}m"
        return DEFAULT_HEIGHT

    def _extract_access(self, text_lower: str) -> Access:
        """Extract site access difficulty."""
        if any(kw in text_lower for kw in self.TIGHT_ACCESS_KEYWORDS):
            return Access.TIGHT
        if any(kw in text_lower for kw in self.RESTRICTED_ACCESS_KEYWORDS):
            return Access.RESTRICTED
        return Access.EASY

    def _extract_budget(self, text: str, text_lower: str) -> float:
        """
        Extract the customer's budget.

        A dollar amount wins. Otherwise "budget 5k" / "budget 3 grand"
        style figures are used. When the message never talks about money
        the minimum job value is assumed so the lead isn't auto-declined;
        when it does but no figure parses, the budget stays 0.
        """
        budget = 0.0

        has_dollar = "$" in text
        has_budget_word = self.BUDGET_WORD in text_lower

        if has_dollar:
            match = self.dollar_pattern.search(text)
            if match:
                budget = float(match.group(1).replace(",", ""))

        if budget <= 0 and (has_budget_word or "k" in text_lower or "grand" in text_lower):
            match = self.budget_suffix_pattern.search(text_lower)
            if match:
                multiplier = self.BUDGET_SUFFIX_MULTIPLIERS[match.group(2)]
                budget = float(round_half_away(float(match.group(1)) * multiplier))

        if not has_dollar and not has_budget_word and budget <= 0:
            budget = self.minimum_job_value

        return clamp_number(budget, 0, MAX_BUDGET)
