"""
Reply Decider for SiteBoss.

Composes lead extraction and the rules engine into one of three reply
actions for an inbound message:
- decline: send the matching rule's message
- range: send a typical price range
- pass: not a qualifiable lead, let normal handling take over
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional
from dataclasses import dataclass

from .lead_extractor import LeadExtractor
from .rules_engine import RulesEngine

logger = logging.getLogger(__name__)


class ReplyAction(str, Enum):
    """Reply actions for an inbound message."""
    DECLINE = "decline"
    RANGE = "range"
    PASS = "pass"


@dataclass(frozen=True)
class ReplyDecision:
    """Reply to send back for a message (no message on pass)."""
    action: ReplyAction
    message: Optional[str] = None

    @property
    def should_reply(self) -> bool:
        return self.action != ReplyAction.PASS and bool(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {"action": self.action.value}
        if self.message is not None:
            data["message"] = self.message
        return data


PASS = ReplyDecision(action=ReplyAction.PASS)


class ReplyDecider:
    """
    Decides the auto-reply for a raw message.

    The engine is an optional dependency: without one every message
    passes through untouched.
    """

    RANGE_TEMPLATE = (
        "Typical price range: ${low}–${high}. "
        "Final price confirmed once we see photos/site conditions."
    )

    def __init__(
        self,
        engine: Optional[RulesEngine] = None,
        extractor: Optional[LeadExtractor] = None,
        range_template: Optional[str] = None,
    ):
        """
        Initialize the reply decider.

        Args:
            engine: Rules engine bound to the loaded core configuration
            extractor: Lead extractor (defaults to one using the
                configured minimum job value)
            range_template: Override for the price range message
        """
        self.engine = engine
        if extractor is None:
            minimum = engine.config.business_rules.minimum_job_value if engine else None
            extractor = LeadExtractor(minimum_job_value=minimum)
        self.extractor = extractor
        self.range_template = range_template or self.RANGE_TEMPLATE

    def decide(self, text: Optional[str]) -> ReplyDecision:
        """
        Decide how to reply to a message.

        Args:
            text: Raw message body

        Returns:
            ReplyDecision
        """
        if self.engine is None:
            return PASS

        lead = self.extractor.extract(text)

        # Don't force a decision on an incomplete lead
        if not lead.service or not lead.qty:
            logger.debug("No service or quantity detected, passing")
            return PASS

        decision = self.engine.evaluate(lead)
        if not decision.allowed:
            return ReplyDecision(action=ReplyAction.DECLINE, message=decision.message)

        quote = self.engine.quote(lead)
        if quote.ok:
            logger.info(
                f"Quoted {quote.service} x{quote.qty:g}: ${quote.low}-${quote.high}"
            )
            return ReplyDecision(
                action=ReplyAction.RANGE,
                message=self.range_template.format(low=quote.low, high=quote.high),
            )

        logger.warning(f"Lead allowed but not priceable ({quote.reason}), passing")
        return PASS
