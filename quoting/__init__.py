"""
Quoting Module for SiteBoss.

This module provides lead qualification and quoting:
- Lead extraction from chat messages (service, budget, metres, height, access)
- Business rule evaluation (auto-decline)
- Price range computation from the core pricing config
- Reply decisions for inbound messages
"""

from .core_config import CoreConfig, CoreConfigError, load_core_config
from .lead_extractor import LeadExtractor, Lead, Service
from .normalization import Access, Ground, round10
from .rules_engine import RulesEngine, Decision, Quote
from .reply_decider import ReplyDecider, ReplyDecision, ReplyAction

__all__ = [
    "CoreConfig",
    "CoreConfigError",
    "load_core_config",
    "LeadExtractor",
    "Lead",
    "Service",
    "Access",
    "Ground",
    "round10",
    "RulesEngine",
    "Decision",
    "Quote",
    "ReplyDecider",
    "ReplyDecision",
    "ReplyAction",
]
