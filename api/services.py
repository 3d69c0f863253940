"""
Service initialization and dependency injection for SiteBoss API.

Creates and manages all service instances used by the API.
"""

import logging
from typing import Optional

from config.settings import get_settings, Settings
from quoting.core_config import CoreConfig, load_core_config
from quoting.lead_extractor import LeadExtractor
from quoting.rules_engine import RulesEngine
from quoting.reply_decider import ReplyDecider
from .channels.base import ChannelProvider
from .channels.messenger import FacebookMessenger

logger = logging.getLogger(__name__)


class Services:
    """Container for all application services."""

    def __init__(self):
        self.settings: Optional[Settings] = None
        self.core_config: Optional[CoreConfig] = None
        self.lead_extractor: Optional[LeadExtractor] = None
        self.rules_engine: Optional[RulesEngine] = None
        self.reply_decider: Optional[ReplyDecider] = None
        self.messenger: Optional[ChannelProvider] = None
        self._initialized = False

    def initialize(self):
        """
        Initialize all services.

        A bad core config raises CoreConfigError and aborts start-up;
        every quote depends on it, so there is no degraded mode.
        """
        if self._initialized:
            return

        self.settings = get_settings()
        logger.info(f"Initializing services for {self.settings.brand_name}")

        self._init_quoting()
        self._init_messenger()
        self._initialized = True
        logger.info("All services initialized successfully")

    def _init_quoting(self):
        """Load the core config and build the quoting components."""
        self.core_config = load_core_config(self.settings.core_config_path)
        self.rules_engine = RulesEngine(self.core_config)
        self.lead_extractor = LeadExtractor(
            minimum_job_value=self.core_config.business_rules.minimum_job_value,
        )
        self.reply_decider = ReplyDecider(
            engine=self.rules_engine,
            extractor=self.lead_extractor,
        )
        logger.info("Quoting services ready")

    def _init_messenger(self):
        """Initialize the Messenger channel."""
        s = self.settings

        if not s.messenger_enabled:
            logger.warning("FB_PAGE_ACCESS_TOKEN not set, auto-replies disabled")
            return

        self.messenger = FacebookMessenger(
            page_access_token=s.fb_page_access_token,
            api_version=s.fb_graph_api_version,
        )
        logger.info("Messenger channel ready")

    @property
    def is_ready(self) -> bool:
        return self._initialized and self.rules_engine is not None

    def health(self) -> dict:
        """Return health status of all services."""
        return {
            "initialized": self._initialized,
            "core_config_version": self.core_config.version if self.core_config else None,
            "rules_engine": self.rules_engine is not None,
            "messenger": self.messenger is not None,
        }

    async def check_messenger(self) -> Optional[bool]:
        """Probe the Messenger channel (None when it isn't configured)."""
        if self.messenger is None:
            return None
        return await self.messenger.health_check()


# Singleton
_services = Services()


def get_services() -> Services:
    """Get the global services instance."""
    return _services


def initialize_services():
    """Initialize all services (called at startup)."""
    _services.initialize()
