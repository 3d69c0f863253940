"""
Command-line entry point for SiteBoss quoting.

    siteboss decide "Need colorbond fencing, 20m, easy access"
    siteboss quote "retaining wall 12m, budget 8k, steep block"
    siteboss send-test --recipient 1234567890
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from config.settings import get_settings
from .core_config import CoreConfigError, load_core_config
from .lead_extractor import LeadExtractor
from .rules_engine import RulesEngine
from .reply_decider import ReplyDecider

logger = logging.getLogger(__name__)

TEST_REPLY_TEXT = "Auto-reply test from the SiteBoss bot."


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _send_test(recipient: str, text: str) -> int:
    from api.channels.base import ChannelMessage
    from api.channels.messenger import FacebookMessenger

    settings = get_settings()
    if not settings.messenger_enabled:
        logger.error("FB_PAGE_ACCESS_TOKEN not set")
        return 1

    messenger = FacebookMessenger(
        page_access_token=settings.fb_page_access_token,
        api_version=settings.fb_graph_api_version,
    )
    result = asyncio.run(messenger.send_message(ChannelMessage(to=recipient, content=text)))
    _print_json({"success": result.success, "message_id": result.message_id, "error": result.error})
    return 0 if result.success else 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="SiteBoss lead qualification & quoting")
    parser.add_argument("--config", help="Path to core config JSON (default: CORE_CONFIG_PATH)")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    subparsers = parser.add_subparsers(dest="command", required=True)

    decide_parser = subparsers.add_parser("decide", help="Decide the auto-reply for a message")
    decide_parser.add_argument("text", help="Message text")

    quote_parser = subparsers.add_parser("quote", help="Show extracted lead, decision and quote")
    quote_parser.add_argument("text", help="Message text")

    test_parser = subparsers.add_parser("send-test", help="Send a test Messenger reply")
    test_parser.add_argument("--recipient", required=True, help="Page-scoped recipient id")
    test_parser.add_argument("--text", default=TEST_REPLY_TEXT, help="Reply text")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command == "send-test":
        return _send_test(args.recipient, args.text)

    try:
        config = load_core_config(args.config or get_settings().core_config_path)
    except CoreConfigError as e:
        logger.error(str(e))
        return 1

    engine = RulesEngine(config)

    if args.command == "decide":
        _print_json(ReplyDecider(engine=engine).decide(args.text).to_dict())
    elif args.command == "quote":
        lead = LeadExtractor(minimum_job_value=config.business_rules.minimum_job_value).extract(args.text)
        _print_json({
            "lead": lead.to_dict(),
            "decision": engine.evaluate(lead).to_dict(),
            "quote": engine.quote(lead).to_dict(),
        })

    return 0


if __name__ == "__main__":
    sys.exit(main())
