"""Protean Engine runner for the marketplace domain.

Processes events asynchronously when the ``production`` config overlay is
active (``event_processing = "async"``), e.g. opening chat channels after an
order is placed.

Usage:
    PROTEAN_ENV=production python src/server.py
    python src/server.py --test-mode   # Drain pending messages and exit
"""

import argparse
import asyncio

import structlog
from protean.server.engine import Engine

logger = structlog.get_logger(__name__)


async def run(test_mode=False):
    from marketplace.domain import marketplace

    marketplace.init()
    logger.info("Starting engine", domain=marketplace.name, test_mode=test_mode)
    engine = Engine(marketplace, test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="Marketplace Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages once and exit",
    )
    args = parser.parse_args()

    asyncio.run(run(test_mode=args.test_mode))


if __name__ == "__main__":
    main()
