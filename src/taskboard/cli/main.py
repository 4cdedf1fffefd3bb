# src/taskboard/cli/main.py

"""
CLI entrypoint.

Initializes logging, validates configuration, builds AppState, then runs the
console connector on one asyncio event loop.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..config import Settings, get_settings
from ..connectors.console_connector import run_console_loop
from ..errors import ConfigError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(settings: Settings) -> None:
    state = create_initial_state(settings=settings)
    try:
        await run_console_loop(state)
    finally:
        try:
            await state.close()
        except Exception:
            logger.debug("Shutdown failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    try:
        settings.require_store()
    except ConfigError as e:
        # Nothing works without the store; refuse to start.
        logger.critical("%s", e)
        sys.exit(2)

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted.")

    logger.info("Bye.")


if __name__ == "__main__":
    main()
