# src/taskflow/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, lands on the first route allowed by
the stored session, then runs the console REPL until /exit or EOF.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..cli.commands import registry as command_registry
from ..config import get_settings
from ..connectors.console_connector import ConsoleNotifier, print_ts, run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    state = create_initial_state(settings=settings, notifier=ConsoleNotifier())
    try:
        # Same as opening the app at "/": the gate decides dashboard vs login.
        reply = await command_registry.handle(state, "/go /")
        if reply:
            print_ts(reply)
        await run_console_loop(state)
    finally:
        await shutdown_state(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)
    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
