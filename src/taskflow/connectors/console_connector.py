# src/taskflow/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.events import SessionExpired
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleNotifier:
    """Prints transient notifications as timestamped console lines."""

    def success(self, message: str) -> None:
        print_ts(f"[OK] {message}")

    def error(self, message: str) -> None:
        print_ts(f"[ERROR] {message}")


def _prompt(state: AppState) -> str:
    route = state.navigator.current or "/"
    return f"{route} > "


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (api=%s).", state.settings.api_url)
    print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    def _on_expired(event: SessionExpired) -> None:
        state.notifier.error("Session expired. Please sign in again.")

    unsubscribe = state.events.subscribe(_on_expired)

    def emit(text: str) -> None:
        # Immediate user-visible feedback for slow requests.
        print_ts(text)

    try:
        while True:
            try:
                user_input = (await asyncio.to_thread(input, _prompt(state))).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            if not user_input.startswith("/"):
                print_ts("Commands start with '/'. Use /help to list them.")
                continue

            try:
                reply = await command_registry.handle(state, user_input, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply is not None:
                print_ts(reply)
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
