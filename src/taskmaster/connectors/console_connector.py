# src/taskmaster/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..cli.commands import CommandContext, render_page
from ..cli.commands import registry as command_registry
from ..core.ports import NotifyVariant
from ..core.state import AppState

logger = logging.getLogger(__name__)

LineReader = Callable[[str], Awaitable[str]]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleNotifier:
    """Notifier that prints toasts as timestamped console lines."""

    def __init__(self, stream=None) -> None:
        self._stream = stream

    def notify(self, title: str, description: str, variant: NotifyVariant = "default") -> None:
        mark = "!" if variant == "destructive" else "*"
        stream = self._stream or sys.stdout
        print(f"[{_ts_local()}] {mark} {title}: {description}", file=stream, flush=True)


async def _read_stdin(prompt: str) -> str:
    # input() blocks; keep the event loop free for in-flight requests.
    return await asyncio.to_thread(input, prompt)


async def run_console_loop(state: AppState, *, read_line: LineReader | None = None) -> None:
    read = read_line or _read_stdin
    app_name = str(getattr(state.settings, "app_name", "TaskMaster"))
    logger.info("Console connector started.")

    ctx = CommandContext(state=state, emit=_print_ts, ask=read)

    _print_ts(f"[{app_name}] Manage your tasks. Use /help for commands. Use /exit to quit.")
    await state.page.mount()
    _print_ts(render_page(ctx))

    while True:
        try:
            line = (await read(">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await command_registry.handle(ctx, line)
        except (EOFError, KeyboardInterrupt):
            logger.info("Console input closed during a command, exiting.")
            break
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Commands start with '/'. Use /help to list available commands."
        _print_ts(reply)

    state.page.unmount()
    logger.info("Console connector finished.")
