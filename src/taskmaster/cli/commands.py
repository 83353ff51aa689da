# src/taskmaster/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from ..core.errors import AuthError
from ..core.models import TaskPriority, TaskStatus
from ..core.result import Err, attempt
from ..core.state import AppState
from ..ui.task_dialog import TaskDialog
from ..ui.tasks_page import PageView

CommandEmitter = Callable[[str], None]
CommandAsker = Callable[[str], Awaitable[str]]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CommandContext:
    """What a handler can touch: app state plus console output/input."""

    state: AppState
    emit: CommandEmitter
    ask: CommandAsker


CommandHandler = Callable[[CommandContext, list[str]], Awaitable[str]]


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /new, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, ctx: CommandContext, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(ctx, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()

_YES = {"y", "yes", "1", "true", "on"}


def _not_ready_message(ctx: CommandContext) -> str | None:
    page = ctx.state.page
    if page.view is PageView.REDIRECT:
        return f"Not signed in (redirect to {page.redirect_to}). Use /login <username> [password]."
    if page.view is PageView.LOADING:
        return "Loading... try again in a moment."
    return None


def render_page(ctx: CommandContext) -> str:
    page = ctx.state.page
    blocked = _not_ready_message(ctx)
    if blocked:
        return blocked
    lines = ["Tasks:"]
    if page.load_error is not None:
        if page.tasks:
            lines.append("  (could not refresh tasks; showing the last loaded list)")
        else:
            lines.append("  (could not load tasks; showing an empty list)")
    lines.extend(f"  {line}" for line in page.task_list.render_lines())
    return "\n".join(lines)


def _parse_task_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        return None


async def _ask_field(ctx: CommandContext, dialog: TaskDialog, name: str, label: str) -> None:
    """
    Ask for one field until the dialog accepts the value.

    Empty input keeps the current value; "-" clears optional text fields.
    """
    while True:
        current = getattr(dialog.fields, name)
        shown = "" if current is None else str(current)
        raw = (await ctx.ask(f"{label} [{shown}]: ")).strip()
        if not raw:
            return
        if raw == "-" and name in ("description", "due_date"):
            raw = ""
        try:
            dialog.update_fields(**{name: raw})
            return
        except ValueError as e:
            ctx.emit(f"Invalid {label.lower()}: {e}")


async def _fill_form(ctx: CommandContext, dialog: TaskDialog) -> None:
    if dialog.projects:
        choices = ", ".join(f"{p.id}={p.name}" for p in dialog.projects)
        ctx.emit(f"Projects: {choices}")
        await _ask_field(ctx, dialog, "project_id", "Project")
    else:
        ctx.emit("No projects available.")

    await _ask_field(ctx, dialog, "title", "Title")
    await _ask_field(ctx, dialog, "description", "Description")
    ctx.emit(f"Status: {', '.join(s.value for s in TaskStatus)}")
    await _ask_field(ctx, dialog, "status", "Status")
    ctx.emit(f"Priority: {', '.join(p.value for p in TaskPriority)}")
    await _ask_field(ctx, dialog, "priority", "Priority")
    await _ask_field(ctx, dialog, "due_date", "Due date (YYYY-MM-DD)")


async def run_form_dialog(ctx: CommandContext, dialog: TaskDialog) -> str:
    """Drive a dialog from the console until it is submitted or cancelled."""
    await dialog.open()
    ctx.emit(f"{dialog.heading}: {dialog.subheading}")

    while dialog.is_open:
        await _fill_form(ctx, dialog)

        if not dialog.can_submit:
            ctx.emit("A title and a project are required.")
            again = (await ctx.ask("Edit again? [Y/n] ")).strip().lower()
            if again in ("n", "no"):
                dialog.close()
                return "Cancelled; nothing saved."
            continue

        confirm = (await ctx.ask(f"{dialog.submit_label}? [Y/n] ")).strip().lower()
        if confirm in ("n", "no"):
            dialog.close()
            return "Cancelled; nothing saved."

        result = await dialog.submit()
        if not isinstance(result, Err):
            return render_page(ctx)

        retry = (await ctx.ask("Try again? [y/N] ")).strip().lower()
        if retry not in _YES:
            dialog.close()
            return "Cancelled; nothing saved."

    return render_page(ctx)


async def _resolve_edit_dialog(ctx: CommandContext, task_id: int) -> TaskDialog | None:
    page = ctx.state.page
    dialog = page.edit_dialog(task_id)
    if dialog is None:
        await page.refetch()
        dialog = page.edit_dialog(task_id)
    return dialog


async def cmd_help(ctx: CommandContext, args: list[str]) -> str:
    return registry.build_help()


async def cmd_login(ctx: CommandContext, args: list[str]) -> str:
    """
    /login <username> [password]
    """
    if not args:
        return "Usage: /login <username> [password]"
    username = args[0]
    password = args[1] if len(args) > 1 else None
    try:
        session = await ctx.state.session.sign_in(username, password)
    except AuthError as e:
        return f"Sign-in failed: {e}"
    await ctx.state.page.mount()
    return f"Signed in as {session.name}.\n{render_page(ctx)}"


async def cmd_logout(ctx: CommandContext, args: list[str]) -> str:
    await ctx.state.session.sign_out()
    ctx.state.page.unmount()
    return "Signed out."


async def cmd_whoami(ctx: CommandContext, args: list[str]) -> str:
    session = ctx.state.session.session
    if session is None:
        return f"Not signed in (status: {ctx.state.session.status})."
    return f"Signed in as {session.name} (user_id={session.user_id})."


async def cmd_tasks(ctx: CommandContext, args: list[str]) -> str:
    await ctx.state.page.mount()
    return render_page(ctx)


async def cmd_projects(ctx: CommandContext, args: list[str]) -> str:
    blocked = _not_ready_message(ctx)
    if blocked:
        return blocked
    result = await attempt(ctx.state.service.list_projects())
    if isinstance(result, Err):
        logger.error("Error loading projects: %s", result.error, exc_info=result.error)
        return "Could not load projects."
    if not result.value:
        return "No projects."
    return "Projects:\n" + "\n".join(f"  #{p.id} {p.name}" for p in result.value)


async def cmd_new(ctx: CommandContext, args: list[str]) -> str:
    blocked = _not_ready_message(ctx)
    if blocked:
        return blocked
    return await run_form_dialog(ctx, ctx.state.page.new_task_dialog)


async def cmd_edit(ctx: CommandContext, args: list[str]) -> str:
    """
    /edit <id>
    """
    blocked = _not_ready_message(ctx)
    if blocked:
        return blocked
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Usage: /edit <task id>"
    dialog = await _resolve_edit_dialog(ctx, task_id)
    if dialog is None:
        return f"No task with id {task_id}."
    return await run_form_dialog(ctx, dialog)


async def cmd_delete(ctx: CommandContext, args: list[str]) -> str:
    """
    /delete <id>
    """
    blocked = _not_ready_message(ctx)
    if blocked:
        return blocked
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Usage: /delete <task id>"
    dialog = await _resolve_edit_dialog(ctx, task_id)
    if dialog is None or dialog.task is None:
        return f"No task with id {task_id}."

    await dialog.open()
    confirm = (await ctx.ask(f"Delete task #{task_id} '{dialog.task.title}'? [y/N] ")).strip().lower()
    if confirm not in _YES:
        dialog.close()
        return "Cancelled."

    result = await dialog.delete()
    if isinstance(result, Err):
        dialog.close()
        return f"Task #{task_id} was not deleted."
    return render_page(ctx)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("login", cmd_login, help_text="Sign in: /login <username> [password].")
registry.register("logout", cmd_logout, help_text="Sign out.")
registry.register("whoami", cmd_whoami, help_text="Show the current session.")
registry.register("tasks", cmd_tasks, help_text="Reload and list tasks.", aliases=["ls", "list"])
registry.register("projects", cmd_projects, help_text="List projects.")
registry.register("new", cmd_new, help_text="Create a task.", aliases=["add"])
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
