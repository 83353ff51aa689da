# tests/test_commands.py

from __future__ import annotations

import pytest

from taskmaster.cli.commands import CommandContext, CommandRegistry, registry
from taskmaster.core.models import SessionStatus, TaskPriority


class ScriptedConsole:
    """Feeds prepared answers to ask() and records everything emitted."""

    def __init__(self, answers: list[str]) -> None:
        self.answers = list(answers)
        self.prompts: list[str] = []
        self.out: list[str] = []

    def emit(self, text: str) -> None:
        self.out.append(text)

    async def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


def _ctx(state, answers: list[str] | None = None) -> tuple[CommandContext, ScriptedConsole]:
    console = ScriptedConsole(answers or [])
    return CommandContext(state=state, emit=console.emit, ask=console.ask), console


@pytest.mark.asyncio
async def test_command_registry_routes_and_aliases(state) -> None:
    reg = CommandRegistry()
    called: list[list[str]] = []

    async def handler(ctx, args):
        called.append(args)
        return "ok"

    reg.register("a", handler, "a", aliases=["alpha"])
    ctx, _ = _ctx(state)

    assert await reg.handle(ctx, "/a x y") == "ok"
    assert await reg.handle(ctx, "/ALPHA") == "ok"
    assert called == [["x", "y"], []]


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    ctx, _ = _ctx(state)
    assert await reg.handle(ctx, "hello") is None
    assert "Unknown command" in (await reg.handle(ctx, "/nope") or "")
    assert "Empty command" in (await reg.handle(ctx, "/") or "")


@pytest.mark.asyncio
async def test_tasks_command_lists_after_mount(state) -> None:
    ctx, _ = _ctx(state)
    reply = await registry.handle(ctx, "/tasks")
    assert reply is not None
    assert "#3 Buy milk" in reply
    assert "#7 Write report" in reply


@pytest.mark.asyncio
async def test_commands_blocked_when_signed_out(state, session) -> None:
    await session.sign_out()
    ctx, _ = _ctx(state)

    reply = await registry.handle(ctx, "/tasks")
    assert reply is not None and "Not signed in" in reply and "/login" in reply

    reply = await registry.handle(ctx, "/new")
    assert reply is not None and "Not signed in" in reply


@pytest.mark.asyncio
async def test_login_then_list(state, session) -> None:
    await session.sign_out()
    ctx, _ = _ctx(state)

    assert "Sign-in failed" in (await registry.handle(ctx, "/login nobody") or "")
    reply = await registry.handle(ctx, "/login alice")

    assert session.status is SessionStatus.AUTHENTICATED
    assert reply is not None and reply.startswith("Signed in as alice.")
    assert "#7 Write report" in reply


@pytest.mark.asyncio
async def test_new_command_creates_task(state, service) -> None:
    await state.page.mount()
    ctx, console = _ctx(
        state,
        [
            "2",  # project
            "Plan sprint",  # title
            "",  # description
            "",  # status
            "high",  # priority
            "2024-07-01",  # due date
            "y",  # confirm
        ],
    )

    reply = await registry.handle(ctx, "/new")

    created = [arg for name, arg in service.calls if name == "create_task"]
    assert len(created) == 1
    assert created[0].project_id == 2
    assert created[0].priority is TaskPriority.HIGH
    assert created[0].due_date == "2024-07-01"
    assert reply is not None and "Plan sprint" in reply
    assert not state.page.new_task_dialog.is_open
    assert state.notifier.sent[-1].description == "Task created successfully"


@pytest.mark.asyncio
async def test_new_command_reasks_invalid_values(state, service) -> None:
    await state.page.mount()
    ctx, console = _ctx(
        state,
        ["", "Title", "", "done", "completed", "", "tomorrow", "", "y"],
    )

    await registry.handle(ctx, "/new")

    assert any("Invalid status" in line for line in console.out)
    assert any("Invalid due date" in line for line in console.out)
    assert service.count("create_task") == 1


@pytest.mark.asyncio
async def test_new_command_blank_title_cancel(state, service) -> None:
    await state.page.mount()
    ctx, console = _ctx(state, ["", "", "", "", "", "", "n"])

    reply = await registry.handle(ctx, "/new")

    assert reply == "Cancelled; nothing saved."
    assert service.count("create_task") == 0
    assert not state.page.new_task_dialog.is_open


@pytest.mark.asyncio
async def test_failed_create_can_be_abandoned(state, service) -> None:
    await state.page.mount()
    service.fail_on.add("create_task")
    ctx, _ = _ctx(state, ["", "Doomed", "", "", "", "", "y", "n"])

    reply = await registry.handle(ctx, "/new")

    assert reply == "Cancelled; nothing saved."
    assert state.notifier.sent[-1].variant == "destructive"
    assert service.count("list_tasks") == 1


@pytest.mark.asyncio
async def test_edit_command_keeps_unchanged_fields(state, service) -> None:
    await state.page.mount()
    ctx, _ = _ctx(state, ["", "Write final report", "", "completed", "", "", "y"])

    await registry.handle(ctx, "/edit 7")

    (draft,) = [arg for name, arg in service.calls if name == "update_task"]
    assert draft.id == 7
    assert draft.title == "Write final report"
    assert draft.description == "Quarterly numbers"
    assert draft.due_date == "2024-05-17"
    assert draft.project_id == 2


@pytest.mark.asyncio
async def test_edit_unknown_task(state) -> None:
    await state.page.mount()
    ctx, _ = _ctx(state)
    assert await registry.handle(ctx, "/edit 99") == "No task with id 99."
    assert await registry.handle(ctx, "/edit abc") == "Usage: /edit <task id>"


@pytest.mark.asyncio
async def test_delete_command(state, service) -> None:
    await state.page.mount()
    ctx, _ = _ctx(state, ["y"])

    reply = await registry.handle(ctx, "/delete 7")

    assert service.count("delete_task") == 1
    assert reply is not None and "#7" not in reply
    assert 7 not in {t.id for t in state.page.tasks}


@pytest.mark.asyncio
async def test_delete_command_cancelled(state, service) -> None:
    await state.page.mount()
    ctx, _ = _ctx(state, [""])

    assert await registry.handle(ctx, "/delete 7") == "Cancelled."
    assert service.count("delete_task") == 0


@pytest.mark.asyncio
async def test_projects_command(state) -> None:
    await state.page.mount()
    ctx, _ = _ctx(state)
    reply = await registry.handle(ctx, "/projects")
    assert reply == "Projects:\n  #1 Alpha\n  #2 Beta"
