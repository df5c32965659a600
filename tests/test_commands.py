# tests/test_commands.py

from __future__ import annotations

import pytest

from taskflow.cli.commands import CommandRegistry, registry


@pytest.mark.asyncio
async def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    async def h2(state, args):
        called["h2"] += 1
        return "h2"

    async def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert await reg.handle(state, "/a x") == "h2"
    assert await reg.handle(state, "/BEE y", emit=lambda _: None) == "h3"
    assert called == {"h2": 1, "h3": 1}


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_protected_commands_ask_to_sign_in(state, server) -> None:
    reply = await registry.handle(state, "/tasks")

    assert "Please sign in" in (reply or "")
    assert state.navigator.current == "/login"
    assert server.requests == []


@pytest.mark.asyncio
async def test_login_then_task_workflow(state, server, notifier) -> None:
    reply = await registry.handle(state, "/login ann@example.com secret1")
    assert "Welcome back, ann!" in (reply or "")
    assert state.navigator.current == "/dashboard"

    reply = await registry.handle(state, "/new Buy milk | 2 liters")
    assert "1. [ ] Buy milk" in (reply or "")
    assert "2 liters" in (reply or "")
    assert state.navigator.current == "/tasks"

    reply = await registry.handle(state, "/done 1")
    assert "1. [x] Buy milk" in (reply or "")

    reply = await registry.handle(state, "/edit 1 Buy oat milk")
    assert "Buy oat milk" in (reply or "")
    # Description untouched when the edit has no "|" part.
    assert "2 liters" in (reply or "")

    reply = await registry.handle(state, "/rm 1")
    assert "No tasks yet" in (reply or "")
    assert notifier.successes == ["Welcome back!", "Task created!", "Task updated!", "Task deleted"]


@pytest.mark.asyncio
async def test_login_validation_errors_are_listed(state, server) -> None:
    reply = await registry.handle(state, "/login not-an-email 123")

    assert "email: Invalid email format" in (reply or "")
    assert "password: Minimum 6 characters" in (reply or "")
    assert server.requests == []


@pytest.mark.asyncio
async def test_new_with_long_title_is_rejected(signed_in_state, server) -> None:
    reply = await registry.handle(signed_in_state, "/new " + "x" * 101)

    assert "title: Max 100 characters" in (reply or "")
    assert server.calls("POST", "/tasks") == []


@pytest.mark.asyncio
async def test_search_filters_view(signed_in_state, server) -> None:
    server.seed("Alpha")
    server.seed("Beta", "alpha thing")
    server.seed("Gamma")

    reply = await registry.handle(signed_in_state, "/search ALPHA")

    assert "Alpha" in reply and "Beta" in reply
    assert "Gamma" not in reply


@pytest.mark.asyncio
async def test_leaving_tasks_unmounts_controller(signed_in_state) -> None:
    await registry.handle(signed_in_state, "/tasks")
    controller = signed_in_state.controller
    assert controller is not None and controller.alive

    await registry.handle(signed_in_state, "/go /profile")

    assert signed_in_state.controller is None
    assert controller.alive is False


@pytest.mark.asyncio
async def test_expired_session_redirects_to_login(signed_in_state, server) -> None:
    await registry.handle(signed_in_state, "/tasks")
    server.token = "rotated"

    await registry.handle(signed_in_state, "/tasks refresh")

    assert signed_in_state.navigator.current == "/login"
    assert signed_in_state.session.current_session() is None


@pytest.mark.asyncio
async def test_profile_rename_for_restored_session(signed_in_state) -> None:
    reply = await registry.handle(signed_in_state, "/profile Ann Lee")
    assert "Email is required" in (reply or "")

    reply = await registry.handle(signed_in_state, "/profile Ann Lee | ann@example.com")
    assert "[AN] Ann Lee" in (reply or "")

    reply = await registry.handle(signed_in_state, "/dashboard")
    assert "Welcome back, Ann Lee!" in (reply or "")

    await registry.handle(signed_in_state, "/logout")
    assert signed_in_state.storage.get_item("profile") is None
    assert signed_in_state.navigator.current == "/login"


@pytest.mark.asyncio
async def test_dashboard_shows_task_list_under_greeting(signed_in_state, server) -> None:
    server.seed("Alpha", "first")
    server.seed("Beta")

    reply = await registry.handle(signed_in_state, "/dashboard")

    assert reply.startswith("Welcome back, User!")
    assert "My Tasks (2 tasks total)" in reply
    assert "1. [ ] Alpha" in reply and "2. [ ] Beta" in reply

    # The list stays mounted between the dashboard and /tasks, and goes away elsewhere.
    controller = signed_in_state.controller
    await registry.handle(signed_in_state, "/tasks")
    assert signed_in_state.controller is controller and controller.alive

    await registry.handle(signed_in_state, "/go /profile")
    assert signed_in_state.controller is None
    assert controller.alive is False


@pytest.mark.asyncio
async def test_search_without_text_clears_filter(signed_in_state, server) -> None:
    server.seed("Alpha")
    server.seed("Beta")

    reply = await registry.handle(signed_in_state, "/search alpha")
    assert "Beta" not in reply

    reply = await registry.handle(signed_in_state, "/search")
    assert "Search:" not in reply
    assert "Alpha" in reply and "Beta" in reply
    assert signed_in_state.controller.search == ""
