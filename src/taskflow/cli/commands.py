# src/taskflow/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.errors import AuthError, NetworkError, ValidationError
from ..core.state import AppState
from ..core.validation import LoginDraft, ProfileDraft, SignupDraft
from ..profile import display_name, initials, save_profile
from ..tasks.controller import TaskListController
from ..tasks.task_models import Task
from .bootstrap import DASHBOARD_ROUTE, TASKS_ROUTE

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], Awaitable[str]]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

SIGN_IN_HINT = "Please sign in first: /login <email> <password>"


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /login, /tasks, ...)."""

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

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
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

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return await h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return await h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting helpers ----


def _format_errors(err: ValidationError) -> str:
    return "\n".join(f"  {field}: {msg}" for field, msg in err.errors.items())


def _split_title(args: list[str]) -> tuple[str, str]:
    """`title words | description words` -> (title, description)."""
    text = " ".join(args)
    title, _, description = text.partition("|")
    return title.strip(), description.strip()


def render_tasks(controller: TaskListController) -> str:
    lines = [f"My Tasks ({controller.count} tasks total)"]
    if controller.search:
        lines.append(f"Search: {controller.search!r}")

    empty = controller.empty_message()
    if empty:
        lines.append(f"  {empty}")
        return "\n".join(lines)

    for i, task in enumerate(controller.filtered(), start=1):
        mark = "x" if task.completed else " "
        lines.append(f"  {i}. [{mark}] {task.title}")
        if task.description:
            lines.append(f"         {task.description}")
    return "\n".join(lines)


async def _tasks_view(state: AppState, target: str = TASKS_ROUTE) -> TaskListController | None:
    """Enter a task list route through the gate and make sure a mounted controller exists."""
    route = state.navigator.navigate(target)
    if route != target:
        return None
    if state.controller is None or not state.controller.alive:
        state.controller = TaskListController(state.tasks, state.notifier)
        await state.controller.mount()
    return state.controller


def _pick(controller: TaskListController, raw: str) -> Task | None:
    try:
        n = int(raw)
    except ValueError:
        return None
    visible = controller.filtered()
    if 1 <= n <= len(visible):
        return visible[n - 1]
    return None


# ---- commands ----


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str]) -> str:
    session = state.session.current_session()
    who = display_name(session, state.storage) if session else "-"
    return (
        "Status:\n"
        f"  API: {state.settings.api_url}\n"
        f"  Session: {state.session.status.value}\n"
        f"  User: {who}\n"
        f"  Route: {state.navigator.current or '-'}"
    )


async def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/login <email> <password>"""
    if len(args) < 2:
        return "Usage: /login <email> <password>"

    if emit:
        with contextlib.suppress(Exception):
            emit("Signing in...")

    try:
        await state.session.login(LoginDraft(email=args[0], password=args[1]))
    except ValidationError as e:
        return "Cannot sign in:\n" + _format_errors(e)
    except (AuthError, NetworkError) as e:
        state.notifier.error(e.message)
        return "Sign in failed."

    state.notifier.success("Welcome back!")
    state.navigator.navigate("/dashboard")
    return await cmd_dashboard(state, [])


async def cmd_signup(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/signup <email> <password> <confirm> <name...>"""
    if len(args) < 4:
        return "Usage: /signup <email> <password> <confirm> <name>"

    if emit:
        with contextlib.suppress(Exception):
            emit("Creating account...")

    draft = SignupDraft(
        name=" ".join(args[3:]),
        email=args[0],
        password=args[1],
        confirm_password=args[2],
    )
    try:
        await state.session.signup(draft)
    except ValidationError as e:
        return "Cannot sign up:\n" + _format_errors(e)
    except (AuthError, NetworkError) as e:
        state.notifier.error(e.message)
        return "Sign up failed."

    state.notifier.success("Account created!")
    state.navigator.navigate("/dashboard")
    return await cmd_dashboard(state, [])


async def cmd_logout(state: AppState, args: list[str]) -> str:
    state.session.logout()
    state.navigator.navigate("/login")
    return "Logged out."


async def cmd_dashboard(state: AppState, args: list[str]) -> str:
    controller = await _tasks_view(state, DASHBOARD_ROUTE)
    if controller is None:
        return SIGN_IN_HINT
    name = display_name(state.session.current_session(), state.storage)
    return f"Welcome back, {name}!\n" + render_tasks(controller)


async def cmd_go(state: AppState, args: list[str]) -> str:
    """/go <route>"""
    target = args[0] if args else "/"
    route = state.navigator.navigate(target)
    if route is None:
        return "Still resolving the session, try again."
    if route == TASKS_ROUTE:
        return await cmd_tasks(state, [])
    if route == "/dashboard":
        return await cmd_dashboard(state, [])
    if route == "/profile":
        return await cmd_profile(state, [])
    if route == "/login" and target.strip("/") != "login":
        return SIGN_IN_HINT
    return f"Now at {route}."


async def cmd_tasks(state: AppState, args: list[str]) -> str:
    controller = await _tasks_view(state)
    if controller is None:
        return SIGN_IN_HINT
    if args and args[0].lower() == "refresh":
        await controller.refresh()
    return render_tasks(controller)


async def cmd_search(state: AppState, args: list[str]) -> str:
    """/search [query] (empty clears)"""
    controller = await _tasks_view(state)
    if controller is None:
        return SIGN_IN_HINT
    if args:
        await controller.set_search(" ".join(args))
    else:
        await controller.clear_search()
    return render_tasks(controller)


async def cmd_new(state: AppState, args: list[str]) -> str:
    """/new <title> [| description]"""
    controller = await _tasks_view(state)
    if controller is None:
        return SIGN_IN_HINT

    title, description = _split_title(args)
    controller.open_modal()
    controller.change_field("title", title)
    controller.change_field("description", description)
    if not await controller.submit():
        errors = controller.modal.errors
        controller.close_modal()
        if errors:
            return "Cannot create task:\n" + "\n".join(f"  {k}: {v}" for k, v in errors.items())
        return "Task was not created."
    return render_tasks(controller)


async def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <n> <title> [| description]"""
    controller = await _tasks_view(state)
    if controller is None:
        return SIGN_IN_HINT
    if len(args) < 2:
        return "Usage: /edit <n> <title> [| description]"

    task = _pick(controller, args[0])
    if task is None:
        return f"No task #{args[0]} in the current view."

    title, description = _split_title(args[1:])
    controller.open_modal(task)
    controller.change_field("title", title)
    if "|" in " ".join(args[1:]):
        controller.change_field("description", description)
    if not await controller.submit():
        errors = controller.modal.errors
        controller.close_modal()
        if errors:
            return "Cannot update task:\n" + "\n".join(f"  {k}: {v}" for k, v in errors.items())
        return "Task was not updated."
    return render_tasks(controller)


async def cmd_done(state: AppState, args: list[str]) -> str:
    """/done <n> toggles completion."""
    controller = await _tasks_view(state)
    if controller is None:
        return SIGN_IN_HINT
    if not args:
        return "Usage: /done <n>"

    task = _pick(controller, args[0])
    if task is None:
        return f"No task #{args[0]} in the current view."

    await controller.toggle(task)
    return render_tasks(controller)


async def cmd_rm(state: AppState, args: list[str]) -> str:
    """/rm <n>"""
    controller = await _tasks_view(state)
    if controller is None:
        return SIGN_IN_HINT
    if not args:
        return "Usage: /rm <n>"

    task = _pick(controller, args[0])
    if task is None:
        return f"No task #{args[0]} in the current view."

    await controller.delete(task.id)
    return render_tasks(controller)


async def cmd_profile(state: AppState, args: list[str]) -> str:
    """
    /profile                  -> show profile
    /profile <name>           -> change the local display name
    /profile <name> | <email> -> same, for a restored session whose email is unknown
    """
    route = state.navigator.navigate("/profile")
    if route != "/profile":
        return SIGN_IN_HINT

    session = state.session.current_session()
    email = (session.email if session else None) or ""

    if args:
        name, typed_email = _split_title(args)
        email = typed_email or email
        try:
            save_profile(ProfileDraft(name=name, email=email), state.storage)
        except ValidationError as e:
            return "Cannot save profile:\n" + _format_errors(e)
        state.notifier.success("Profile updated successfully!")

    name = display_name(session, state.storage)
    return (
        "Profile:\n"
        f"  [{initials(name)}] {name}\n"
        f"  Email: {email or '-'}\n"
        "  Role: USER"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show API, session and current route.")
registry.register("login", cmd_login, help_text="Sign in: /login <email> <password>.")
registry.register(
    "signup", cmd_signup, help_text="Create account: /signup <email> <password> <confirm> <name>."
)
registry.register("logout", cmd_logout, help_text="Sign out and forget the stored session.")
registry.register("dashboard", cmd_dashboard, help_text="Show the dashboard.", aliases=["home"])
registry.register("go", cmd_go, help_text="Navigate: /go /dashboard | /tasks | /profile | /login.")
registry.register("tasks", cmd_tasks, help_text="List tasks: /tasks [refresh].", aliases=["ls"])
registry.register("search", cmd_search, help_text="Filter tasks: /search <text> (no text clears).")
registry.register("new", cmd_new, help_text="Create a task: /new <title> [| description].")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <n> <title> [| description].")
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <n>.", aliases=["del"])
registry.register("profile", cmd_profile, help_text="Show or rename: /profile [display name].")
