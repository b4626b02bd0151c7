# src/notesave/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core import actions
from ..core.models import FilterMode, PriorityLevel, SubTask, Task, Theme
from ..core.state import AppState
from ..ui.editor import EditSession

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler4 = Callable[[AppState, list[str], str | None, str | None], CommandResult]
CommandHandler5 = Callable[
    [AppState, list[str], str | None, str | None, CommandEmitter | None], CommandResult
]
CommandHandler = CommandHandler4 | CommandHandler5

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by connectors (/help, /add, /done, ...)."""

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
        user_id: str | None = None,
        room_id: str | None = None,
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
            nparams = 5

        if nparams >= 5:
            h5 = cast(CommandHandler5, handler)
            result = h5(state, args, user_id, room_id, emit)
        else:
            h4 = cast(CommandHandler4, handler)
            result = h4(state, args, user_id, room_id)

        if inspect.isawaitable(result):
            return await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----

_PRIORITY_MARK = {PriorityLevel.LOW: "", PriorityLevel.MEDIUM: " !", PriorityLevel.HIGH: " !!"}


def render_task_line(index: int, task: Task) -> str:
    box = "[x]" if task.is_completed else "[ ]"
    line = f"{index}. {box} {task.title}{_PRIORITY_MARK[task.priority]}"
    if task.reminder_time:
        line += f"  @ {task.reminder_time}"
    if task.sub_tasks:
        done = sum(1 for st in task.sub_tasks if st.is_completed)
        line += f"  [{done}/{len(task.sub_tasks)}]"
    return line


def _render_steps(steps: list[SubTask] | tuple[SubTask, ...]) -> list[str]:
    return [f"    {i}. {'[x]' if st.is_completed else '[ ]'} {st.title or '<empty>'}" for i, st in enumerate(steps, start=1)]


def render_task_detail(index: int, task: Task) -> str:
    lines = [render_task_line(index, task), f"    priority: {task.priority.value}"]
    if task.description:
        lines.append(f"    note: {task.description}")
    lines.extend(_render_steps(task.sub_tasks))
    return "\n".join(lines)


def render_list(state: AppState) -> str:
    c = actions.counts(state)
    user = None
    try:
        user = state.bridge.user()
    except Exception:
        logger.debug("bridge.user() failed.", exc_info=True)
    name = (user.display_name if user else None) or str(getattr(state.settings, "app_name", "notesave"))

    lines = [f"My tasks - {name} - {c.active} left (filter: {state.filter_mode.value})"]
    visible = actions.visible_tasks(state)
    if not visible:
        if state.filter_mode == FilterMode.COMPLETED:
            lines.append("  Nothing completed yet.")
        elif state.filter_mode == FilterMode.ACTIVE:
            lines.append("  No active tasks.")
        else:
            lines.append("  No tasks.")
    for i, task in enumerate(visible, start=1):
        lines.append(render_task_line(i, task))
    return "\n".join(lines)


def render_editor(session: EditSession) -> str:
    b = session.buffer
    head = "Editing task" if session.is_edit else "New task"
    lines = [
        f"{head}:",
        f"  title: {b.title or '<empty>'}",
        f"  note: {b.description or '-'}",
        f"  priority: {b.priority.value}",
    ]
    if session.features.reminders_enabled:
        lines.append(f"  reminder: {b.reminder or '-'}")
    lines.append(f"  steps ({len(b.sub_tasks)}):")
    lines.extend(_render_steps(b.sub_tasks))
    lines.append("Use /title /desc /priority /step /save /cancel" + (" /suggest" if session.features.ai_suggestions_enabled else ""))
    return "\n".join(lines)


def render_alert(state: AppState) -> str:
    desc = state.alert.descriptor
    if desc is None:
        return ""
    lines = [desc.title]
    if desc.message:
        lines.append(desc.message)
    for i, btn in enumerate(desc.buttons, start=1):
        lines.append(f"  /press {i} - {btn.label}")
    lines.append("  /dismiss - close")
    return "\n".join(lines)


# ---- lookups ----


def _resolve_task(state: AppState, ref: str) -> Task | None:
    """1-based index into the visible list, or an id / id prefix (4+ chars)."""
    visible = actions.visible_tasks(state)
    if ref.isdigit():
        idx = int(ref) - 1
        return visible[idx] if 0 <= idx < len(visible) else None
    if len(ref) >= 4:
        matches = [t for t in state.task_store.tasks if t.id.startswith(ref)]
        if len(matches) == 1:
            return matches[0]
    return None


def _index_of(state: AppState, task: Task) -> int:
    for i, t in enumerate(actions.visible_tasks(state), start=1):
        if t.id == task.id:
            return i
    return 0


def _step_at(steps, ref: str) -> SubTask | None:
    if not ref.isdigit():
        return None
    idx = int(ref) - 1
    return steps[idx] if 0 <= idx < len(steps) else None


def _editor(state: AppState) -> EditSession | None:
    ed = state.editor
    return ed if ed is not None and ed.is_active else None


_NO_EDITOR = "No task is being edited. Use /new or /edit <n>."


# ---- commands ----


def cmd_help(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    c = actions.counts(state)
    store = state.task_store
    last = {None: "n/a", True: "ok", False: "FAILED"}[store.last_write_ok]
    ai = "on" if state.features.ai_suggestions_enabled else "off"
    toast = state.current_toast()
    return (
        "Status:\n"
        f"  Tasks: {c.total} total, {c.active} active, {c.completed} completed\n"
        f"  Storage: {state.storage.backend_name} (last save: {last})\n"
        f"  Theme: {state.theme.value}\n"
        f"  AI suggestions: {ai}"
        + (f"\n  Notice: {toast}" if toast else "")
    )


def cmd_list(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    if args:
        try:
            actions.set_filter(state, FilterMode(args[0].lower()))
        except ValueError:
            return "Usage: /list [all|active|completed]"
    return render_list(state)


def cmd_filter(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    if not args:
        return f"Filter: {state.filter_mode.value}. Use /filter all|active|completed."
    try:
        actions.set_filter(state, FilterMode(args[0].lower()))
    except ValueError:
        return "Usage: /filter all|active|completed"
    return render_list(state)


def cmd_show(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    if not args:
        ed = _editor(state)
        return render_editor(ed) if ed else _NO_EDITOR
    task = _resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]}."
    return render_task_detail(_index_of(state, task), task)


def cmd_add(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    """/add <title> -> create immediately (same path as /new + /title + /save)."""
    title = " ".join(args)
    if not title.strip():
        return "Usage: /add <title>"
    session = actions.open_add(state)
    session.set_title(title)
    task = actions.commit_editor(state)
    if task is None:
        return "Task was not created."
    return f"Added: {task.title}"


def cmd_new(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    session = actions.open_add(state)
    if args:
        session.set_title(" ".join(args))
    return render_editor(session)


def cmd_edit(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    if not args:
        return "Usage: /edit <n>"
    task = _resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]}."
    session = actions.open_edit(state, task.id)
    if session is None:
        return f"No task {args[0]}."
    return render_editor(session)


def cmd_title(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    ed = _editor(state)
    if ed is None:
        return _NO_EDITOR
    ed.set_title(" ".join(args))
    return render_editor(ed)


def cmd_desc(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    ed = _editor(state)
    if ed is None:
        return _NO_EDITOR
    ed.set_description(" ".join(args))
    return render_editor(ed)


def cmd_priority(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    ed = _editor(state)
    if ed is None:
        return _NO_EDITOR
    if not args:
        return "Usage: /priority low|medium|high"
    try:
        ed.set_priority(PriorityLevel(args[0].lower()))
    except ValueError:
        return "Usage: /priority low|medium|high"
    return render_editor(ed)


def cmd_remind(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    """
    /remind 2025-05-01T09:30  -> set reminder time
    /remind clear             -> remove it
    """
    ed = _editor(state)
    if ed is None:
        return _NO_EDITOR
    if not ed.features.reminders_enabled:
        return "Reminders are disabled."
    if not args or args[0].lower() == "clear":
        value = ""
    else:
        # "/remind 2025-05-01 09:30" is accepted too.
        value = "T".join(args[:2])
    if not ed.set_reminder(value):
        return "Reminder must be an ISO date/time, e.g. 2025-05-01T09:30."
    return render_editor(ed)


def cmd_step(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    """
    /step add <title>     -> append a step
    /step rm <n>          -> remove step n
    /step set <n> <title> -> rename step n
    """
    ed = _editor(state)
    if ed is None:
        return _NO_EDITOR
    usage = "Usage: /step add <title> | /step rm <n> | /step set <n> <title>"
    if not args:
        return usage

    sub = args[0].lower()
    if sub == "add":
        ed.add_step(" ".join(args[1:]))
        return render_editor(ed)
    if sub in ("rm", "del") and len(args) >= 2:
        step = _step_at(ed.buffer.sub_tasks, args[1])
        if step is None:
            return f"No step {args[1]}."
        ed.remove_step(step.id)
        return render_editor(ed)
    if sub == "set" and len(args) >= 2:
        step = _step_at(ed.buffer.sub_tasks, args[1])
        if step is None:
            return f"No step {args[1]}."
        ed.rename_step(step.id, " ".join(args[2:]))
        return render_editor(ed)
    return usage


async def cmd_suggest(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
    emit: CommandEmitter | None = None,
) -> str:
    ed = _editor(state)
    if ed is None:
        return _NO_EDITOR
    if not ed.features.ai_suggestions_enabled:
        return "AI suggestions are disabled."
    if emit and ed.buffer.title.strip():
        emit("Generating steps...")
    added = await ed.suggest()
    if not ed.is_active:
        return "Edit session was closed."
    return f"Added {added} step(s).\n" + render_editor(ed)


def cmd_save(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    ed = _editor(state)
    if ed is None:
        return _NO_EDITOR
    if not ed.can_save:
        return "Title is required."
    was_edit = ed.is_edit
    task = actions.commit_editor(state)
    if task is None:
        return "Task no longer exists." if was_edit else "Task was not saved."
    return f"Saved: {task.title}\n" + render_list(state)


def cmd_cancel(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    if _editor(state) is None:
        return _NO_EDITOR
    actions.close_editor(state)
    return "Edit cancelled."


def cmd_done(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    if not args:
        return "Usage: /done <n>"
    task = _resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]}."
    actions.toggle_task(state, task.id)
    mark = "reopened" if task.is_completed else "completed"
    return f"{task.title}: {mark}.\n" + render_list(state)


def cmd_check(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    if len(args) < 2:
        return "Usage: /check <task n> <step n>"
    task = _resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]}."
    step = _step_at(task.sub_tasks, args[1])
    if step is None:
        return f"No step {args[1]} in {task.title}."
    actions.toggle_subtask(state, task.id, step.id)
    updated = state.task_store.get(task.id) or task
    return render_task_detail(_index_of(state, updated), updated)


def cmd_del(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    if not args:
        return "Usage: /del <n>"
    task = _resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]}."
    actions.request_delete(state, task.id)
    return render_alert(state)


def cmd_clear(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    actions.request_delete_all(state)
    return render_alert(state)


def cmd_press(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    if not state.alert.is_open:
        return "Nothing to confirm."
    if not args or not args[0].isdigit():
        return render_alert(state)
    if not state.alert.press(int(args[0]) - 1):
        return render_alert(state)
    if state.alert.is_open:
        return render_alert(state)
    return render_list(state)


def cmd_dismiss(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    if not state.alert.is_open:
        return "Nothing to dismiss."
    state.alert.dismiss()
    return "Dismissed."


def cmd_theme(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    if not args:
        return f"Theme is {state.theme.value}. Use /theme light or /theme dark."
    try:
        theme = Theme(args[0].lower())
    except ValueError:
        return "Usage: /theme light|dark"
    actions.set_theme(state, theme)
    return f"Theme: {theme.value}."


def cmd_settings(state: AppState, args: list[str], user_id: str | None, room_id: str | None) -> str:
    """
    /settings        -> open the settings sheet
    /settings close  -> close it
    """
    if args and args[0].lower() == "close":
        actions.close_settings(state)
        return "Settings closed."
    actions.open_settings(state)
    return (
        "Settings:\n"
        f"  Theme: {state.theme.value} (/theme light|dark)\n"
        "  Delete all tasks: /clear\n"
        "  Close: /settings close"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show counts, storage backend and theme.")
registry.register("list", cmd_list, help_text="Show tasks: /list [all|active|completed].", aliases=["ls"])
registry.register("filter", cmd_filter, help_text="Set filter: /filter all|active|completed.")
registry.register("show", cmd_show, help_text="Show task n with steps, or the open editor.")
registry.register("add", cmd_add, help_text="Quick add: /add <title>.")
registry.register("new", cmd_new, help_text="Start a new task: /new [title].")
registry.register("edit", cmd_edit, help_text="Edit task n: /edit <n>.")
registry.register("title", cmd_title, help_text="Editor: set title.")
registry.register("desc", cmd_desc, help_text="Editor: set note.")
registry.register("priority", cmd_priority, help_text="Editor: /priority low|medium|high.")
registry.register("remind", cmd_remind, help_text="Editor: /remind <ISO time> | /remind clear.")
registry.register("step", cmd_step, help_text="Editor: /step add|rm|set ...")
registry.register("suggest", cmd_suggest, help_text="Editor: generate steps with AI.")
registry.register("save", cmd_save, help_text="Editor: save the task.")
registry.register("cancel", cmd_cancel, help_text="Editor: discard changes.")
registry.register("done", cmd_done, help_text="Toggle task n completed: /done <n>.")
registry.register("check", cmd_check, help_text="Toggle a step: /check <task n> <step n>.")
registry.register("del", cmd_del, help_text="Delete task n (asks for confirmation).", aliases=["rm"])
registry.register("clear", cmd_clear, help_text="Delete all tasks (asks for confirmation).")
registry.register("press", cmd_press, help_text="Confirmation: press button n.")
registry.register("dismiss", cmd_dismiss, help_text="Confirmation: close without action.")
registry.register("theme", cmd_theme, help_text="Theme: /theme light|dark.")
registry.register("settings", cmd_settings, help_text="Open settings.")


async def dispatch(
    state: AppState,
    line: str,
    user_id: str | None = None,
    room_id: str | None = None,
    emit: CommandEmitter | None = None,
) -> str | None:
    """Run one command line and append queued notices (toasts) to the reply."""
    try:
        reply = await registry.handle(state, line, user_id=user_id, room_id=room_id, emit=emit)
    except Exception:
        logger.exception("Command handler crashed.")
        reply = "Internal error while handling a command."

    notices = actions.take_notices(state)
    if reply is None:
        return None
    if notices:
        reply = "\n".join([*(f"* {n}" for n in notices), reply])
    return reply
