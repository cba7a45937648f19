"""Theming and task rendering for tasklist.

Two palettes are provided, one per color scheme. Both define the same style
names so rendering code never has to know which scheme is active.
"""

from typing import Dict, Iterable, Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme

from .task import Task, TaskState

NO_TASKS_MESSAGE = "You have no tasks"
NO_SUMMARY_MESSAGE = "No summary was provided for this task"
NO_DEADLINE_MESSAGE = "No deadline provided"

LIGHT_COLORS = {
    'text_primary': '#212529',
    'text_muted': '#868E96',
    'primary': '#228BE6',
    'success': '#2F9E44',
    'warning': '#E67700',
    'error': '#E03131',
    'border': '#CED4DA',
}

DARK_COLORS = {
    'text_primary': '#C1C2C5',
    'text_muted': '#5C5F66',
    'primary': '#4DABF7',
    'success': '#8CE99A',
    'warning': '#FFD43B',
    'error': '#FF8787',
    'border': '#373A40',
}


def _build_theme(colors: Dict[str, str]) -> Theme:
    return Theme({
        'default': colors['text_primary'],
        'muted': colors['text_muted'],
        'header': f"{colors['text_primary']} bold",
        'title': f"{colors['text_primary']} bold",
        'primary': f"{colors['primary']} bold",
        'success': f"{colors['success']} bold",
        'warning': f"{colors['warning']} bold",
        'error': f"{colors['error']} bold",
        'border': colors['border'],
        'state_done': colors['success'],
        'state_not_done': colors['error'],
        'state_doing': colors['warning'],
    })


THEMES: Dict[str, Theme] = {
    'light': _build_theme(LIGHT_COLORS),
    'dark': _build_theme(DARK_COLORS),
}

STATE_STYLES = {
    TaskState.DONE: 'state_done',
    TaskState.NOT_DONE: 'state_not_done',
    TaskState.DOING_RIGHT_NOW: 'state_doing',
}


def get_themed_console(scheme: str = "light", **kwargs) -> Console:
    """Get a console with the palette for ``scheme`` applied."""
    return Console(theme=THEMES.get(scheme, THEMES['light']), **kwargs)


def render_task(task: Task, position: Optional[int] = None) -> Panel:
    """Render one task as a bordered card."""
    title = Text(task.title or "<untitled>", style="title")
    if position is not None:
        title = Text.assemble((f"{position}. ", "muted"), title)

    summary = Text(task.summary or NO_SUMMARY_MESSAGE, style="default" if task.summary else "muted")
    state = Text.assemble(("State: ", "bold"), (task.state.label, STATE_STYLES[task.state]))
    deadline = Text.assemble(("Deadline: ", "bold"), task.deadline or NO_DEADLINE_MESSAGE)

    return Panel(Group(title, summary, state, deadline), border_style="border")


def print_tasks(console: Console, tasks: Iterable[Task], heading: str = "My Tasks") -> None:
    """Print a heading followed by every task card, numbered from 1."""
    console.print(f"[header]{heading}[/header]")
    tasks = list(tasks)
    if not tasks:
        console.print(f"[muted]{NO_TASKS_MESSAGE}[/muted]")
        return
    for position, task in enumerate(tasks, start=1):
        console.print(render_task(task, position))
