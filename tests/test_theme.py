"""Tests for task rendering."""

from rich.console import Console

from tasklist.task import Task, TaskState
from tasklist.theme import THEMES, get_themed_console, print_tasks, render_task


def record(theme_name="light"):
    return Console(theme=THEMES[theme_name], record=True, width=70, color_system=None)


class TestRendering:

    def test_card_shows_all_fields(self):
        console = record()
        task = Task(title="Write report", summary="Q3 summary", deadline="2024-01-15")

        console.print(render_task(task, 1))
        text = console.export_text()

        assert "1. Write report" in text
        assert "Q3 summary" in text
        assert "State: Not done" in text
        assert "Deadline: 2024-01-15" in text

    def test_titles_are_not_markup(self):
        console = record("dark")
        console.print(render_task(Task(title="[bold]literal[/bold]", state=TaskState.DONE)))

        assert "[bold]literal[/bold]" in console.export_text()

    def test_empty_list_message(self):
        console = record()
        print_tasks(console, [])

        assert "You have no tasks" in console.export_text()

    def test_unknown_scheme_falls_back_to_light(self):
        assert get_themed_console("sepia").get_style("state_done") is not None
