"""Interactive task session.

The session keeps one ``TaskStore`` alive, so ``sort`` and ``filter`` views
persist between commands until ``filter`` (no state), ``reload`` or exit.
Positions given to ``rm`` refer to the list as currently shown.
"""

import logging
import shlex
from typing import List

import click
from rich.markup import escape

from ..config import ConfigModel
from ..preferences import ColorSchemePreference
from ..storage import JsonFileKeyValueStore, LoadStatus, StorageError
from ..store import SORT_CRITERIA, TaskIndexError, TaskStore
from ..task import TaskState
from ..theme import get_themed_console, print_tasks
from ..utils.datetime import format_deadline

logger = logging.getLogger(__name__)

STATE_ALIASES = {
    'd': TaskState.DONE,
    'n': TaskState.NOT_DONE,
    'r': TaskState.DOING_RIGHT_NOW,
}


class Shell:
    def __init__(self, config: ConfigModel, kv_store: JsonFileKeyValueStore, store: TaskStore):
        self.config = config
        self.store = store
        self.preference = ColorSchemePreference(kv_store, config.color_scheme_key, config.color_scheme)
        self.console = get_themed_console(self._current_scheme())
        self.filtered = False

    def _current_scheme(self) -> str:
        try:
            return self.preference.get()
        except StorageError as e:
            logger.warning(f"Could not read color scheme: {e}")
            return self.config.color_scheme

    def run(self) -> None:
        """Read commands until ``exit`` or end of input."""
        self._reload()
        self._show()
        while True:
            try:
                line = click.prompt("tasklist", default="", show_default=False, prompt_suffix="> ")
            except (click.Abort, EOFError, KeyboardInterrupt):
                break
            line = line.strip()
            if not line:
                continue
            if not self.handle(line):
                break
        self.console.print("Goodbye.")

    # -------------------- command dispatch --------------------
    def handle(self, line: str) -> bool:
        """Run one command line. Returns False when the session should end."""
        try:
            tokens = shlex.split(line)
        except ValueError as e:
            self.console.print(f"[error]{escape(str(e))}[/error]")
            return True
        if not tokens:
            return True

        cmd, args = tokens[0].lower(), tokens[1:]
        if cmd in ('exit', 'quit'):
            return False
        if cmd == 'help':
            self._help()
        elif cmd in ('list', 'ls'):
            self._show()
        elif cmd == 'reload':
            self._reload()
            self._show()
        elif cmd == 'sort':
            self._cmd_sort(args)
        elif cmd == 'filter':
            self._cmd_filter(args)
        elif cmd == 'add':
            self._cmd_add(args)
        elif cmd in ('rm', 'delete'):
            self._cmd_rm(args)
        elif cmd == 'theme':
            self._cmd_theme(args)
        else:
            self.console.print("[warning]Unknown command. Type 'help' for instructions.[/warning]")
        return True

    # ---- individual command helpers ----
    def _reload(self) -> None:
        try:
            result = self.store.load()
        except StorageError as e:
            self.console.print(f"[error]❌ Cannot read tasks: {escape(str(e))}[/error]")
            return
        if result.ok:
            self.filtered = False
        if result.status is LoadStatus.CORRUPT:
            self.console.print(f"[warning]⚠️  Saved tasks are unreadable ({escape(str(result.error))})[/warning]")

    def _show(self) -> None:
        print_tasks(self.console, self.store.tasks)

    def _warn_if_filtered(self) -> None:
        if self.filtered:
            self.console.print("[warning]Saving the filtered view; hidden tasks will not be kept.[/warning]")

    def _cmd_sort(self, args: List[str]) -> None:
        if len(args) != 1 or args[0].lower() not in SORT_CRITERIA:
            self.console.print(f"Usage: sort {'|'.join(SORT_CRITERIA)}")
            return
        self.store.sort_by(args[0].lower())
        self._show()

    def _cmd_filter(self, args: List[str]) -> None:
        if not args:
            self._reload()
            self._show()
            return
        raw = ' '.join(args)
        state = STATE_ALIASES.get(raw.lower())
        try:
            self.store.filter_by(state or raw)
        except ValueError as e:
            self.console.print(f"[error]{escape(str(e))}[/error]")
            return
        self.filtered = True
        self._show()

    def _cmd_add(self, args: List[str]) -> None:
        if args:  # inline shorthand, defaults for the rest
            title = ' '.join(args).strip()
            summary, state, deadline = "", self.config.default_state, ""
        else:
            try:
                fields = self._prompt_task_fields()
            except (click.Abort, EOFError, KeyboardInterrupt):
                self.console.print("[muted]Cancelled[/muted]")
                return
            except ValueError as e:
                self.console.print(f"[error]{escape(str(e))}[/error]")
                return
            if fields is None:
                return
            title, summary, state, deadline = fields
        if not title:
            self.console.print("[error]Title required.[/error]")
            return
        self._warn_if_filtered()
        try:
            self.store.create(title, summary=summary, state=state, deadline=deadline)
        except StorageError as e:
            self.console.print(f"[error]❌ Task was not saved: {escape(str(e))}[/error]")
        self._show()

    def _prompt_task_fields(self):
        title = click.prompt("Title", default="", show_default=False).strip()
        if not title:
            self.console.print("[error]Title required.[/error]")
            return None
        summary = click.prompt("Summary", default="", show_default=False).strip()
        raw_state = click.prompt("State", default=self.config.default_state.label)
        state = STATE_ALIASES.get(raw_state.lower()) or TaskState.parse(raw_state)
        deadline = format_deadline(
            click.prompt("Deadline (YYYY-MM-DD)", default="", show_default=False)
        )
        return title, summary, state, deadline

    def _cmd_rm(self, args: List[str]) -> None:
        if len(args) != 1 or not args[0].rstrip('.').isdigit():
            self.console.print("Usage: rm <position>")
            return
        position = int(args[0].rstrip('.'))
        if 0 < position <= len(self.store):
            self._warn_if_filtered()
        try:
            self.store.delete(position - 1)
        except TaskIndexError:
            self.console.print(f"[error]No task #{position}.[/error]")
            return
        except StorageError as e:
            self.console.print(f"[error]❌ Deletion was not saved: {escape(str(e))}[/error]")
        self._show()

    def _cmd_theme(self, args: List[str]) -> None:
        choice = args[0].lower() if args else None
        try:
            scheme = self.preference.toggle(choice)
        except ValueError as e:
            self.console.print(f"[error]{escape(str(e))}[/error]")
            return
        except StorageError as e:
            self.console.print(f"[error]Cannot update color scheme: {escape(str(e))}[/error]")
            return
        self.console = get_themed_console(scheme)
        self.console.print(f"[primary]Color scheme: {scheme}[/primary]")

    def _help(self) -> None:
        self.console.print("Commands:", markup=False)
        self.console.print("  list                    Show the current view", markup=False)
        self.console.print("  add                     Add a task (prompts for each field)", markup=False)
        self.console.print("  add <title...>          Shorthand add with inline title", markup=False)
        self.console.print("  rm <n>                  Delete task n of the current view", markup=False)
        self.console.print("  sort state|deadline     Sort the current view", markup=False)
        self.console.print("  filter <state>          Show only Done, Not done or Doing right now (d/n/r)", markup=False)
        self.console.print("  filter                  Show all saved tasks again", markup=False)
        self.console.print("  reload                  Re-read saved tasks, dropping sort and filter", markup=False)
        self.console.print("  theme [light|dark]      Toggle or set the color scheme", markup=False)
        self.console.print("  help                    Show this help", markup=False)
        self.console.print("  exit                    Leave the session", markup=False)
