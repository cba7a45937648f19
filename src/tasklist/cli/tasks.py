"""Command-line interface for tasklist."""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape

from ..config import ConfigModel, get_config, load_config
from ..preferences import ColorSchemePreference
from ..storage import (
    JsonFileKeyValueStore,
    LoadResult,
    LoadStatus,
    StorageError,
    TaskRepository,
    open_repository,
)
from ..store import SORT_CRITERIA, TaskIndexError, TaskStore
from ..task import TaskState
from ..theme import get_themed_console, print_tasks
from ..utils.datetime import format_deadline

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def parse_state_option(ctx, param, value) -> Optional[TaskState]:
    """Click callback turning a state label or name into a TaskState."""
    if value is None:
        return None
    try:
        return TaskState.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def parse_deadline_option(ctx, param, value) -> str:
    """Click callback validating an ISO deadline."""
    try:
        return format_deadline(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def open_session(config: ConfigModel) -> Tuple[JsonFileKeyValueStore, TaskStore]:
    """Open the configured storage and an empty task store on top of it."""
    kv_store, repository = open_repository(config)
    return kv_store, TaskStore(repository)


def get_console(config: ConfigModel, kv_store: JsonFileKeyValueStore) -> Console:
    """Get a console themed with the saved color scheme."""
    preference = ColorSchemePreference(kv_store, config.color_scheme_key, config.color_scheme)
    try:
        scheme = preference.get()
    except StorageError as e:
        logger.warning(f"Could not read color scheme: {e}")
        scheme = config.color_scheme
    return get_themed_console(scheme)


def report_load(console: Console, result: LoadResult, repository: TaskRepository) -> None:
    """Tell the user when saved tasks could not be read."""
    if result.status is LoadStatus.CORRUPT:
        console.print(
            f"[warning]⚠️  Saved tasks under '{repository.key}' are unreadable "
            f"({escape(str(result.error))}); showing none.[/warning]"
        )


def load_or_exit(console: Console, store: TaskStore) -> LoadResult:
    try:
        result = store.load()
    except StorageError as e:
        console.print(f"[error]❌ Cannot read tasks: {escape(str(e))}[/error]")
        sys.exit(1)
    report_load(console, result, store.repository)
    return result


@click.group(invoke_without_command=True)
@click.option("--config", type=click.Path(dir_okay=False), help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx, config, verbose):
    """tasklist - create, list, sort, filter and delete your tasks."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    try:
        if config:
            ctx.obj['config'] = load_config(Path(config))
        else:
            ctx.obj['config'] = get_config()
    except Exception as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    if ctx.invoked_subcommand is None:
        ctx.invoke(list_tasks)


@main.command(name="list")
@click.option("--sort", "sort_by", type=click.Choice(SORT_CRITERIA), help="Sort the listed tasks")
@click.option("--state", callback=parse_state_option,
              help="Show only tasks in this state (Done, Not done, Doing right now)")
@click.pass_context
def list_tasks(ctx, sort_by, state):
    """List saved tasks."""
    config = ctx.obj['config']
    kv_store, store = open_session(config)
    console = get_console(config, kv_store)

    load_or_exit(console, store)
    if state is not None:
        store.filter_by(state)
    if sort_by:
        store.sort_by(sort_by)

    print_tasks(console, store.tasks)


@main.command()
@click.argument("title")
@click.option("--summary", "-s", default="", help="Short description")
@click.option("--state", callback=parse_state_option,
              help="Initial state (defaults to the configured default_state)")
@click.option("--deadline", "-d", default="", callback=parse_deadline_option,
              help="Deadline as YYYY-MM-DD")
@click.option("--force", is_flag=True, help="Overwrite unreadable saved tasks")
@click.pass_context
def add(ctx, title, summary, state, deadline, force):
    """Create a new task.

    Examples:
      tasklist add "Write report" -s "Q3 summary" -d 2024-01-15
      tasklist add "Review PR" --state Done
    """
    config = ctx.obj['config']
    kv_store, store = open_session(config)
    console = get_console(config, kv_store)

    if not title.strip():
        console.print("[error]❌ Title required[/error]")
        sys.exit(1)

    result = load_or_exit(console, store)
    if result.status is LoadStatus.CORRUPT and not force:
        console.print("[error]❌ Refusing to overwrite unreadable tasks; use --force[/error]")
        sys.exit(1)

    try:
        task = store.create(
            title.strip(),
            summary=summary.strip(),
            state=state or config.default_state,
            deadline=deadline,
        )
    except StorageError as e:
        console.print(f"[error]❌ Task was not saved: {escape(str(e))}[/error]")
        sys.exit(1)

    console.print(f"[success]✅ Created task {len(store)}: {escape(task.title)}[/success]")


@main.command()
@click.argument("position", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete(ctx, position, yes):
    """Delete the task at POSITION (as numbered by `tasklist list`)."""
    config = ctx.obj['config']
    kv_store, store = open_session(config)
    console = get_console(config, kv_store)

    result = load_or_exit(console, store)
    if result.status is LoadStatus.CORRUPT:
        sys.exit(1)

    index = position - 1
    if 0 <= index < len(store) and config.confirm_deletion and not yes:
        title = store.tasks[index].title
        if not click.confirm(f"Delete task {position}: {title}?"):
            console.print("[muted]Cancelled[/muted]")
            return

    try:
        task = store.delete(index)
    except TaskIndexError:
        console.print(f"[error]❌ No task #{position}[/error]")
        sys.exit(1)
    except StorageError as e:
        console.print(f"[error]❌ Deletion was not saved: {escape(str(e))}[/error]")
        sys.exit(1)

    console.print(f"[success]✅ Deleted task {position}: {escape(task.title)}[/success]")


@main.command()
@click.argument("scheme", required=False, type=click.Choice(["light", "dark"]))
@click.option("--show", is_flag=True, help="Print the current color scheme")
@click.pass_context
def theme(ctx, scheme, show):
    """Toggle the color scheme, or set it to SCHEME."""
    config = ctx.obj['config']
    kv_store, _ = open_session(config)
    preference = ColorSchemePreference(kv_store, config.color_scheme_key, config.color_scheme)

    try:
        if show:
            click.echo(preference.get())
            return
        new_scheme = preference.toggle(scheme)
    except StorageError as e:
        click.echo(f"Cannot update color scheme: {e}", err=True)
        sys.exit(1)

    get_themed_console(new_scheme).print(f"[primary]Color scheme: {new_scheme}[/primary]")


@main.command()
@click.pass_context
def shell(ctx):
    """Interactive session; sort and filter views last until you exit."""
    from .shell import Shell

    config = ctx.obj['config']
    kv_store, store = open_session(config)
    Shell(config, kv_store, store).run()


if __name__ == "__main__":
    main()
