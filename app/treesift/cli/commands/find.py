"""Find command implementation.

Streams deep search results for a name query, breadth-first from a root
directory, and asks whether to continue each time the result cap is hit.
"""

import os
import queue
from typing import Annotated, Any

import typer

from treesift.cli.display import OutputFormat, format_entry_row, print_entries_json
from treesift.core.settings import SearchSettings, SettingsError, load_settings
from treesift.search.errors import InvalidSearchRequest
from treesift.search.gateway import SearchGateway
from treesift.search.models import Entry, SessionState, is_root_sentinel
from treesift.search.session import validate_request
from treesift.utils.formatting import console, err_console, print_error, print_warning


def _load_search_settings(cap: int | None) -> SearchSettings:
    try:
        settings = load_settings()
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    if cap is not None:
        settings = settings.model_copy(update={"result_cap": cap})
    return settings


def _print_match(entry: Entry) -> None:
    name, modified, type_label, size = format_entry_row(entry, use_display_label=True)
    console.print(f"{name}  {modified}  {type_label}  {size}".rstrip(), soft_wrap=True)


def find(
    query: Annotated[
        str,
        typer.Argument(help="Text to find in file and folder names (case-insensitive)."),
    ],
    root: Annotated[
        str | None,
        typer.Option(
            "--root",
            "-r",
            help="Directory to search. Defaults to the current directory.",
            show_default=False,
        ),
    ] = None,
    cap: Annotated[
        int | None,
        typer.Option(
            "--cap",
            "-n",
            min=1,
            max=10_000,
            help="Results to show before asking to continue.",
        ),
    ] = None,
    all_results: Annotated[
        bool,
        typer.Option(
            "--all",
            "-a",
            help="Continue automatically instead of asking at the result cap.",
        ),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Search a directory tree for names containing QUERY.

    Shallow matches are shown before deep ones. When the result cap is
    reached the search pauses and asks whether to continue.

    Examples:
        treesift find report                # Search the current directory
        treesift find .toml --root ~/src    # Search another directory
        treesift find log --cap 50 --all    # Larger pages, never ask
        treesift find report --format json
    """
    location = os.getcwd() if root is None else root
    if not is_root_sentinel(location):
        try:
            validate_request(location, query)
        except InvalidSearchRequest as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
    elif not query.strip():
        print_error("Search query cannot be empty")
        raise typer.Exit(code=1)

    settings = _load_search_settings(cap)
    events: queue.Queue[tuple[str, Any]] = queue.Queue()
    gateway = SearchGateway(
        on_progress=lambda folders, files: events.put(("progress", (folders, files))),
        on_match=lambda entry: events.put(("match", entry)),
        on_state_change=lambda state: events.put(("state", state)),
        settings=settings,
    )

    as_json = output_format == OutputFormat.JSON
    status = (err_console if as_json else console).status("[info]Searching...[/info]")
    matches: list[Entry] = []
    folders_checked = files_checked = 0
    final_state = SessionState.RUNNING

    gateway.set_query(location, query)
    gateway.flush()
    if gateway.active_session is None and not is_root_sentinel(location):
        print_error(f"Search could not start in {location}")
        raise typer.Exit(code=1)

    status.start()
    try:
        while not final_state.is_terminal:
            kind, payload = events.get()
            if kind == "progress":
                folders_checked, files_checked = payload
                status.update(
                    f"[info]Searching...[/info] [muted]{folders_checked} folders, "
                    f"{files_checked} files checked[/muted]"
                )
            elif kind == "match":
                matches.append(payload)
                if not as_json:
                    _print_match(payload)
            elif payload == SessionState.PAUSED:
                if not all_results:
                    status.stop()
                    more = typer.confirm(
                        f"Found {len(matches)} results. Continue searching?",
                        default=True,
                        err=True,
                    )
                    status.start()
                    if not more:
                        gateway.cancel()
                        continue
                gateway.continue_search()
            elif payload.is_terminal:
                final_state = payload
    except (KeyboardInterrupt, typer.Abort):
        gateway.close()
        status.stop()
        print_warning("Search interrupted.")
        raise typer.Exit(code=130) from None
    finally:
        status.stop()

    gateway.close()

    if as_json:
        print_entries_json(matches)
        return

    if not matches:
        console.print(f"[muted]No names containing '{query}' found.[/muted]")
    suffix = " (stopped)" if final_state == SessionState.CANCELLED else ""
    console.print(
        f"\n[dim]{len(matches)} results, {folders_checked} folders and "
        f"{files_checked} files checked{suffix}[/dim]"
    )
