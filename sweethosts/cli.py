"""Thin CLI wrapper for sweethosts.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from sweethosts import __version__
from sweethosts.config import Settings, get_settings, print_settings_json
from sweethosts.profiles.schema import ProfileNode
from sweethosts.types import ApplyOutcome, ApplyStatus
from sweethosts.workspace import Workspace, open_workspace

app = typer.Typer(
    name="sweethosts",
    help="SweetHosts - manage hosts profiles and apply them to the system",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"sweethosts version {__version__}")
        raise typer.Exit()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", help="Data directory (overrides SWEETHOSTS_DATA_DIR)"),
    ] = None,
    safe_mode: Annotated[
        bool,
        typer.Option("--safe-mode", help="Write hosts to a temp file, never the system"),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """SweetHosts - manage hosts profiles and apply them to the system."""
    settings = get_settings()
    updates: dict[str, object] = {}
    if data_dir is not None:
        updates["data_dir"] = data_dir
    if safe_mode:
        updates["safe_mode"] = True
    if updates:
        settings = settings.model_copy(update=updates)
    configure_logging(settings.log_level)
    ctx.obj = settings


def _settings(ctx: typer.Context) -> Settings:
    settings = ctx.obj if isinstance(ctx.obj, Settings) else None
    return settings or get_settings()


def _workspace(ctx: typer.Context) -> Workspace:
    return open_workspace(_settings(ctx))


def _print_tree(nodes: list[ProfileNode], depth: int = 0) -> None:
    for node in nodes:
        mark = "[green]●[/green]" if node.on else "[dim]○[/dim]"
        suffix = "/" if node.is_folder else ""
        indent = "  " * depth
        title = escape(node.title or "")
        console.print(f"{indent}{mark} {title}{suffix} [dim]({node.id})[/dim]")
        if node.children:
            _print_tree(node.children, depth + 1)


def _print_outcome(outcome: ApplyOutcome) -> None:
    if outcome.status is ApplyStatus.INSTALLED:
        console.print("[green]✓ Hosts applied[/green]")
    elif outcome.status is ApplyStatus.INSTALLED_SANDBOXED:
        console.print(
            f"[yellow]Safe mode: hosts written to {outcome.sandbox_path}[/yellow]"
        )
    elif outcome.status is ApplyStatus.PERMISSION_DENIED:
        console.print(f"[red]✗ Permission denied ({outcome.code})[/red]")
        if outcome.message:
            console.print(f"  {escape(outcome.message)}")
    else:
        message = escape(outcome.message or "")
        console.print(f"[red]✗ Failed to write hosts: {message}[/red]")


@app.command()
def config(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings = _settings(ctx)
    if json_output:
        typer.echo(print_settings_json(settings))
    else:
        hosts_display = (
            str(settings.hosts_path) if settings.hosts_path else "(system default)"
        )
        tmp_dir_display = str(settings.tmp_dir) if settings.tmp_dir else "(system default)"
        console.print("[bold]Effective Configuration:[/bold]")
        console.print()
        console.print("[bold]Paths:[/bold]")
        console.print(f"  Data directory:      {settings.data_dir}")
        console.print(f"  Hosts file:          {hosts_display}")
        console.print(f"  Temp directory:      {tmp_dir_display}")
        console.print()
        console.print("[bold]Operational:[/bold]")
        console.print(f"  Safe mode:           {settings.safe_mode}")
        console.print(f"  Log level:           {settings.log_level}")
        console.print()
        console.print("[bold]Timeouts (seconds):[/bold]")
        console.print(f"  Elevation timeout:   {settings.elevation_timeout}")
        console.print(f"  Hook timeout:        {settings.hook_timeout}")


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """List hosts profiles."""
    from sweethosts.profiles.store import dump_tree

    tree = _workspace(ctx).tree_store.load()
    if json_output:
        typer.echo(json.dumps(dump_tree(tree), indent=2, ensure_ascii=False))
        return
    if not tree:
        console.print("[yellow]No profiles found[/yellow]")
        return
    _print_tree(tree)


@app.command()
def show(
    ctx: typer.Context,
    profile_id: Annotated[str, typer.Argument(help="Profile ID to show")],
) -> None:
    """Print the hosts content of a profile."""
    content = _workspace(ctx).content_store.get(profile_id)
    if content is None:
        console.print(f"[red]No content for profile: {profile_id}[/red]")
        raise typer.Exit(code=1)
    typer.echo(content, nl=False)


@app.command()
def add(
    ctx: typer.Context,
    title: Annotated[str, typer.Argument(help="Profile title")],
    profile_id: Annotated[
        str | None,
        typer.Option("--id", help="Profile ID (generated if omitted)"),
    ] = None,
    folder: Annotated[
        bool,
        typer.Option("--folder", help="Create a folder"),
    ] = False,
    on: Annotated[
        bool,
        typer.Option("--on", help="Activate the profile"),
    ] = False,
    content_file: Annotated[
        Path | None,
        typer.Option("--content-file", "-c", help="File with initial hosts content"),
    ] = None,
) -> None:
    """Add a profile or folder at the top of the tree."""
    from sweethosts.profiles.service import ProfileExistsError, create_profile

    content = None
    if content_file is not None:
        try:
            content = content_file.read_text(encoding="utf-8")
        except OSError as e:
            console.print(f"[red]Cannot read {content_file}: {e}[/red]")
            raise typer.Exit(code=1) from None

    try:
        node = create_profile(
            _workspace(ctx),
            title,
            node_id=profile_id,
            folder=folder,
            on=on,
            content=content,
        )
    except ProfileExistsError as e:
        console.print(f"[red]Profile already exists: {e.node_id}[/red]")
        raise typer.Exit(code=1) from None
    console.print(f"[green]Created {'folder' if folder else 'profile'}: {node.id}[/green]")


@app.command()
def toggle(
    ctx: typer.Context,
    profile_id: Annotated[str, typer.Argument(help="Profile ID to toggle")],
) -> None:
    """Switch a profile on or off."""
    from sweethosts.profiles.service import toggle_profile

    node = toggle_profile(_workspace(ctx), profile_id)
    if node is None:
        console.print(f"[red]Profile not found: {profile_id}[/red]")
        raise typer.Exit(code=1)
    state = "[green]on[/green]" if node.on else "[dim]off[/dim]"
    console.print(f"{profile_id}: {state}")


@app.command()
def rename(
    ctx: typer.Context,
    profile_id: Annotated[str, typer.Argument(help="Profile ID")],
    title: Annotated[str, typer.Argument(help="New title")],
) -> None:
    """Rename a profile or folder."""
    from sweethosts.profiles.service import rename_profile

    if not rename_profile(_workspace(ctx), profile_id, title):
        console.print(f"[red]Profile not found: {profile_id}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Renamed {profile_id}[/green]")


@app.command()
def edit(
    ctx: typer.Context,
    profile_id: Annotated[str, typer.Argument(help="Profile ID")],
    path: Annotated[Path, typer.Argument(help="File with the new hosts content")],
) -> None:
    """Replace the hosts content of a profile."""
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Cannot read {path}: {e}[/red]")
        raise typer.Exit(code=1) from None
    if not _workspace(ctx).content_store.set(profile_id, content):
        console.print(f"[red]Failed to save content for {profile_id}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Saved content for {profile_id}[/green]")


@app.command("compose")
def compose_cmd(ctx: typer.Context) -> None:
    """Print the document built from the active profiles."""
    from sweethosts.profiles.compose import compose

    ws = _workspace(ctx)
    typer.echo(compose(ws.tree_store.load(), ws.content_store))


@app.command("apply")
def apply_cmd(
    ctx: typer.Context,
    ask_password: Annotated[
        bool,
        typer.Option(
            "--ask-password",
            "-p",
            help="Prompt for the sudo password if the direct write is denied",
        ),
    ] = False,
    run_hook: Annotated[
        bool,
        typer.Option("--run-hook/--no-run-hook", help="Run the post-apply command"),
    ] = True,
    raw: Annotated[
        bool,
        typer.Option(
            "--raw", help="Overwrite the hosts file with the composed profiles only"
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Apply the active profiles to the system hosts file."""
    from sweethosts.hooks import run_post_apply_command
    from sweethosts.system.apply import write_hosts_to_system
    from sweethosts.types import WriteMode

    ws = _workspace(ctx)
    write_mode = WriteMode.OVERWRITE if raw else None
    outcome = write_hosts_to_system(ws, write_mode=write_mode)

    if outcome.status is ApplyStatus.PERMISSION_DENIED and ask_password:
        password = typer.prompt(
            "Password", hide_input=True, default="", show_default=False, err=True
        )
        if password:
            outcome = write_hosts_to_system(
                ws, elevation_secret=password, write_mode=write_mode
            )

    record = None
    if outcome.status is ApplyStatus.INSTALLED and run_hook:
        record = run_post_apply_command(
            ws.preferences, ws.cmd_history, timeout=ws.settings.hook_timeout
        )

    if json_output:
        output = outcome.to_dict()
        output["hook"] = record.model_dump() if record else None
        typer.echo(json.dumps(output, indent=2))
    else:
        _print_outcome(outcome)
        if record is not None:
            status = "[green]ok[/green]" if record.success else "[red]failed[/red]"
            console.print(f"  Post-apply command: {status}")

    if not outcome.success:
        raise typer.Exit(code=1)


@app.command()
def refresh(ctx: typer.Context) -> None:
    """Compose the active profiles and write them as the whole hosts file."""
    from sweethosts.system.apply import refresh as refresh_hosts

    outcome = refresh_hosts(_workspace(ctx))
    _print_outcome(outcome)
    if not outcome.success:
        raise typer.Exit(code=1)


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Output file (.json, .yaml or .yml)")],
) -> None:
    """Export profiles, trash and history to a bundle file."""
    from sweethosts.profiles.io import export_data

    try:
        export_data(_workspace(ctx), path)
    except (ValueError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from None
    console.print(f"[green]Exported data to {path}[/green]")


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Bundle file (.json, .yaml or .yml)")],
) -> None:
    """Import profiles and trash from a bundle file."""
    from sweethosts.profiles.io import BundleImportError, import_data

    try:
        ok = import_data(_workspace(ctx), path)
    except BundleImportError as e:
        console.print(f"[red]Import failed: {e.message}[/red]")
        raise typer.Exit(code=1) from None
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from None
    if not ok:
        console.print("[red]Import failed: could not write data[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Imported data from {path}[/green]")


trash_app = typer.Typer(help="Manage the trash bin")
app.add_typer(trash_app, name="trash")


@trash_app.command("list")
def trash_list(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """List trashed profiles."""
    from sweethosts.profiles.trash import dump_trash

    entries = _workspace(ctx).trash_store.list()
    if json_output:
        typer.echo(json.dumps(dump_trash(entries), indent=2, ensure_ascii=False))
        return
    if not entries:
        console.print("[yellow]Trash is empty[/yellow]")
        return
    for entry in entries:
        console.print(
            f"  [green]{entry.data.id}[/green] {escape(entry.data.title or '')} "
            f"[dim](removed {entry.add_time_ms})[/dim]"
        )


@trash_app.command("move")
def trash_move(
    ctx: typer.Context,
    profile_ids: Annotated[list[str], typer.Argument(help="Top-level profile IDs")],
) -> None:
    """Move top-level profiles to the trash."""
    ws = _workspace(ctx)
    if len(profile_ids) == 1:
        ok = ws.trash_store.move_to_trash(profile_ids[0])
    else:
        ok = ws.trash_store.move_many_to_trash(profile_ids)
    if not ok:
        console.print("[red]Failed to update trash[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Moved {len(profile_ids)} profile(s) to trash[/green]")


@trash_app.command("restore")
def trash_restore(
    ctx: typer.Context,
    profile_id: Annotated[str, typer.Argument(help="Trashed profile ID")],
) -> None:
    """Restore a profile from the trash to the top of the tree."""
    if not _workspace(ctx).trash_store.restore_from_trash(profile_id):
        console.print(f"[red]Not in trash: {profile_id}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Restored {profile_id}[/green]")


@trash_app.command("delete")
def trash_delete(
    ctx: typer.Context,
    profile_id: Annotated[str, typer.Argument(help="Trashed profile ID")],
) -> None:
    """Permanently delete a profile from the trash."""
    if not _workspace(ctx).trash_store.delete_from_trash(profile_id):
        console.print(f"[red]Not in trash: {profile_id}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Deleted {profile_id}[/green]")


@trash_app.command("clear")
def trash_clear(ctx: typer.Context) -> None:
    """Empty the trash."""
    if not _workspace(ctx).trash_store.clear():
        console.print("[red]Failed to clear trash[/red]")
        raise typer.Exit(code=1)
    console.print("[green]Trash cleared[/green]")


history_app = typer.Typer(help="Inspect hosts history")
app.add_typer(history_app, name="history")


@history_app.command("list")
def history_list(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """List applied hosts documents, oldest first."""
    entries = _workspace(ctx).history.list()
    if json_output:
        typer.echo(json.dumps([e.model_dump() for e in entries], indent=2))
        return
    if not entries:
        console.print("[yellow]No history[/yellow]")
        return
    for entry in entries:
        lines = len(entry.content.splitlines())
        console.print(f"  [green]{entry.id}[/green] {lines} line(s)")


@history_app.command("show")
def history_show(
    ctx: typer.Context,
    entry_id: Annotated[str, typer.Argument(help="History entry ID")],
) -> None:
    """Print a history entry."""
    entry = _workspace(ctx).history.get(entry_id)
    if entry is None:
        console.print(f"[red]History entry not found: {entry_id}[/red]")
        raise typer.Exit(code=1)
    typer.echo(entry.content, nl=False)


@history_app.command("delete")
def history_delete(
    ctx: typer.Context,
    entry_id: Annotated[str, typer.Argument(help="History entry ID")],
) -> None:
    """Delete a history entry."""
    if not _workspace(ctx).history.delete(entry_id):
        console.print(f"[red]History entry not found: {entry_id}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Deleted {entry_id}[/green]")


cmd_history_app = typer.Typer(help="Inspect post-apply command runs")
app.add_typer(cmd_history_app, name="cmd-history")


@cmd_history_app.command("list")
def cmd_history_list(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """List post-apply command runs."""
    records = _workspace(ctx).cmd_history.list()
    if json_output:
        typer.echo(json.dumps([r.model_dump() for r in records], indent=2))
        return
    if not records:
        console.print("[yellow]No command history[/yellow]")
        return
    for r in records:
        status_color = "green" if r.success else "red"
        console.print(f"  [{status_color}]{r.id}[/{status_color}]")
        if r.stderr:
            console.print(f"    {r.stderr.strip()}")


@cmd_history_app.command("delete")
def cmd_history_delete(
    ctx: typer.Context,
    record_id: Annotated[str, typer.Argument(help="Record ID")],
) -> None:
    """Delete a command run record."""
    if not _workspace(ctx).cmd_history.delete(record_id):
        console.print(f"[red]Record not found: {record_id}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Deleted {record_id}[/green]")


@cmd_history_app.command("clear")
def cmd_history_clear(ctx: typer.Context) -> None:
    """Delete all command run records."""
    if not _workspace(ctx).cmd_history.clear():
        console.print("[red]Failed to clear command history[/red]")
        raise typer.Exit(code=1)
    console.print("[green]Command history cleared[/green]")


prefs_app = typer.Typer(help="Manage application preferences")
app.add_typer(prefs_app, name="prefs")


@prefs_app.command("list")
def prefs_list(ctx: typer.Context) -> None:
    """Show effective preferences."""
    typer.echo(json.dumps(_workspace(ctx).preferences.all(), indent=2))


@prefs_app.command("get")
def prefs_get(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Preference key")],
) -> None:
    """Show one preference value."""
    typer.echo(json.dumps(_workspace(ctx).preferences.get(key)))


@prefs_app.command("set")
def prefs_set(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Preference key")],
    value: Annotated[str, typer.Argument(help="Value (JSON, or a plain string)")],
) -> None:
    """Set one preference value."""
    try:
        parsed = json.loads(value)
    except ValueError:
        parsed = value
    if not _workspace(ctx).preferences.set(key, parsed):
        console.print(f"[red]Failed to save preference {key}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]{key} = {json.dumps(parsed)}[/green]")


if __name__ == "__main__":
    app()
