"""deary CLI - encrypted diary in a git repository."""

import logging
import signal
import sys

import click

from .config import load_config
from .errors import DearyError, EmptyEntry, EntryUnchanged
from .workflows import get_diary


def _exit_on_signal(signum, frame):
    # SystemExit unwinds through the workflows, so scratch files get released
    sys.exit(128 + signum)


def _install_signal_handlers() -> None:
    for sig in (signal.SIGTERM, signal.SIGHUP):
        signal.signal(sig, _exit_on_signal)


def _fail(e: DearyError) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(e.exit_code)


@click.group()
@click.version_option(package_name="deary")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """deary - encrypted diary kept in git."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )
    _install_signal_handlers()


@main.command()
@click.argument("key_id")
def init(key_id: str):
    """Initialize a new diary.

    KEY_ID is the GPG key ID (or email address associated with the key).
    """
    config = load_config()
    try:
        get_diary(config).init(key_id)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)
    except DearyError as e:
        _fail(e)
    click.echo(f"Initialized diary in {config.repo_dir}")


@main.command()
def create():
    """Create a new diary entry."""
    try:
        entry = get_diary(load_config()).create()
    except EmptyEntry as e:
        click.echo(str(e))
        return
    except DearyError as e:
        _fail(e)
    click.echo(f"Saved entry {entry.name}")


@main.command("list")
def list_cmd():
    """List diary entries."""
    try:
        names = get_diary(load_config()).list_entries()
    except DearyError as e:
        _fail(e)

    for name in names:
        click.echo(name)


@main.command()
@click.argument("name")
def show(name: str):
    """Show a diary entry."""
    try:
        text = get_diary(load_config()).show(name)
    except DearyError as e:
        _fail(e)
    click.get_binary_stream("stdout").write(text)


@main.command()
@click.argument("name")
def edit(name: str):
    """Edit a diary entry."""
    try:
        get_diary(load_config()).edit(name)
    except (EmptyEntry, EntryUnchanged) as e:
        click.echo(str(e))
        return
    except DearyError as e:
        _fail(e)
    click.echo(f"Updated entry {name}")


@main.command()
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def delete(name: str, yes: bool):
    """Delete a diary entry."""
    if not yes and not click.confirm(f"Delete entry {name}?"):
        return
    try:
        get_diary(load_config()).delete(name)
    except DearyError as e:
        _fail(e)
    click.echo(f"Deleted entry {name}")


@main.command("help")
@click.pass_context
def help_cmd(ctx):
    """Show this message."""
    click.echo(ctx.parent.get_help())


if __name__ == "__main__":
    main()
