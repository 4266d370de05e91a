"""Click CLI application for AWS Profile Picker."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.console import Console

from aws_profile_picker import __version__
from aws_profile_picker.config import DEFAULT_BIN_PATH, AuthMethod, PickerConfig

# stdout is reserved for shell statements meant for eval
console = Console(stderr=True)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="aws-profile-picker")
@click.option(
    "--method", "-m",
    type=click.Choice([m.value for m in AuthMethod]),
    default=AuthMethod.NONE.value,
    envvar="AWS_PROFILE_PICKER_METHOD",
    help="Session tool that provides credentials.",
    show_default=True,
)
@click.option(
    "--bin-path", default=DEFAULT_BIN_PATH, envvar="AWS_PROFILE_PICKER_BIN_PATH",
    help="Search path for aws-vault / aws-sso.", show_default=True,
)
@click.option(
    "--cache", default=None, type=click.Path(dir_okay=False), envvar="AWS_PROFILE_PICKER_CACHE",
    help="File holding the selected profile.",
)
@click.option("--config-file", default=None, type=click.Path(dir_okay=False), help="AWS config file.")
@click.option(
    "--credentials-file", default=None, type=click.Path(dir_okay=False),
    help="AWS shared credentials file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    method: str,
    bin_path: str,
    cache: str | None,
    config_file: str | None,
    credentials_file: str | None,
    verbose: bool,
) -> None:
    """AWS Profile Picker - select a profile and activate its session.

    Run with no arguments to pick a profile interactively. Commands that change
    the environment print shell statements, use them as
    eval "$(aws-profile-picker select)".
    """
    ctx.ensure_object(dict)
    kwargs: dict = {
        "method": AuthMethod(method),
        "bin_path": bin_path,
        "config_file": Path(config_file) if config_file else None,
        "credentials_file": Path(credentials_file) if credentials_file else None,
        "verbose": verbose,
    }
    if cache:
        kwargs["cache_path"] = Path(cache)
    config = PickerConfig(**kwargs)
    _configure_logging(config.verbose)
    ctx.obj["config"] = config

    if ctx.invoked_subcommand is None:
        ctx.invoke(select)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)


def _build_selector(config: PickerConfig):
    from aws_profile_picker.commands import CommandRunner
    from aws_profile_picker.config_reader import ConfigReader
    from aws_profile_picker.environment import EnvironmentState
    from aws_profile_picker.selector import ProfileSelector
    from aws_profile_picker.state import SelectionCache

    return ProfileSelector(
        reader=ConfigReader(config.config_file, config.credentials_file),
        cache=SelectionCache(config.cache_path),
        runner=CommandRunner(config.bin_path),
        env=EnvironmentState(),
        method=config.method,
    )


def _render(selector) -> None:
    from aws_profile_picker.dropdown import build_entries, render_table

    entries = build_entries(selector.options, selector.active_sessions, selector.method)
    render_table(
        console, selector.options, entries, selector.active_sessions, selector.selected_profile
    )


@cli.command("list")
@click.pass_context
def list_profiles(ctx: click.Context) -> None:
    """Show configured profiles and their session state."""
    selector = _build_selector(ctx.obj["config"])
    selector.probe()
    _render(selector)


@cli.command()
@click.argument("profile", required=False)
@click.pass_context
def select(ctx: click.Context, profile: str | None) -> None:
    """Select PROFILE (or pick one interactively) and print its environment."""
    from aws_profile_picker.dropdown import build_entries, prompt_selection
    from aws_profile_picker.exceptions import UnknownProfileError

    selector = _build_selector(ctx.obj["config"])
    selector.probe()
    if not selector.options:
        raise click.ClickException("No AWS profiles found.")

    if profile is None:
        entries = build_entries(selector.options, selector.active_sessions, selector.method)
        profile = prompt_selection(entries, selector.selected_profile)
        if profile is None:
            console.print("[yellow]Selection cancelled.[/]")
            raise SystemExit(0)
        selector.subscribe(lambda: _render(selector))

    try:
        selector.select(profile)
    except UnknownProfileError as e:
        raise click.BadParameter(str(e), param_hint="PROFILE") from e

    click.echo(selector.env.to_shell())


@cli.command()
@click.pass_context
def env(ctx: click.Context) -> None:
    """Reconcile the saved selection and print its environment."""
    selector = _build_selector(ctx.obj["config"])
    selector.refresh()
    click.echo(selector.env.to_shell())


@cli.command()
@click.pass_context
def current(ctx: click.Context) -> None:
    """Print the selected profile."""
    selector = _build_selector(ctx.obj["config"])
    selector.probe()
    if selector.selected_profile is None:
        raise click.ClickException("No profile selected.")
    click.echo(selector.selected_profile)


@cli.command()
@click.pass_context
def whoami(ctx: click.Context) -> None:
    """Show the AWS identity of the selected profile."""
    from rich.table import Table

    from aws_profile_picker.exceptions import IdentityError
    from aws_profile_picker.identity import resolve_identity

    selector = _build_selector(ctx.obj["config"])
    selector.refresh()
    try:
        identity = resolve_identity(selector.env)
    except IdentityError as e:
        raise click.ClickException(str(e)) from e

    table = Table(title=f"Identity for {selector.selected_profile}", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Account", identity.account)
    table.add_row("ARN", identity.arn)
    table.add_row("User ID", identity.user_id)
    console.print(table)


@cli.command("list-methods")
def list_methods() -> None:
    """Show available session methods."""
    from rich.table import Table

    from aws_profile_picker.backends import BACKEND_REGISTRY, get_backend_class

    table = Table(title="Session Methods", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Executable", style="green")

    for method, meta in BACKEND_REGISTRY.items():
        executable = get_backend_class(method).executable or "-"
        table.add_row(method.value, meta.description, executable)

    console.print(table)
