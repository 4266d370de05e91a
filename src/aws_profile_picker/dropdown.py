"""Profile dropdown: rich table rendering and questionary selection prompt."""

from __future__ import annotations

from dataclasses import dataclass

import questionary
from rich.console import Console
from rich.table import Table

from aws_profile_picker.config import AuthMethod, ProfileDescriptor

ACTIVE_ICON = "🔓"
INACTIVE_ICON = "🔒"

# The dropdown is only useful when there is a choice to make
MIN_PROFILES_FOR_PROMPT = 2


@dataclass(frozen=True)
class DropdownEntry:
    """One row of the profile dropdown."""

    name: str
    title: str
    icon: str | None = None


def build_entries(
    profiles: list[ProfileDescriptor],
    active_sessions: list[str],
    method: AuthMethod,
) -> list[DropdownEntry]:
    """Dropdown rows. Icons show session state under the vault method only."""
    entries = []
    for profile in profiles:
        icon = None
        if method is AuthMethod.VAULT:
            icon = ACTIVE_ICON if profile.name in active_sessions else INACTIVE_ICON
        entries.append(DropdownEntry(name=profile.name, title=profile.name, icon=icon))
    return entries


def render_table(
    console: Console,
    profiles: list[ProfileDescriptor],
    entries: list[DropdownEntry],
    active_sessions: list[str],
    selected: str | None,
) -> None:
    """Print the profile list with region, source profile and session state."""
    if not entries:
        console.print("[yellow]No AWS profiles found.[/]")
        return

    by_name = {p.name: p for p in profiles}
    table = Table(title="AWS Profiles", show_header=True)
    table.add_column("", width=2)
    table.add_column("Profile", style="cyan")
    table.add_column("Region")
    table.add_column("Source profile", style="dim")
    table.add_column("Session", style="green")

    for entry in entries:
        profile = by_name[entry.name]
        marker = "→" if entry.name == selected else ""
        session = "active" if entry.name in active_sessions else ""
        title = f"{entry.icon} {entry.title}" if entry.icon else entry.title
        table.add_row(
            marker,
            title,
            profile.region or "-",
            profile.source_profile or "",
            session,
        )

    console.print(table)


def prompt_selection(entries: list[DropdownEntry], selected: str | None) -> str | None:
    """Ask the user to pick a profile. Returns None if the prompt is cancelled.

    With fewer than two entries there is nothing to choose and the only
    entry (or None) is returned without prompting.
    """
    if len(entries) < MIN_PROFILES_FOR_PROMPT:
        return entries[0].name if entries else None

    choices = [
        questionary.Choice(
            f"{entry.icon} {entry.title}" if entry.icon else entry.title,
            value=entry.name,
        )
        for entry in entries
    ]
    default = selected if any(e.name == selected for e in entries) else None
    return questionary.select(
        "Select AWS profile:",
        choices=choices,
        default=default,
    ).ask()
