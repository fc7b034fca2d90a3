"""CLI commands for the Sargaux wedding backend."""

import asyncio

import typer
import uvicorn

from src.calendar_feed.ics import build_ics
from src.calendar_feed.router import calendar_subscription_url, load_guest_occurrences
from src.calendar_feed.tokens import CalendarSecretMissingError, CalendarTokenCodec
from src.config.backend import get_backend_mode
from src.config.features import FEATURE_ENV_VARS, get_features
from src.config.settings import settings
from src.dependencies import get_event_read_model, get_guest_directory
from src.guests.dtos import GuestNotFoundError

app = typer.Typer(help="CLI commands for the Sargaux wedding backend")


@app.command()
def calendar_token(
    guest_id: str = typer.Argument(
        ...,
        help="Notion page id of the guest",
    ),
):
    """Mint a calendar subscription token and link for a guest."""
    try:
        token = CalendarTokenCodec().generate(guest_id)
    except CalendarSecretMissingError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(f"Token: {token}", fg=typer.colors.CYAN)
    typer.secho(f"Subscribe URL: {calendar_subscription_url(token)}", fg=typer.colors.BLUE)


@app.command()
def verify_token(
    token: str = typer.Argument(
        ...,
        help="Calendar token to check",
    ),
):
    """Check a calendar token and print the guest id it carries."""
    guest_id = CalendarTokenCodec().verify(token)
    if guest_id is None:
        typer.secho("Invalid token", fg=typer.colors.RED)
        raise typer.Exit(1)
    typer.secho(f"Guest ID: {guest_id}", fg=typer.colors.GREEN)


@app.command()
def feed(
    guest_id: str = typer.Argument(
        ...,
        help="Notion page id of the guest",
    ),
):
    """Print the ICS feed a guest's calendar app would receive."""
    if not get_backend_mode().is_notion:
        typer.secho("The calendar feed needs the Notion backend", fg=typer.colors.YELLOW)

    # Typer doesn't support async directly, so use asyncio.run
    occurrences = asyncio.run(load_guest_occurrences(guest_id, get_event_read_model()))
    typer.echo(build_ics(occurrences))


@app.command()
def list_guests():
    """List the guests who can log in."""
    guests = asyncio.run(get_guest_directory().list_guests())

    typer.secho(f"{len(guests)} guests ({get_backend_mode().kind.value} backend)", fg=typer.colors.GREEN)
    for guest in guests:
        invitations = ", ".join(wedding.value for wedding in guest.event_invitations)
        plus_one = " (+1)" if guest.is_plus_one else ""
        typer.secho(f"  - {guest.name}{plus_one} [{invitations}] {guest.id or ''}", fg=typer.colors.BLUE)


@app.command()
def show_party(
    guest_id: str = typer.Argument(
        ...,
        help="Notion page id of the guest",
    ),
):
    """Show a guest and the rest of their party."""
    try:
        party = asyncio.run(get_guest_directory().get_party(guest_id))
    except GuestNotFoundError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    for member in party:
        label = " (current)" if member.id == guest_id else ""
        plus_one = " (+1)" if member.is_plus_one else ""
        typer.secho(f"  - {member.name}{plus_one}{label}", fg=typer.colors.BLUE)


@app.command()
def features():
    """Show resolved feature flags and the variables that override them."""
    flags = get_features()
    for (group, field), env_var in FEATURE_ENV_VARS.items():
        value = getattr(getattr(flags, group), field)
        color = typer.colors.GREEN if value else typer.colors.YELLOW
        typer.secho(f"  {group.rstrip('_')}.{field} = {value}  ({env_var})", fg=color)


@app.command()
def serve(
    reload: bool = typer.Option(False, help="Restart on code changes"),
):
    """Run the API on the configured host and port."""
    typer.secho(f"Serving on http://{settings.app_host}:{settings.app_port}", fg=typer.colors.GREEN)
    uvicorn.run("src.main:app", host=settings.app_host, port=settings.app_port, reload=reload)


if __name__ == "__main__":
    app()
