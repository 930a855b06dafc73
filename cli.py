"""CLI commands for invitation and guest list management."""

import asyncio
from datetime import datetime, time
from uuid import UUID

import typer
from sqlalchemy import select

from src.clock import utcnow
from src.config.database import async_session_manager
from src.errors import DomainError
from src.guests.dtos import ContactDTO, GuestKind, build_allocation
from src.guests.features.manage_guests.write_model import SqlGuestWriteModel
from src.guests.links import get_link_builder
from src.invitations.dtos import InvitationFieldsDTO
from src.invitations.features.manage_invitation.write_model import SqlInvitationWriteModel
from src.invitations.repository.orm_models import Template
from src.invitations.repository.read_models import SqlInvitationReadModel
from src.invitations.templates import seed_templates as seed_builtin_templates

app = typer.Typer(help="CLI commands for invitation and RSVP management")


def _fail(error: DomainError) -> None:
    typer.secho(error.message, fg=typer.colors.RED)
    raise typer.Exit(1)


@app.command()
def seed_templates():
    """Create or refresh the built-in invitation templates."""

    async def _seed():
        async with async_session_manager() as session:
            return await seed_builtin_templates(session)

    created = asyncio.run(_seed())
    if created:
        typer.secho(f"Created templates: {', '.join(created)}", fg=typer.colors.GREEN)
    else:
        typer.secho("Templates already up to date.", fg=typer.colors.YELLOW)


@app.command()
def create_invitation(
    event_name: str = typer.Argument(..., help="Name of the event"),
    host_name: str = typer.Argument(..., help="Name of the host"),
    venue_name: str = typer.Option(..., "--venue", "-v", help="Venue name"),
    event_date: datetime = typer.Option(..., "--date", "-d", formats=["%Y-%m-%d"], help="Event date"),
    event_time: str = typer.Option("19:00", "--time", "-t", help="Event time (HH:MM)"),
    capacity: int = typer.Option(..., "--capacity", "-c", min=0, help="Total seats"),
    template_key: str = typer.Option("grad_modern_01", "--template", help="Template key"),
    deadline: datetime = typer.Option(
        None, "--deadline", formats=["%Y-%m-%d"], help="Last day to RSVP"
    ),
):
    """Create a draft invitation."""

    async def _create():
        async with async_session_manager(auto_commit=False) as session:
            template_id = await session.scalar(select(Template.uuid).where(Template.key == template_key))
        if template_id is None:
            raise ValueError(f"Template not found: {template_key}")
        fields = InvitationFieldsDTO(
            template_id=template_id,
            event_name=event_name,
            host_name=host_name,
            venue_name=venue_name,
            event_date=event_date.date(),
            event_time=time.fromisoformat(event_time),
            capacity=capacity,
            rsvp_deadline_at=deadline.date() if deadline else None,
        )
        return await SqlInvitationWriteModel().create_invitation(fields)

    try:
        invitation = asyncio.run(_create())
    except DomainError as e:
        _fail(e)
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Invitation created (draft)!", fg=typer.colors.GREEN)
    typer.secho(f"  ID: {invitation.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Slug: {invitation.slug}", fg=typer.colors.CYAN)
    typer.secho(f"  Capacity: {invitation.capacity}", fg=typer.colors.BLUE)


@app.command()
def add_guest(
    invitation_id: str = typer.Argument(..., help="Invitation UUID"),
    display_name: str = typer.Argument(..., help="Name shown on the invitation"),
    group: bool = typer.Option(False, "--group", "-g", help="Add a group instead of an individual"),
    seats: int = typer.Option(None, "--seats", "-s", help="Seats for a group"),
    plus_one: bool = typer.Option(False, "--plus-one", "-p", help="Allow an individual a plus-one"),
    phone: str = typer.Option(None, "--phone", help="Contact phone, used for WhatsApp links"),
    members: list[str] = typer.Option([], "--member", "-m", help="Member name, repeatable"),
):
    """Add an individual or a group to an invitation's guest list."""

    async def _add():
        allocation = build_allocation(
            GuestKind.GROUP if group else GuestKind.INDIVIDUAL,
            allow_plus_one=plus_one,
            seats_reserved=seats,
            member_names=members,
        )
        return await SqlGuestWriteModel().create_guest(
            UUID(invitation_id),
            allocation,
            ContactDTO(display_name=display_name, contact_phone=phone),
        )

    try:
        guest = asyncio.run(_add())
    except DomainError as e:
        _fail(e)

    typer.secho("Guest added!", fg=typer.colors.GREEN)
    typer.secho(f"  Guest ID: {guest.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Type: {guest.kind.value}", fg=typer.colors.BLUE)
    typer.secho(f"  Seats reserved: {guest.seats_reserved}", fg=typer.colors.BLUE)


@app.command()
def publish(
    invitation_id: str = typer.Argument(..., help="Invitation UUID"),
    unpublish: bool = typer.Option(False, "--unpublish", help="Take the invitation back to draft"),
):
    """Publish an invitation, or take it back to draft."""
    write_model = SqlInvitationWriteModel()
    action = write_model.unpublish if unpublish else write_model.publish
    try:
        invitation = asyncio.run(action(UUID(invitation_id)))
    except DomainError as e:
        _fail(e)

    typer.secho(f"Invitation {invitation.slug} is now {invitation.status.value}.", fg=typer.colors.GREEN)


def _load_detail(invitation_id: str):
    read_model = SqlInvitationReadModel(link_builder=get_link_builder())
    detail = asyncio.run(read_model.get_invitation_detail(UUID(invitation_id), utcnow()))
    if detail is None:
        typer.secho(f"Invitation not found: {invitation_id}", fg=typer.colors.RED)
        raise typer.Exit(1)
    return detail


@app.command()
def links(invitation_id: str = typer.Argument(..., help="Invitation UUID")):
    """Print the preview, signed RSVP and WhatsApp links of every guest."""
    detail = _load_detail(invitation_id)

    if not detail.guests:
        typer.secho("No guests yet.", fg=typer.colors.YELLOW)
    for item in detail.guests:
        typer.secho(f"{item.guest.display_name} ({item.guest.status.value})", fg=typer.colors.GREEN)
        typer.secho(f"  Preview: {item.links.preview_url}", fg=typer.colors.CYAN)
        typer.secho(f"  RSVP: {item.links.rsvp_url}", fg=typer.colors.CYAN)
        typer.secho(f"  WhatsApp: {item.links.whatsapp_url}", fg=typer.colors.BLUE)


@app.command()
def stats(invitation_id: str = typer.Argument(..., help="Invitation UUID")):
    """Show seat and response counts for an invitation."""
    detail = _load_detail(invitation_id)
    seat_stats = detail.stats

    invitation = detail.invitation
    typer.secho(f"{invitation.event_name} ({invitation.status.value})", fg=typer.colors.GREEN)
    typer.secho(f"  Capacity: {seat_stats.capacity}", fg=typer.colors.BLUE)
    typer.secho(f"  Reserved: {seat_stats.reserved_seats}", fg=typer.colors.BLUE)
    typer.secho(f"  Confirmed: {seat_stats.confirmed_seats}", fg=typer.colors.BLUE)
    typer.secho(f"  Remaining: {seat_stats.remaining_seats}", fg=typer.colors.CYAN)
    typer.secho(
        f"  Guests: {seat_stats.pending_guests} pending, "
        f"{seat_stats.confirmed_guests} confirmed, {seat_stats.declined_guests} declined",
        fg=typer.colors.MAGENTA,
    )
    if invitation.rsvp_deadline_at:
        typer.secho(f"  RSVP deadline: {invitation.rsvp_deadline_at}", fg=typer.colors.YELLOW)


if __name__ == "__main__":
    app()
