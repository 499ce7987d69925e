#!/usr/bin/env python3
"""
Support Desk Terminal CLI
Command-line interface for the contact workflow.
"""

import logging
import re
import sys
import click

from supportdesk.db.connection import apply_schema
from supportdesk.engine.clients import ClientService
from supportdesk.engine.contacts import ContactService
from supportdesk.exceptions import SupportDeskError
from supportdesk.logging_config import configure_logging, log_call
from supportdesk.models import ContactRequest, ReplyRequest

_EMAIL_RE = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')

client_service = ClientService()
contact_service = ContactService()


def _validate_email(ctx, param, value):
    if not value:
        return None
    if _EMAIL_RE.match(value):
        return value
    raise click.BadParameter(f"'{value}' is not a valid email address")


def _fail(exc: SupportDeskError):
    """Report a workflow error and exit non-zero."""
    logging.getLogger("supportdesk").warning(f"{type(exc).__name__}: {exc}")
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


@click.group()
def cli():
    """Support Desk - Customer Contact Workflow"""
    configure_logging()


@cli.command('init-db')
@log_call
def init_db():
    """Create the database tables"""
    apply_schema()
    click.echo("✓ Schema applied")


# =============================================================================
# CLIENTS COMMANDS
# =============================================================================

@cli.group()
def clients():
    """Manage clients"""
    pass


@clients.command('list')
@log_call
def clients_list():
    """List all clients"""
    results = client_service.find_all_clients()

    if not results:
        click.echo("No clients found.")
        return

    click.echo(f"\nFound {len(results)} clients:\n")
    click.echo(f"{'ID':<6} {'Name':<30} {'Email':<40}")
    click.echo("-" * 78)
    for c in results:
        click.echo(f"{c.id:<6} {c.name[:28]:<30} {(c.email or '')[:38]:<40}")


@clients.command('add')
@click.option('--name', prompt='Name', help='Client name')
@click.option('--email', prompt='Email', default='', show_default=False, callback=_validate_email, help='Client email')
@log_call
def clients_add(name, email):
    """Register a new client"""
    client = client_service.create_client(name=name, email=email)
    click.echo(f"\n✓ Created client #{client.id}: {client.name}")


# =============================================================================
# CONTACTS COMMANDS
# =============================================================================

@cli.group()
def contacts():
    """Make, inspect and reply to support contacts"""
    pass


@contacts.command('list')
@click.option('--status', type=click.Choice(['open', 'replied', 'closed']), help='Filter by status')
@log_call
def contacts_list(status):
    """List contacts, newest first"""
    results = contact_service.find_all()
    if status:
        results = [c for c in results if c.status == status]

    if not results:
        click.echo("No contacts found.")
        return

    click.echo(f"\nFound {len(results)} contacts:\n")
    click.echo(f"{'ID':<6} {'Client':<25} {'Support':<8} {'Status':<8} {'Message':<30}")
    click.echo("-" * 80)
    for c in results:
        click.echo(
            f"{c.id:<6} {c.client_name[:23]:<25} {c.support_id:<8} "
            f"{c.status:<8} {c.message[:30]:<30}"
        )


@contacts.command('show')
@click.argument('contact_id', type=int)
@log_call
def contacts_show(contact_id):
    """Show full contact details"""
    try:
        contact = contact_service.find_contact(contact_id)
    except SupportDeskError as exc:
        _fail(exc)

    click.echo(f"\n{'='*80}")
    click.echo(f"CONTACT #{contact.id} [{contact.status}]")
    click.echo(f"{'='*80}")
    click.echo(f"Client:      {contact.client_name} <{contact.client_email or 'no email'}> (#{contact.client_id})")
    click.echo(f"Support:     #{contact.support_id}")
    click.echo(f"Created:     {contact.created_at}")
    click.echo(f"Updated:     {contact.updated_at}")
    click.echo(f"\nMessage:\n{contact.message}")

    analyses = contact_service.find_analyses(contact_id)
    if analyses:
        click.echo(f"\n{'='*80}")
        click.echo("ANALYSIS")
        click.echo(f"{'='*80}")
        for a in analyses:
            click.echo(f"[{a.created_at}] resolved={a.resolved}")
            if a.notes:
                click.echo(f"  {a.notes}")

    click.echo()


@contacts.command('make')
@click.option('--message', prompt='Message', help='Problem description')
@click.option('--client-id', type=int, help='Existing client id')
@click.option('--name', help='New client name (when no --client-id)')
@click.option('--email', callback=_validate_email, help='New client email (when no --client-id)')
@log_call
def contacts_make(message, client_id, name, email):
    """Open a contact and assign an available support agent"""
    if client_id is None and not name:
        raise click.UsageError("Give either --client-id or --name for a new client")
    if client_id is not None and (name or email):
        raise click.UsageError("--client-id cannot be combined with --name or --email")

    request = ContactRequest(message=message, client_id=client_id, client_name=name, client_email=email)
    try:
        contact_id = contact_service.make_contact(request)
    except SupportDeskError as exc:
        _fail(exc)

    click.echo(f"\n✓ Opened contact #{contact_id}")


@contacts.command('reply')
@click.argument('contact_id', type=int)
@click.option('--resolved/--unresolved', default=True, help='Did the reply solve the problem?')
@click.option('--notes', default=None, help='Analyst notes (kept when resolved)')
@log_call
def contacts_reply(contact_id, resolved, notes):
    """Reply to a contact's problem and close it"""
    try:
        contact_service.reply_problem(ReplyRequest(contact_id=contact_id, resolved=resolved, notes=notes))
    except SupportDeskError as exc:
        _fail(exc)

    outcome = "resolved" if resolved else "unresolved"
    click.echo(f"\n✓ Closed contact #{contact_id} ({outcome})")


if __name__ == '__main__':
    cli()
