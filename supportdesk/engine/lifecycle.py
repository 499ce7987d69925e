"""
Contact Lifecycle
State machine for a single contact plus the notifications emitted at its
transitions. Pure functions: nothing here touches the database.

    open ──► replied ──► closed
      └──────────────────►┘
"""

from dataclasses import replace
from datetime import datetime
from typing import Dict, Optional, Set
from zoneinfo import ZoneInfo

from supportdesk.config import config
from supportdesk.exceptions import InvalidTransition
from supportdesk.models import (
    Client, Support, Contact, Notification,
    STATUS_OPEN, STATUS_REPLIED, STATUS_CLOSED,
    NOTIFY_CONTACT_OPENED, NOTIFY_CONTACT_CLOSED,
)

TRANSITIONS: Dict[str, Set[str]] = {
    STATUS_OPEN: {STATUS_REPLIED, STATUS_CLOSED},
    STATUS_REPLIED: {STATUS_CLOSED},
    STATUS_CLOSED: set(),
}


def _now() -> datetime:
    return datetime.now(ZoneInfo(config.TIMEZONE))


def _move(contact: Contact, target: str) -> Contact:
    if target not in TRANSITIONS.get(contact.status, set()):
        raise InvalidTransition(contact.id, contact.status, target)
    return replace(contact, status=target)


def open_contact(client: Client, support: Support, message: str, now: Optional[datetime] = None) -> Contact:
    """New contact in state open. The client must already be persisted."""
    if client.id is None:
        raise ValueError("Client must be saved before a contact can reference it")
    return Contact(
        client_id=client.id,
        support_id=support.id,
        message=message,
        status=STATUS_OPEN,
        created_at=now or _now(),
    )


def mark_replied(contact: Contact) -> Contact:
    return _move(contact, STATUS_REPLIED)


def close_contact(contact: Contact) -> Contact:
    return _move(contact, STATUS_CLOSED)


def _payload(contact: Contact) -> Dict[str, object]:
    preview = contact.message[:config.NOTIFICATION_PREVIEW_CHARS]
    return {
        'contact_id': contact.id,
        'status': contact.status,
        'message_preview': preview,
    }


def notification_to_support(contact: Contact) -> Notification:
    """Tell the assigned agent a new contact is waiting."""
    return Notification.to_support(contact.support_id, contact.id, NOTIFY_CONTACT_OPENED, _payload(contact))


def notification_to_client(contact: Contact) -> Notification:
    """Tell the client their contact has been closed."""
    return Notification.to_client(contact.client_id, contact.id, NOTIFY_CONTACT_CLOSED, _payload(contact))
