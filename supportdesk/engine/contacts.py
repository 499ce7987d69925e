"""
Contact Service - Workflow orchestration
Makes contacts and replies to them. Each write operation runs in exactly one
transaction; bus events go out only after that transaction commits.
"""

import logging
from typing import Callable, List

from supportdesk.bus.events import (
    bus as default_bus,
    EVENT_CONTACT_OPENED, EVENT_CONTACT_REPLIED, EVENT_CONTACT_CLOSED,
    EVENT_NOTIFICATION_RECORDED,
)
from supportdesk.db.connection import get_db_cursor
from supportdesk.db.stores import Stores
from supportdesk.engine import lifecycle
from supportdesk.engine.clients import resolve_client
from supportdesk.engine.support import pick_available_support
from supportdesk.exceptions import ContactNotFound
from supportdesk.logging_config import log_call
from supportdesk.models import (
    ContactAnalysis, ContactRequest, ContactView, Notification, ReplyRequest,
)

logger = logging.getLogger(__name__)


def _notification_event(notification: Notification):
    return (EVENT_NOTIFICATION_RECORDED, {
        'notification_id': notification.id,
        'addressee_kind': notification.addressee_kind,
        'addressee_id': notification.addressee_id,
        'contact_id': notification.contact_id,
        'event': notification.event,
    })


class ContactService:
    """
    Contact workflow.

    Args:
        transaction: context manager factory yielding a cursor; commits on clean
            exit and rolls back on any exception
        stores: builds a Stores bundle over that cursor
        event_bus: receives post-commit events
    """

    def __init__(
        self,
        transaction: Callable = get_db_cursor,
        stores: Callable = Stores.from_cursor,
        event_bus=default_bus,
    ):
        self._transaction = transaction
        self._stores = stores
        self._bus = event_bus

    @log_call
    def make_contact(self, request: ContactRequest) -> int:
        """
        Open a contact for a client and assign the first available support agent.
        Returns the new contact id.
        Raises ClientNotFound, NoSupportAvailable.
        """
        if not request.message:
            raise ValueError("Contact message is required")

        with self._transaction() as cur:
            stores = self._stores(cur)

            client = resolve_client(
                stores.clients, request.client_id, request.client_name, request.client_email,
            )
            support = pick_available_support(stores.supports)
            if client.is_transient:
                client = stores.clients.save(client)

            contact = stores.contacts.save(lifecycle.open_contact(client, support, request.message))
            notification = stores.notifications.save(lifecycle.notification_to_support(contact))

        logger.info(f"Contact {contact.id} opened for client {client.id}, assigned to support {support.id}")
        self._bus.emit_all([
            (EVENT_CONTACT_OPENED, {
                'contact_id': contact.id,
                'client_id': client.id,
                'support_id': support.id,
            }),
            _notification_event(notification),
        ])
        return contact.id

    @log_call
    def reply_problem(self, request: ReplyRequest) -> None:
        """
        Record the support reply and close the contact.
        An analysis is stored only when the reply resolved the problem; the
        contact is closed either way.
        Raises ContactNotFound, InvalidTransition.
        """
        events = []

        with self._transaction() as cur:
            stores = self._stores(cur)

            contact = stores.contacts.find_by_id(request.contact_id)
            if contact is None:
                raise ContactNotFound(request.contact_id)

            if request.resolved:
                contact = stores.contacts.save(lifecycle.mark_replied(contact))
                analysis = stores.analyses.save(
                    ContactAnalysis(contact_id=contact.id, resolved=True, notes=request.notes)
                )
                events.append((EVENT_CONTACT_REPLIED, {
                    'contact_id': contact.id,
                    'analysis_id': analysis.id,
                }))

            contact = stores.contacts.save(lifecycle.close_contact(contact))
            notification = stores.notifications.save(lifecycle.notification_to_client(contact))

        logger.info(f"Contact {contact.id} closed (resolved={request.resolved})")
        events.append((EVENT_CONTACT_CLOSED, {
            'contact_id': contact.id,
            'client_id': contact.client_id,
            'resolved': request.resolved,
        }))
        events.append(_notification_event(notification))
        self._bus.emit_all(events)

    def find_contact(self, contact_id: int) -> ContactView:
        """Raises ContactNotFound."""
        with self._transaction() as cur:
            view = self._stores(cur).contacts.find_view_by_id(contact_id)
        if view is None:
            raise ContactNotFound(contact_id)
        return view

    def find_all(self) -> List[ContactView]:
        with self._transaction() as cur:
            return self._stores(cur).contacts.find_all_views()

    def find_analyses(self, contact_id: int) -> List[ContactAnalysis]:
        with self._transaction() as cur:
            return self._stores(cur).analyses.find_by_contact(contact_id)
