"""
Client Registry
Resolves the client behind a new contact and handles explicit registration.
"""

import logging
from typing import Callable, List, Optional

from supportdesk.bus.events import bus as default_bus, EVENT_CLIENT_CREATED
from supportdesk.db.connection import get_db_cursor
from supportdesk.db.stores import Stores
from supportdesk.exceptions import ClientNotFound
from supportdesk.logging_config import log_call
from supportdesk.models import Client

logger = logging.getLogger(__name__)


def resolve_client(
    client_store,
    client_id: Optional[int] = None,
    name: Optional[str] = None,
    email: Optional[str] = None,
) -> Client:
    """
    Existing client by id, or a transient one built from name/email.
    A transient client has id=None and is persisted by the caller's transaction.
    Raises ClientNotFound if client_id is given but unknown.
    """
    if client_id is None:
        return Client(name=name or '', email=email)

    client = client_store.find_by_id(client_id)
    if client is None:
        raise ClientNotFound(client_id)
    return client


class ClientService:
    """Client registration and listing, each call in its own transaction."""

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
    def create_client(self, name: str, email: Optional[str] = None) -> Client:
        """Always registers a fresh record."""
        if not name:
            raise ValueError("Client name is required")

        with self._transaction() as cur:
            client = self._stores(cur).clients.save(Client(name=name, email=email))

        self._bus.emit(EVENT_CLIENT_CREATED, {'client_id': client.id})
        return client

    def find_all_clients(self) -> List[Client]:
        with self._transaction() as cur:
            clients = self._stores(cur).clients.find_all()
        logger.debug(f"find_all_clients: {len(clients)} clients")
        return clients
