"""
Persistence Stores
Thin SQL stores over a psycopg2 RealDictCursor. A store never commits: the
caller owns the transaction (see supportdesk.db.connection.get_db_cursor).
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from psycopg2.extras import Json

from supportdesk.config import config
from supportdesk.models import (
    Client, Support, Contact, ContactAnalysis, ContactView, Notification,
)

logger = logging.getLogger(__name__)

_CONTACT_VIEW_SELECT = """
    SELECT c.id, c.status, c.message, c.client_id, c.support_id,
           c.created_at, c.updated_at,
           cl.name AS client_name, cl.email AS client_email
    FROM contacts c
    JOIN clients cl ON cl.id = c.client_id
"""


class ClientStore:

    def __init__(self, cur):
        self.cur = cur

    def find_by_id(self, client_id: int) -> Optional[Client]:
        self.cur.execute("SELECT id, name, email, created_at FROM clients WHERE id = %s", (client_id,))
        row = self.cur.fetchone()
        return Client(**row) if row else None

    def find_all(self) -> List[Client]:
        self.cur.execute("SELECT id, name, email, created_at FROM clients ORDER BY id")
        return [Client(**row) for row in self.cur.fetchall()]

    def save(self, client: Client) -> Client:
        """Insert when the client has no id yet, otherwise update name/email."""
        if client.id is None:
            self.cur.execute("""
                INSERT INTO clients (name, email, created_at)
                VALUES (%(name)s, %(email)s, NOW())
                RETURNING id, created_at
            """, {'name': client.name, 'email': client.email})
            row = self.cur.fetchone()
            logger.info(f"Created client ID {row['id']}: {client.name}")
            return replace(client, id=row['id'], created_at=row['created_at'])

        self.cur.execute("""
            UPDATE clients SET name = %(name)s, email = %(email)s
            WHERE id = %(id)s
        """, {'id': client.id, 'name': client.name, 'email': client.email})
        return client


class SupportStore:

    def __init__(self, cur, skip_locked: Optional[bool] = None):
        self.cur = cur
        self.skip_locked = config.SUPPORT_SELECTION_SKIP_LOCKED if skip_locked is None else skip_locked

    def find_first_available(self) -> Optional[Support]:
        """
        Lowest-id available agent. With skip_locked the row stays locked until the
        enclosing transaction ends, so concurrent callers get different agents.
        """
        lock = " FOR UPDATE SKIP LOCKED" if self.skip_locked else ""
        self.cur.execute(f"""
            SELECT id, name, email, available FROM supports
            WHERE available
            ORDER BY id
            LIMIT 1{lock}
        """)
        row = self.cur.fetchone()
        return Support(**row) if row else None


class ContactStore:

    def __init__(self, cur):
        self.cur = cur

    def find_by_id(self, contact_id: int) -> Optional[Contact]:
        self.cur.execute("""
            SELECT id, client_id, support_id, message, status, created_at, updated_at
            FROM contacts WHERE id = %s
        """, (contact_id,))
        row = self.cur.fetchone()
        return Contact(**row) if row else None

    def find_all(self) -> List[Contact]:
        self.cur.execute("""
            SELECT id, client_id, support_id, message, status, created_at, updated_at
            FROM contacts ORDER BY id
        """)
        return [Contact(**row) for row in self.cur.fetchall()]

    def find_view_by_id(self, contact_id: int) -> Optional[ContactView]:
        self.cur.execute(_CONTACT_VIEW_SELECT + " WHERE c.id = %s", (contact_id,))
        row = self.cur.fetchone()
        return ContactView(**row) if row else None

    def find_all_views(self) -> List[ContactView]:
        self.cur.execute(_CONTACT_VIEW_SELECT + " ORDER BY c.created_at DESC, c.id DESC")
        rows = self.cur.fetchall()
        logger.debug(f"find_all_views: {len(rows)} contacts")
        return [ContactView(**row) for row in rows]

    def save(self, contact: Contact) -> Contact:
        """Insert a new contact, or persist the status of an existing one."""
        if contact.id is None:
            self.cur.execute("""
                INSERT INTO contacts (client_id, support_id, message, status, created_at, updated_at)
                VALUES (%(client_id)s, %(support_id)s, %(message)s, %(status)s,
                        COALESCE(%(created_at)s, NOW()), NOW())
                RETURNING id, created_at, updated_at
            """, {
                'client_id': contact.client_id,
                'support_id': contact.support_id,
                'message': contact.message,
                'status': contact.status,
                'created_at': contact.created_at,
            })
            row = self.cur.fetchone()
            logger.info(f"Created contact ID {row['id']} for client {contact.client_id}")
            return replace(contact, id=row['id'], created_at=row['created_at'], updated_at=row['updated_at'])

        self.cur.execute("""
            UPDATE contacts SET status = %(status)s, updated_at = NOW()
            WHERE id = %(id)s
            RETURNING updated_at
        """, {'id': contact.id, 'status': contact.status})
        row = self.cur.fetchone()
        logger.info(f"Contact ID {contact.id} is now {contact.status}")
        return replace(contact, updated_at=row['updated_at']) if row else contact


class ContactAnalysisStore:

    def __init__(self, cur):
        self.cur = cur

    def save(self, analysis: ContactAnalysis) -> ContactAnalysis:
        """Insert only; analyses are immutable once recorded."""
        self.cur.execute("""
            INSERT INTO contact_analyses (contact_id, resolved, notes, created_at)
            VALUES (%(contact_id)s, %(resolved)s, %(notes)s, NOW())
            RETURNING id, created_at
        """, {'contact_id': analysis.contact_id, 'resolved': analysis.resolved, 'notes': analysis.notes})
        row = self.cur.fetchone()
        logger.info(f"Recorded analysis ID {row['id']} for contact {analysis.contact_id}")
        return replace(analysis, id=row['id'], created_at=row['created_at'])

    def find_by_contact(self, contact_id: int) -> List[ContactAnalysis]:
        self.cur.execute("""
            SELECT id, contact_id, resolved, notes, created_at
            FROM contact_analyses WHERE contact_id = %s ORDER BY id
        """, (contact_id,))
        return [ContactAnalysis(**row) for row in self.cur.fetchall()]


class NotificationStore:

    def __init__(self, cur):
        self.cur = cur

    def save(self, notification: Notification) -> Notification:
        self.cur.execute("""
            INSERT INTO notifications (addressee_kind, addressee_id, contact_id, event, payload, created_at)
            VALUES (%(addressee_kind)s, %(addressee_id)s, %(contact_id)s, %(event)s, %(payload)s, NOW())
            RETURNING id, created_at
        """, {
            'addressee_kind': notification.addressee_kind,
            'addressee_id': notification.addressee_id,
            'contact_id': notification.contact_id,
            'event': notification.event,
            'payload': Json(notification.payload),
        })
        row = self.cur.fetchone()
        logger.info(
            f"Recorded {notification.event} notification ID {row['id']} "
            f"for {notification.addressee_kind} {notification.addressee_id}"
        )
        return replace(notification, id=row['id'], created_at=row['created_at'])

    def find_by_contact(self, contact_id: int) -> List[Notification]:
        self.cur.execute("""
            SELECT id, addressee_kind, addressee_id, contact_id, event, payload, created_at
            FROM notifications WHERE contact_id = %s ORDER BY id
        """, (contact_id,))
        return [Notification(**row) for row in self.cur.fetchall()]


@dataclass
class Stores:
    """All stores sharing one cursor, hence one transaction."""
    clients: ClientStore
    supports: SupportStore
    contacts: ContactStore
    analyses: ContactAnalysisStore
    notifications: NotificationStore

    @classmethod
    def from_cursor(cls, cur) -> 'Stores':
        return cls(
            clients=ClientStore(cur),
            supports=SupportStore(cur),
            contacts=ContactStore(cur),
            analyses=ContactAnalysisStore(cur),
            notifications=NotificationStore(cur),
        )
