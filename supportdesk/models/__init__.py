"""
Data Models
Dataclasses for all entities and request objects. Pure Python, no database logic.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

# Contact statuses
STATUS_OPEN = 'open'
STATUS_REPLIED = 'replied'
STATUS_CLOSED = 'closed'
CONTACT_STATUSES = (STATUS_OPEN, STATUS_REPLIED, STATUS_CLOSED)

# Notification addressee kinds
ADDRESSEE_SUPPORT = 'support'
ADDRESSEE_CLIENT = 'client'

# Notification events
NOTIFY_CONTACT_OPENED = 'contact_opened'
NOTIFY_CONTACT_CLOSED = 'contact_closed'


@dataclass
class Client:
    """Person raising support contacts. id=None means not yet persisted."""
    id: Optional[int] = None
    name: str = ''
    email: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_transient(self) -> bool:
        return self.id is None


@dataclass
class Support:
    """Support agent. Managed outside this package; only read here."""
    id: Optional[int] = None
    name: str = ''
    email: Optional[str] = None
    available: bool = False


@dataclass
class Contact:
    """A single support request from one client, handled by one support agent."""
    id: Optional[int] = None
    client_id: Optional[int] = None
    support_id: Optional[int] = None
    message: str = ''
    status: str = STATUS_OPEN
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class ContactAnalysis:
    """Outcome recorded when a support reply resolves a contact. Never updated."""
    contact_id: int
    resolved: bool
    notes: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass
class Notification:
    """
    Write-only record of a contact event, addressed to a support agent or a client.
    Use Notification.to_support / Notification.to_client rather than the constructor.
    """
    addressee_kind: str
    addressee_id: int
    contact_id: int
    event: str
    payload: Dict[str, Any] = field(default_factory=dict)
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def to_support(cls, support_id: int, contact_id: int, event: str, payload: Dict[str, Any]) -> 'Notification':
        return cls(ADDRESSEE_SUPPORT, support_id, contact_id, event, payload)

    @classmethod
    def to_client(cls, client_id: int, contact_id: int, event: str, payload: Dict[str, Any]) -> 'Notification':
        return cls(ADDRESSEE_CLIENT, client_id, contact_id, event, payload)


# =============================================================================
# REQUEST / VIEW OBJECTS
# =============================================================================

@dataclass
class ContactRequest:
    """Input for making a contact. Leave client_id unset to register a new client inline."""
    message: str
    client_id: Optional[int] = None
    client_name: Optional[str] = None
    client_email: Optional[str] = None


@dataclass
class ReplyRequest:
    """Input for replying to a contact's problem."""
    contact_id: int
    resolved: bool
    notes: Optional[str] = None


@dataclass
class ContactView:
    """A contact joined with its client, as returned by the find operations."""
    id: int
    status: str
    message: str
    client_id: int
    support_id: int
    client_name: str = ''
    client_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
