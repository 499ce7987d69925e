"""
Support Desk Errors
Every failure a caller is expected to handle derives from SupportDeskError.
None of them are retried; the enclosing transaction is rolled back.
"""


class SupportDeskError(Exception):
    """Base class for contact workflow failures."""


class NoSupportAvailable(SupportDeskError):
    """No support agent is currently marked available."""

    def __init__(self):
        super().__init__("No support available")


class ClientNotFound(SupportDeskError):
    def __init__(self, client_id: int):
        self.client_id = client_id
        super().__init__(f"Client {client_id} not found")


class ContactNotFound(SupportDeskError):
    def __init__(self, contact_id: int):
        self.contact_id = contact_id
        super().__init__(f"Contact {contact_id} not found")


class InvalidTransition(SupportDeskError):
    """A contact was asked to move to a status its current status does not allow."""

    def __init__(self, contact_id, current: str, target: str):
        self.contact_id = contact_id
        self.current = current
        self.target = target
        super().__init__(f"Contact {contact_id} cannot go from '{current}' to '{target}'")
