"""
Event Bus - Post-commit lifecycle hooks
The contact service emits events only after its transaction has committed, so
listeners (notification delivery, audit, metrics) never see rolled-back work.
"""

from typing import Any, Callable, Dict, Iterable, List, Tuple
import logging

logger = logging.getLogger(__name__)

PendingEvent = Tuple[str, Dict[str, Any]]


class EventBus:
    """
    Simple synchronous event bus.
    A failing handler is logged and skipped; it never undoes committed work.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Callable]] = {}

    def on(self, event_name: str, handler: Callable):
        """
        Register a handler for an event.

        Args:
            event_name: Name of the event to listen for
            handler: Callable that receives event_data dict
        """
        self._handlers.setdefault(event_name, []).append(handler)
        logger.debug(f"Registered handler for event '{event_name}': {handler.__name__}")

    def off(self, event_name: str, handler: Callable):
        """Unregister a handler. Unknown handlers are ignored."""
        handlers = self._handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_name: str, event_data: Dict[str, Any] = None):
        """
        Emit an event to all registered handlers.

        Args:
            event_name: Name of the event
            event_data: Optional dict of data to pass to handlers
        """
        if event_data is None:
            event_data = {}

        logger.debug(f"Emitting event '{event_name}' with data: {event_data}")

        for handler in list(self._handlers.get(event_name, [])):
            try:
                handler(event_data)
            except Exception as e:
                logger.error(f"Error in handler {handler.__name__} for event '{event_name}': {e}")

    def emit_all(self, events: Iterable[PendingEvent]):
        """Emit a batch of (event_name, event_data) pairs in order."""
        for event_name, event_data in events:
            self.emit(event_name, event_data)

    def clear(self):
        """Clear all handlers (useful for testing)."""
        self._handlers.clear()


# Singleton instance
bus = EventBus()


# =============================================================================
# STANDARD EVENTS
# =============================================================================

EVENT_CLIENT_CREATED = 'client_created'
EVENT_CONTACT_OPENED = 'contact_opened'
EVENT_CONTACT_REPLIED = 'contact_replied'
EVENT_CONTACT_CLOSED = 'contact_closed'
EVENT_NOTIFICATION_RECORDED = 'notification_recorded'
