"""
Form Events

Synchronous listener registry used by forms and controls to deliver
input/change/submit/reset notifications to subscribed handlers.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]


class FormEvent(str, Enum):
    """Notifications a form or control can emit."""
    INPUT = "input"      # character-level edit of a text control
    CHANGE = "change"    # committed change of any control
    SUBMIT = "submit"
    RESET = "reset"


class EventEmitter:
    """
    Mixin holding per-event handler lists.

    Handlers receive the emitting object. A handler that raises is logged and
    does not prevent delivery to the remaining handlers.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Handler]] = {}

    def on(self, event: str, handler: Handler) -> None:
        """
        Subscribe a handler to an event.

        Subscribing the same handler twice to the same event is a no-op.
        """
        handlers = self._listeners.setdefault(FormEvent(event).value, [])
        if handler not in handlers:
            handlers.append(handler)

    def off(self, event: str, handler: Handler) -> None:
        """Unsubscribe a handler; no-op if it was not subscribed."""
        handlers = self._listeners.get(FormEvent(event).value, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str) -> None:
        """Deliver an event to every subscribed handler, in subscription order."""
        for handler in list(self._listeners.get(FormEvent(event).value, [])):
            try:
                handler(self)
            except Exception:
                logger.exception(f"{event} handler {handler!r} failed on {self!r}")

    def listener_count(self, event: Optional[str] = None) -> int:
        """Number of handlers for one event, or for all events."""
        if event is not None:
            return len(self._listeners.get(FormEvent(event).value, []))
        return sum(len(handlers) for handlers in self._listeners.values())
