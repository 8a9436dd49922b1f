"""In-process domain events.

Registries publish after a write has committed. Every event is logged and
kept in ``EVENT_BUFFER``, which holds only the most recent
``EVENT_BUFFER_LIMIT`` events. Callers that want to react to writes
register with ``subscribe``; a failing subscriber is logged and never
undoes or interrupts the write that published the event.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, List

logger = logging.getLogger(__name__)

CATEGORY_DEACTIVATED = "category.deactivated"
QUESTION_DEACTIVATED = "question.deactivated"
RESPONSE_SAVED = "response.saved"
RESPONSE_DELETED = "response.deleted"
QUESTIONNAIRE_SEEDED = "questionnaire.seeded"

Event = Dict[str, Any]
Subscriber = Callable[[Event], None]

EVENT_BUFFER_LIMIT = 1000
EVENT_BUFFER: Deque[Event] = deque(maxlen=EVENT_BUFFER_LIMIT)
_SUBSCRIBERS: List[Subscriber] = []


def subscribe(handler: Subscriber) -> Callable[[], None]:
    """Register ``handler`` for every published event; returns an unsubscribe callable."""
    _SUBSCRIBERS.append(handler)

    def unsubscribe() -> None:
        if handler in _SUBSCRIBERS:
            _SUBSCRIBERS.remove(handler)

    return unsubscribe


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    event = {"type": event_type, "payload": payload}
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append(event)
    for handler in list(_SUBSCRIBERS):
        try:
            handler(event)
        except Exception:
            logger.error("event_subscriber_failed type=%s handler=%r", event_type, handler, exc_info=True)


def get_buffered_events(clear: bool = True) -> List[Event]:
    """Return buffered events, draining the buffer unless ``clear`` is False."""
    events = list(EVENT_BUFFER)
    if clear:
        EVENT_BUFFER.clear()
    return events


__all__ = [
    "CATEGORY_DEACTIVATED",
    "QUESTION_DEACTIVATED",
    "RESPONSE_SAVED",
    "RESPONSE_DELETED",
    "QUESTIONNAIRE_SEEDED",
    "EVENT_BUFFER",
    "EVENT_BUFFER_LIMIT",
    "publish",
    "subscribe",
    "get_buffered_events",
]
