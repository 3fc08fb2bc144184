from events.domain import EventId
from events.domain.errors import InvalidEventIdError


def parse_event_id(event_id: str | EventId) -> EventId:
    """Return ``event_id`` as an EventId.

    Raises:
        InvalidEventIdError: If the value is not a valid UUID.
    """
    if isinstance(event_id, EventId):
        return event_id
    try:
        return EventId.from_string(event_id)
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidEventIdError() from exc
