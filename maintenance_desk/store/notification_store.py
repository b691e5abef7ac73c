"""
In-memory notification feed, most recent first.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from maintenance_desk.models import Notification, NotificationCreate
from maintenance_desk.security.error_handler import NotFoundError, from_pydantic
from maintenance_desk.store.ticket_store import Clock, parse_input, utc_now

logger = logging.getLogger(__name__)

_NOTIFICATIONS_ADAPTER = TypeAdapter(List[Notification])


class NotificationStore:
    """
    User-facing alert feed with read/unread state.

    The unread count is always derived from the current list, never cached.
    """

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._notifications: Tuple[Notification, ...] = ()

    @property
    def notifications(self) -> Tuple[Notification, ...]:
        return self._notifications

    @property
    def unread_count(self) -> int:
        return sum(1 for notification in self._notifications if not notification.read)

    def __len__(self) -> int:
        return len(self._notifications)

    def add(self, data: Union[NotificationCreate, Dict[str, Any]]) -> Notification:
        payload = parse_input(NotificationCreate, data)
        notification = Notification(
            **payload.model_dump(),
            id=str(uuid.uuid4()),
            read=False,
            created_at=self._clock(),
        )
        self._notifications = (notification,) + self._notifications
        logger.debug("Notification %s added (%s)", notification.id, notification.type.value)
        return notification

    def mark_as_read(self, notification_id: str) -> Notification:
        current = self._find(notification_id)
        if current is None:
            raise NotFoundError("Notification", notification_id)
        updated = current.model_copy(update={"read": True})
        self._notifications = tuple(
            updated if n.id == notification_id else n for n in self._notifications
        )
        return updated

    def mark_all_as_read(self) -> None:
        self._notifications = tuple(
            n if n.read else n.model_copy(update={"read": True}) for n in self._notifications
        )

    def clear(self) -> None:
        self._notifications = ()
        logger.info("Notification feed cleared")

    def export_snapshot(self) -> List[Dict[str, Any]]:
        return _NOTIFICATIONS_ADAPTER.dump_python(list(self._notifications), mode="json")

    def load_snapshot(self, data: List[Dict[str, Any]]) -> None:
        try:
            self._notifications = tuple(_NOTIFICATIONS_ADAPTER.validate_python(data))
        except PydanticValidationError as exc:
            raise from_pydantic(exc) from exc

    def _find(self, notification_id: str) -> Optional[Notification]:
        return next((n for n in self._notifications if n.id == notification_id), None)
