"""Domain models for hh_notify: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Notification:
    id: str
    user_id: str
    kind: str            # NotificationKind value
    message: str
    is_read: bool = False
    created_at: datetime | None = None
