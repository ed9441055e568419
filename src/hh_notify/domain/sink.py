"""NotificationSink: best-effort consumer of completion/streak/milestone events.

Emitting is fire-and-forget from the core's point of view: callers go
through emit_safely(), which never raises, and they call it only after
their own transaction has committed.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class NotificationSinkProtocol(Protocol):
    async def emit(self, user_id: str, kind: str, message: str) -> None: ...


async def emit_safely(
    sink: NotificationSinkProtocol | None, user_id: str, kind: str, message: str
) -> bool:
    """Emit through `sink`, logging and swallowing any failure. Returns success."""
    if sink is None:
        return False
    try:
        await sink.emit(user_id, kind, message)
    except Exception:
        logger.warning(
            "Notification delivery failed: user=%s kind=%s", user_id, kind, exc_info=True
        )
        return False
    return True
