"""
Page cache invalidation.

Rendering layers subscribe to the broker and drop cached pages when a
`cache.revalidate` event names them. Publishing is fire-and-forget: a failure
here is logged and never undoes the write that triggered it.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import List, Optional, Sequence

from .broker import PortalEvent, broker, publish_event

logger = logging.getLogger(__name__)

REVALIDATE_EVENT_TYPE = "cache.revalidate"


def revalidate_paths(
    paths: Sequence[str],
    *,
    actor_user_id: Optional[str] = None,
    reason: Optional[str] = None,
) -> None:
    if not paths:
        return
    try:
        publish_event(
            PortalEvent(
                id=str(uuid.uuid4()),
                type=REVALIDATE_EVENT_TYPE,
                subject=",".join(paths),
                occurred_at=datetime.utcnow().isoformat(),
                actor_user_id=actor_user_id,
                payload={"paths": list(paths), "reason": reason},
            )
        )
    except Exception:
        logger.warning(
            "Failed to publish cache revalidation",
            extra={"paths": list(paths), "reason": reason},
            exc_info=True,
        )


def recently_revalidated_paths(limit: int = 50) -> List[str]:
    """Distinct paths from the latest revalidation events, newest first."""
    seen: List[str] = []
    for event in reversed(broker.recent(event_type=REVALIDATE_EVENT_TYPE, limit=limit)):
        for path in event.payload.get("paths", []):
            if path not in seen:
                seen.append(path)
    return seen
