from __future__ import annotations
import logging
from typing import Protocol
from guardian_bot.domain.errors import SyncFailed

log = logging.getLogger(__name__)

class MessageStateStore(Protocol):
    async def upsert(self, student_id: str, lesson: str, delivered: bool) -> bool:
        ...

class MessageStateService:
    def __init__(self, store: MessageStateStore):
        self.store = store

    async def sync(self, student_id: str, lesson: str, delivered: bool) -> None:
        try:
            changed = await self.store.upsert(str(student_id), lesson, delivered)
        except Exception as e:
            log.error("Failed to update message state for student=%s lesson=%s: %s",
                      student_id, lesson, e)
            raise SyncFailed(str(e)) from e
        log.info("Message state student=%s lesson=%s delivered=%s%s",
                 student_id, lesson, delivered, "" if changed else " (unchanged)")
