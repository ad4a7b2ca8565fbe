from __future__ import annotations
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional
from guardian_bot.domain.models import ResolvedLesson, ScoringOutcome
from guardian_bot.integrations.scoring.base import ScoringBackend
from guardian_bot.utils.status import ATTENDANCE, HOMEWORK

log = logging.getLogger(__name__)

ScoreChangedFn = Callable[[], Awaitable[None]]
ScoreFailedFn = Callable[[ScoringOutcome], Awaitable[None]]

class ScoringCoordinator:
    """
    Decides which scoring requests follow a delivered notification:
    - absent            -> attendance request with the previous recorded status
    - homework == False -> homework request with the previous recorded hwDone
    Both checks run concurrently; a failure in one never touches the other.
    """

    def __init__(self, backend: ScoringBackend,
                 on_score_changed: Optional[ScoreChangedFn] = None,
                 on_score_failed: Optional[ScoreFailedFn] = None):
        self.backend = backend
        self.on_score_changed = on_score_changed
        self.on_score_failed = on_score_failed

    async def run(self, student_id: str, lesson: ResolvedLesson, enabled: bool) -> list[ScoringOutcome]:
        if not enabled:
            return []
        checks = []
        if not lesson.attended:
            checks.append(self._guarded(ATTENDANCE, lesson.name, self._absence(student_id, lesson.name)))
        if lesson.hw_done is False:
            checks.append(self._guarded(HOMEWORK, lesson.name, self._homework(student_id, lesson.name)))
        if not checks:
            return []
        return list(await asyncio.gather(*checks))

    async def _previous(self, student_id: str, stype: str, lesson: str) -> Optional[dict[str, Any]]:
        try:
            entry = await self.backend.get_last_history(student_id, stype, lesson)
        except Exception:
            log.error("Error getting %s history for student=%s lesson=%s",
                      stype, student_id, lesson, exc_info=True)
            return None
        if not isinstance(entry, dict):
            if entry:
                log.warning("Ignoring malformed %s history for student=%s lesson=%s", stype, student_id, lesson)
            return None
        data = entry.get("data")
        if data is None:
            return {}
        if not isinstance(data, dict):
            log.warning("Ignoring malformed %s history data for student=%s lesson=%s", stype, student_id, lesson)
            return None
        return data

    async def _guarded(self, stype: str, lesson: str, check: Awaitable[ScoringOutcome]) -> ScoringOutcome:
        # one check never takes the other down with it
        try:
            return await check
        except Exception as e:
            log.error("Unexpected error in %s scoring for lesson=%s", stype, lesson, exc_info=True)
            return ScoringOutcome(type=stype, lesson=lesson, data={}, ok=False, error=e)

    async def _absence(self, student_id: str, lesson: str) -> ScoringOutcome:
        prev = await self._previous(student_id, ATTENDANCE, lesson)
        previous_status = prev.get("status") if prev is not None else None
        data = {"status": "absent", "previousStatus": previous_status}
        return await self._submit(student_id, ATTENDANCE, lesson, data)

    async def _homework(self, student_id: str, lesson: str) -> ScoringOutcome:
        prev = await self._previous(student_id, HOMEWORK, lesson)
        previous_hw = prev["hwDone"] if prev is not None and "hwDone" in prev else None
        data = {"hwDone": False, "previousHwDone": previous_hw}
        return await self._submit(student_id, HOMEWORK, lesson, data)

    async def _submit(self, student_id: str, stype: str, lesson: str, data: dict[str, Any]) -> ScoringOutcome:
        outcome = ScoringOutcome(type=stype, lesson=lesson, data=data, ok=False)
        try:
            await self.backend.submit(student_id, stype, lesson, data)
        except Exception as e:
            log.error("Error calculating %s score for student=%s lesson=%s",
                      stype, student_id, lesson, exc_info=True)
            outcome.error = e
            await self._notify(self.on_score_failed, outcome)
            return outcome
        outcome.ok = True
        log.info("%s score requested for student=%s lesson=%s", stype, student_id, lesson)
        await self._notify(self.on_score_changed)
        return outcome

    async def _notify(self, callback, *args) -> None:
        if callback is None:
            return
        try:
            await callback(*args)
        except Exception:
            log.warning("Scoring callback failed", exc_info=True)
