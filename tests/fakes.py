from __future__ import annotations
from typing import Any, Optional

from guardian_bot.domain.errors import HistoryLookupFailed, ScoringRequestFailed


class FakeOpener:
    def __init__(self, opened: bool = True, exc: Exception | None = None):
        self.opened = opened
        self.exc = exc
        self.urls: list[str] = []

    async def open(self, url: str) -> bool:
        self.urls.append(url)
        if self.exc is not None:
            raise self.exc
        return self.opened


class FakeStateStore:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[tuple[str, str, bool]] = []
        self.rows: dict[tuple[str, str], bool] = {}

    async def upsert(self, student_id: str, lesson: str, delivered: bool) -> bool:
        self.calls.append((student_id, lesson, delivered))
        if self.fail:
            raise OSError("disk full")
        changed = self.rows.get((student_id, lesson)) != delivered
        self.rows[(student_id, lesson)] = delivered
        return changed


class FakeScoring:
    def __init__(self, history: Optional[dict[str, dict]] = None,
                 fail_history: tuple[str, ...] = (), fail_submit: tuple[str, ...] = ()):
        self.history = history or {}
        self.fail_history = fail_history
        self.fail_submit = fail_submit
        self.lookups: list[tuple[str, str, str]] = []
        self.submitted: list[tuple[str, str, str, dict[str, Any]]] = []

    async def get_last_history(self, student_id: str, stype: str, lesson: str):
        self.lookups.append((student_id, stype, lesson))
        if stype in self.fail_history:
            raise HistoryLookupFailed("boom")
        return self.history.get(stype)

    async def submit(self, student_id: str, stype: str, lesson: str, data: dict[str, Any]) -> None:
        if stype in self.fail_submit:
            raise ScoringRequestFailed("boom")
        self.submitted.append((student_id, stype, lesson, data))

    def by_type(self) -> dict[str, dict[str, Any]]:
        return {stype: data for _, stype, _, data in self.submitted}
