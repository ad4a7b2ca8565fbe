import logging
from typing import Any, Optional
from guardian_bot.domain.errors import HistoryLookupFailed, ScoringRequestFailed
from guardian_bot.repositories.scoring_history_repo import ScoringHistoryRepo
from .base import ScoringBackend

log = logging.getLogger(__name__)

class LocalScoringLedger(ScoringBackend):
    """Records scoring requests in scoring_history.csv when no scoring API is configured.
    The score computation itself happens elsewhere; this is only the request ledger."""

    def __init__(self, repo: ScoringHistoryRepo):
        self.repo = repo

    async def get_last_history(self, student_id: str, stype: str, lesson: str) -> Optional[dict[str, Any]]:
        try:
            return self.repo.last(student_id, stype, lesson)
        except (OSError, ValueError) as e:
            raise HistoryLookupFailed(str(e)) from e

    async def submit(self, student_id: str, stype: str, lesson: str, data: dict[str, Any]) -> None:
        try:
            row = self.repo.append(student_id, stype, lesson, data)
        except (OSError, ValueError) as e:
            raise ScoringRequestFailed(str(e)) from e
        log.info("Scoring request recorded", extra={"history_id": row["history_id"], "type": stype})
