from __future__ import annotations
import os
from typing import Optional
from guardian_bot.domain.models import DispatchOutcome
from guardian_bot.repositories.csv_repo import CsvTable
from guardian_bot.utils.time import now_iso

MESSAGE_STATE_COLUMNS = ["student_id", "lesson", "message_state", "updated_at"]
KEY_COLUMNS = ("student_id", "lesson")

class MessageStateRepo:
    """One row per (student_id, lesson); last write wins."""

    def __init__(self, data_dir: str):
        self.table = CsvTable(os.path.join(data_dir, "message_state.csv"), MESSAGE_STATE_COLUMNS)

    async def upsert(self, student_id: str, lesson: str, delivered: bool) -> bool:
        row = {"student_id": str(student_id), "lesson": lesson, "message_state": bool(delivered)}
        return self.table.upsert(KEY_COLUMNS, row, touch={"updated_at": now_iso()})

    def get(self, student_id: str, lesson: str) -> Optional[DispatchOutcome]:
        df = self.table.find(student_id=student_id, lesson=lesson)
        if df.empty:
            return None
        rec = df.to_dict("records")[0]
        return DispatchOutcome(
            student_id=rec["student_id"],
            lesson=rec["lesson"],
            delivered=str(rec["message_state"]).strip().lower() == "true",
        )

    def list_for_student(self, student_id: str) -> list[dict]:
        df = self.table.find(student_id=student_id)
        return df.to_dict("records") if not df.empty else []
