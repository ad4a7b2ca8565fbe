from __future__ import annotations
import json
import os
from typing import Any, Optional
from guardian_bot.repositories.csv_repo import CsvTable
from guardian_bot.utils.ids import new_id
from guardian_bot.utils.time import now_iso

HISTORY_COLUMNS = ["history_id", "student_id", "type", "lesson", "data_json", "created_at"]

class ScoringHistoryRepo:
    def __init__(self, data_dir: str):
        self.table = CsvTable(os.path.join(data_dir, "scoring_history.csv"), HISTORY_COLUMNS)

    def append(self, student_id: str, stype: str, lesson: str, data: dict[str, Any]) -> dict:
        row = {
            "history_id": new_id("hst"),
            "student_id": str(student_id),
            "type": stype,
            "lesson": lesson,
            "data_json": json.dumps(data, ensure_ascii=False),
            "created_at": now_iso(),
        }
        self.table.append_row(row)
        return row

    def last(self, student_id: str, stype: str, lesson: str) -> Optional[dict]:
        df = self.table.find(student_id=student_id, type=stype, lesson=lesson)
        if df.empty:
            return None
        # stable sort keeps file order for equal timestamps
        rec = df.sort_values("created_at", kind="stable").to_dict("records")[-1]
        return {**rec, "data": json.loads(rec["data_json"] or "{}")}
