from __future__ import annotations
import os, json
from guardian_bot.repositories.csv_repo import CsvTable
from guardian_bot.utils.ids import new_id
from guardian_bot.utils.time import now_iso

AUDIT_COLUMNS = ["event_id", "ts", "actor_tg_id", "action", "student_id", "lesson", "meta_json"]

NOTIFY_SENT = "GUARDIAN_NOTIFY_SENT"
NOTIFY_FAILED = "GUARDIAN_NOTIFY_FAILED"
SCORING_REQUEST = "SCORING_REQUEST"

class AuditService:
    def __init__(self, data_dir: str):
        self.table = CsvTable(os.path.join(data_dir, "audit.csv"), AUDIT_COLUMNS)

    def log(self, actor_tg_id: int | None, action: str, student_id: str = "", lesson: str = "",
            meta: dict | None = None) -> dict:
        row = {
            "event_id": new_id("evt"),
            "ts": now_iso(),
            "actor_tg_id": actor_tg_id if actor_tg_id is not None else "",
            "action": action,
            "student_id": student_id,
            "lesson": lesson,
            "meta_json": json.dumps(meta or {}, ensure_ascii=False),
        }
        self.table.append_row(row)
        return row

    def for_student(self, student_id: str) -> list[dict]:
        df = self.table.find(student_id=student_id)
        if df.empty:
            return []
        return df.sort_values("ts", kind="stable").to_dict("records")
