from __future__ import annotations
import json
import logging
import os
from typing import Any, Optional
from guardian_bot.domain.models import HW_NO_HOMEWORK, HW_NOT_COMPLETED, HwDone, LessonRecord, Student
from guardian_bot.repositories.csv_repo import CsvTable

log = logging.getLogger(__name__)

# Read-only roster snapshot; maintained outside the bot
STUDENT_COLUMNS = [
    "id", "name", "parents_phone", "attendance_lesson", "attended_the_session",
    "last_attendance", "hw_done", "hw_degree", "quiz_degree", "lessons_json",
]

_TRUE = ("true", "1", "yes")
_FALSE = ("false", "0", "no")

def _opt(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v)
    return s if s.strip() != "" else None

def parse_bool(v: Any) -> Optional[bool]:
    if isinstance(v, bool):
        return v
    s = (_opt(v) or "").strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    return None

def parse_hw_done(v: Any) -> HwDone:
    if isinstance(v, bool) or v is None:
        return v
    s = str(v).strip()
    if s in (HW_NO_HOMEWORK, HW_NOT_COMPLETED):
        return s
    b = parse_bool(s)
    if b is not None:
        return b
    # unknown states are kept as-is; the composer maps them to "Not Done"
    return s or None

def lesson_from_dict(d: dict) -> LessonRecord:
    return LessonRecord(
        attended=bool(parse_bool(d.get("attended"))),
        last_attendance=_opt(d.get("lastAttendance", d.get("last_attendance"))),
        hw_done=parse_hw_done(d.get("hwDone", d.get("hw_done"))),
        homework_degree=_opt(d.get("homework_degree")),
        quiz_degree=_opt(d.get("quizDegree", d.get("quiz_degree"))),
        comment=_opt(d.get("comment")),
    )

def student_from_row(row: dict) -> Student:
    raw_lessons = row.get("lessons_json") or "{}"
    try:
        lessons_raw = json.loads(raw_lessons)
    except json.JSONDecodeError:
        log.warning("Bad lessons_json for student %s, ignoring", row.get("id"))
        lessons_raw = {}
    lessons = {str(k): lesson_from_dict(v or {}) for k, v in (lessons_raw or {}).items()}

    return Student(
        id=str(row.get("id", "")),
        name=str(row.get("name") or ""),
        parents_phone=_opt(row.get("parents_phone")),
        lessons=lessons,
        attendance_lesson=_opt(row.get("attendance_lesson")),
        attended_the_session=parse_bool(row.get("attended_the_session")),
        last_attendance=_opt(row.get("last_attendance")),
        hw_done=parse_hw_done(row.get("hw_done")),
        hw_degree=_opt(row.get("hw_degree")),
        quiz_degree=_opt(row.get("quiz_degree")),
    )

class StudentsRepo:
    def __init__(self, data_dir: str):
        self.table = CsvTable(os.path.join(data_dir, "students.csv"), STUDENT_COLUMNS)

    def get(self, student_id: str) -> Optional[Student]:
        df = self.table.find(id=student_id)
        if df.empty:
            return None
        return student_from_row(df.to_dict("records")[0])

    def list_all(self) -> list[Student]:
        df = self.table.read()
        return [student_from_row(r) for r in df.to_dict("records")] if not df.empty else []
