"""
Resolution of the "current lesson" for one notification.

A student snapshot may carry the current lesson twice: as flattened fields on
the student itself (attendance_lesson, attended_the_session, hw_done, ...) and
as a LessonRecord inside `lessons`. A flattened field wins whenever it is
present (not None); otherwise the record value is used, then the default.

Homework degree mapping:
    Student.hw_degree (flattened)  ->  ResolvedLesson.hw_degree
    LessonRecord.homework_degree   ->  ResolvedLesson.hw_degree (fallback)
Blank degree strings (hw_degree, quiz_degree) count as not present.
"""

from __future__ import annotations
from typing import Any, Optional

from guardian_bot.domain.models import NA, LessonRecord, ResolvedLesson, Student


def current_lesson_name(student: Student) -> Optional[str]:
    """Flattened lesson name, else the first key of `lessons`, else None."""
    if student.attendance_lesson:
        return student.attendance_lesson
    if student.lessons:
        return next(iter(student.lessons))
    return None


def lesson_name_or_na(student: Student) -> str:
    return current_lesson_name(student) or NA


def _blank(v: Any) -> bool:
    return v is None or str(v).strip() == ""


def _pick(flat: Any, record_value: Any, default: Any = None) -> Any:
    if flat is not None:
        return flat
    if record_value is not None:
        return record_value
    return default


def _pick_text(flat: Any, record_value: Any) -> Any:
    # a blank degree counts as not given
    return _pick(None if _blank(flat) else flat, None if _blank(record_value) else record_value)


def resolve_lesson(student: Student) -> ResolvedLesson:
    name = current_lesson_name(student)
    record = student.lessons.get(name) if name else None
    if record is None:
        record = LessonRecord()

    return ResolvedLesson(
        name=name or NA,
        attended=bool(_pick(student.attended_the_session, record.attended, False)),
        last_attendance=_pick(student.last_attendance, record.last_attendance),
        hw_done=_pick(student.hw_done, record.hw_done),
        hw_degree=_pick_text(student.hw_degree, record.homework_degree),
        quiz_degree=_pick_text(student.quiz_degree, record.quiz_degree),
        comment=record.comment,
    )
