from __future__ import annotations
from typing import Any, Callable

from guardian_bot.domain.errors import IncompleteStudent
from guardian_bot.domain.models import (
    HW_NO_HOMEWORK, HW_NOT_COMPLETED, NA, ResolvedLesson, Student,
)

BULLET = "  • "

def _blank(v: Any) -> bool:
    return v is None or str(v).strip() == ""

def first_name(name: str | None) -> str:
    token = (name or "").strip().split(" ")[0]
    return token or "Student"

def homework_status(hw_done: Any, hw_degree: Any = None) -> str:
    # exact-value mapping; `1 == True` must not count as done
    if hw_done is True:
        return "Done" if _blank(hw_degree) else f"Done ({hw_degree})"
    if hw_done is False:
        return "Not Done"
    if hw_done in (HW_NO_HOMEWORK, HW_NOT_COMPLETED):
        return hw_done
    return "Not Done"

def _has_comment(comment: Any) -> bool:
    return not _blank(comment) and comment != "undefined"

def compose_message(student: Student, lesson: ResolvedLesson, display_name: str,
                    sign_link: Callable[[str], str]) -> str:
    """Guardian follow-up text. `sign_link` is only called once the student is known to be complete."""
    if _blank(student.name):
        raise IncompleteStudent("missing name")
    public_link = sign_link(str(student.id))

    first = first_name(student.name)
    attendance = (lesson.last_attendance or NA) if lesson.attended else "Absent"

    lines = [
        "Follow up Message:",
        "",
        f"Dear, {first}'s Parent",
        "We want to inform you that we are in:",
        "",
        f"{BULLET}Lesson: {lesson.name or NA}",
        f"{BULLET}Attendance Info: {attendance}",
    ]

    if lesson.attended:
        lines.append(f"{BULLET}Homework: {homework_status(lesson.hw_done, lesson.hw_degree)}")
        if not _blank(lesson.quiz_degree):
            lines.append(f"{BULLET}Quiz Degree: {lesson.quiz_degree}")

    if _has_comment(lesson.comment):
        lines.append(f"{BULLET}Comment: {lesson.comment}")

    lines += [
        "",
        f"Please visit the following link to check {first}'s grades and progress: ⬇️",
        "",
        f"🖇️ {public_link}",
        "",
        "Note :-",
        f"{BULLET}{first}'s ID: {student.id}",
        "",
        f"We wish {first} gets high scores 😊❤",
        "",
        f"– {display_name}",
    ]
    return "\n".join(lines)
