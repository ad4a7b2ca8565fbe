from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

NA = "N/A"

# Non-boolean homework states
HW_NO_HOMEWORK = "No Homework"
HW_NOT_COMPLETED = "Not Completed"

HwDone = Union[bool, str, None]

@dataclass(frozen=True)
class LessonRecord:
    attended: bool = False
    last_attendance: Optional[str] = None
    hw_done: HwDone = None
    homework_degree: Optional[str] = None
    quiz_degree: Optional[str] = None
    comment: Optional[str] = None

@dataclass(frozen=True)
class Student:
    id: str
    name: str
    parents_phone: Optional[str] = None
    lessons: dict[str, LessonRecord] = field(default_factory=dict)
    # flattened "current lesson" fields, None means not present
    attendance_lesson: Optional[str] = None
    attended_the_session: Optional[bool] = None
    last_attendance: Optional[str] = None
    hw_done: HwDone = None
    hw_degree: Optional[str] = None
    quiz_degree: Optional[str] = None

@dataclass(frozen=True)
class ResolvedLesson:
    name: str
    attended: bool
    last_attendance: Optional[str]
    hw_done: HwDone
    hw_degree: Optional[str]
    quiz_degree: Optional[str]
    comment: Optional[str]

@dataclass(frozen=True)
class SystemConfig:
    display_name: str = "Demo Attendance System"
    scoring_enabled: bool = False

@dataclass(frozen=True)
class DispatchOutcome:
    student_id: str
    lesson: str
    delivered: bool

@dataclass
class ScoringOutcome:
    type: str
    lesson: str
    data: dict[str, Any]
    ok: bool
    error: Optional[Exception] = None

@dataclass
class NotificationResult:
    status: str
    delivered: bool = False
    synced: bool = False
    error: Optional[Exception] = None
    scoring: list[ScoringOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.delivered and self.synced
