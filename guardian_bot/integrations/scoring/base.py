from typing import Any, Optional, Protocol

class ScoringBackend(Protocol):
    async def get_last_history(self, student_id: str, stype: str, lesson: str) -> Optional[dict[str, Any]]:
        """Last recorded entry for the key as {"data": {...}, ...}, or None if there is none"""
        ...

    async def submit(self, student_id: str, stype: str, lesson: str, data: dict[str, Any]) -> None:
        """Ask the scoring system to (re)compute the student's score"""
        ...
