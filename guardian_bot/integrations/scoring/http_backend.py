import logging
from typing import Any, Optional
import httpx
from guardian_bot.domain.errors import HistoryLookupFailed, ScoringRequestFailed
from .base import ScoringBackend

log = logging.getLogger(__name__)

HISTORY_PATH = "/api/scoring/get-last-history"
CALCULATE_PATH = "/api/scoring/calculate"

class HttpScoringBackend(ScoringBackend):
    """Talks to the scoring API. The client is owned by the caller (base_url, timeout, auth)."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def get_last_history(self, student_id: str, stype: str, lesson: str) -> Optional[dict[str, Any]]:
        payload = {"studentId": student_id, "type": stype, "lesson": lesson}
        try:
            response = await self.client.post(HISTORY_PATH, json=payload)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise HistoryLookupFailed(f"{stype} history: {e}") from e
        if not isinstance(body, dict):
            raise HistoryLookupFailed(f"{stype} history: unexpected response")
        if not body.get("found") or not body.get("history"):
            return None
        return body["history"]

    async def submit(self, student_id: str, stype: str, lesson: str, data: dict[str, Any]) -> None:
        payload = {"studentId": student_id, "type": stype, "lesson": lesson, "data": data}
        try:
            response = await self.client.post(CALCULATE_PATH, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ScoringRequestFailed(f"{stype} score: {e}") from e

def build_http_client(base_url: str, timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout)
