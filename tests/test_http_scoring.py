import sys, pathlib, asyncio, json
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))
import httpx
import pytest
from guardian_bot.domain.errors import HistoryLookupFailed, ScoringRequestFailed
from guardian_bot.integrations.scoring.http_backend import CALCULATE_PATH, HISTORY_PATH, HttpScoringBackend

def _backend(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://scoring.test")
    return HttpScoringBackend(client), client

def _call(client, coro):
    async def run():
        try:
            return await coro
        finally:
            await client.aclose()
    return asyncio.run(run())

def test_history_found():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"found": True, "history": {"data": {"status": "present"}}})

    backend, client = _backend(handler)
    entry = _call(client, backend.get_last_history("7", "attendance", "L1"))
    assert entry == {"data": {"status": "present"}}
    assert seen == [(HISTORY_PATH, {"studentId": "7", "type": "attendance", "lesson": "L1"})]

def test_history_not_found():
    backend, client = _backend(lambda r: httpx.Response(200, json={"found": False}))
    assert _call(client, backend.get_last_history("7", "homework", "L1")) is None

@pytest.mark.parametrize("response", [
    httpx.Response(500, json={"error": "db down"}),
    httpx.Response(200, content=b"<html>"),
    httpx.Response(200, json=["unexpected"]),
])
def test_history_errors(response):
    backend, client = _backend(lambda r: response)
    with pytest.raises(HistoryLookupFailed):
        _call(client, backend.get_last_history("7", "homework", "L1"))

def test_history_transport_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    backend, client = _backend(handler)
    with pytest.raises(HistoryLookupFailed):
        _call(client, backend.get_last_history("7", "attendance", "L1"))

def test_submit_posts_payload():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"ok": True})

    backend, client = _backend(handler)
    _call(client, backend.submit("7", "homework", "L1", {"hwDone": False, "previousHwDone": None}))
    assert seen == [(CALCULATE_PATH, {
        "studentId": "7", "type": "homework", "lesson": "L1",
        "data": {"hwDone": False, "previousHwDone": None},
    })]

def test_submit_error():
    backend, client = _backend(lambda r: httpx.Response(503))
    with pytest.raises(ScoringRequestFailed):
        _call(client, backend.submit("7", "attendance", "L1", {"status": "absent"}))
