import sys, pathlib, asyncio, json
from urllib.parse import parse_qs, urlsplit
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))
sys.path.append(str(pathlib.Path(__file__).resolve().parent))
import httpx
import pytest
from fakes import FakeOpener, FakeScoring, FakeStateStore
from guardian_bot.domain.errors import (
    DispatchBlocked, IncompleteStudent, InvalidPhone, MissingCountryCode, NotificationError, SyncFailed,
)
from guardian_bot.domain.models import LessonRecord, Student, SystemConfig
from guardian_bot.integrations.scoring.http_backend import HISTORY_PATH, HttpScoringBackend
from guardian_bot.repositories.message_state_repo import MessageStateRepo
from guardian_bot.services.audit_service import AuditService
from guardian_bot.services.message_state_service import MessageStateService
from guardian_bot.services.notification_service import NotificationService
from guardian_bot.utils.signing import PublicLinkSigner
from guardian_bot.utils.status import SUCCESS_STATUS

SCORING_ON = SystemConfig(display_name="Sunrise Academy", scoring_enabled=True)

def _student(**kw):
    base = dict(id="15", name="Omar Ali", parents_phone="010-1234-567",
                lessons={"L3": LessonRecord(attended=False, hw_done=False, comment="Call us")})
    base.update(kw)
    return Student(**base)

def _service(store=None, scoring=None, secret="s3cret", audit=None):
    store = store or FakeStateStore()
    scoring = scoring or FakeScoring()
    svc = NotificationService(
        signer=PublicLinkSigner("https://school.example", secret),
        state=MessageStateService(store),
        scoring=scoring,
        audit=audit,
    )
    return svc, store, scoring

def _send(svc, student, opener, config=SCORING_ON):
    return asyncio.run(svc.send(student, config, opener, actor_id=100))

def test_success_dispatches_syncs_and_scores():
    svc, store, scoring = _service()
    opener = FakeOpener()
    result = _send(svc, _student(), opener)

    assert result.status == SUCCESS_STATUS
    assert result.delivered and result.synced and result.ok
    assert result.error is None
    assert store.calls == [("15", "L3", True)]

    assert len(opener.urls) == 1
    parts = urlsplit(opener.urls[0])
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == "https://wa.me/20101234567"
    text = parse_qs(parts.query)["text"][0]
    assert "Dear, Omar's Parent" in text
    assert "  • Attendance Info: Absent" in text
    assert "  • Comment: Call us" in text
    assert "https://school.example/public/student/15?sig=" in text
    assert text.endswith("– Sunrise Academy")

    assert sorted(o.type for o in result.scoring) == ["attendance", "homework"]
    assert {s[2] for s in scoring.submitted} == {"L3"}

def test_scoring_disabled_sends_without_requests():
    svc, store, scoring = _service()
    result = _send(svc, _student(), FakeOpener(), SystemConfig(scoring_enabled=False))
    assert result.ok
    assert result.scoring == [] and scoring.submitted == []

def _assert_failed(result, store, opener, error_type, lesson="L3"):
    assert isinstance(result.error, error_type)
    assert result.status == error_type.status
    assert result.delivered is False
    assert store.calls == [("15", lesson, False)]

def test_invalid_phone_stops_before_dispatch():
    svc, store, scoring = _service()
    opener = FakeOpener()
    result = _send(svc, _student(parents_phone=None), opener)
    _assert_failed(result, store, opener, InvalidPhone)
    assert opener.urls == [] and scoring.submitted == []

def test_missing_country_code():
    svc, store, _ = _service()
    opener = FakeOpener()
    result = _send(svc, _student(parents_phone="44 123 456"), opener)
    _assert_failed(result, store, opener, MissingCountryCode)
    assert result.status == "Country code required. Please add country code (e.g., 20 for Egypt)"
    assert opener.urls == []

def test_incomplete_student_short_circuits():
    svc, store, _ = _service()
    opener = FakeOpener()
    result = _send(svc, _student(name=""), opener)
    _assert_failed(result, store, opener, IncompleteStudent)
    assert opener.urls == []

def test_blocked_dispatch_never_scores():
    svc, store, scoring = _service()
    opener = FakeOpener(opened=False)
    result = _send(svc, _student(), opener)
    _assert_failed(result, store, opener, DispatchBlocked)
    assert len(opener.urls) == 1
    assert scoring.lookups == [] and scoring.submitted == []

def test_unexpected_error_is_reported_and_recorded():
    svc, store, scoring = _service()
    result = _send(svc, _student(), FakeOpener(exc=RuntimeError("window API gone")))
    assert isinstance(result.error, RuntimeError)
    assert result.status == NotificationError.status == "Error occurred while opening WhatsApp"
    assert store.calls == [("15", "L3", False)]
    assert scoring.submitted == []

def test_unsigned_link_is_an_unexpected_error():
    svc, store, _ = _service(secret=None)
    opener = FakeOpener()
    result = _send(svc, _student(), opener)
    assert result.status == "Error occurred while opening WhatsApp"
    assert opener.urls == []
    assert store.calls == [("15", "L3", False)]

def test_sync_failure_after_dispatch_is_distinct():
    svc, store, scoring = _service(store=FakeStateStore(fail=True))
    opener = FakeOpener()
    result = _send(svc, _student(), opener)
    assert isinstance(result.error, SyncFailed)
    assert result.status == "WhatsApp sent but failed to update status"
    assert result.delivered is True and result.synced is False
    assert len(opener.urls) == 1
    assert scoring.submitted == []

def test_sync_failure_on_error_path_keeps_first_failure():
    svc, store, _ = _service(store=FakeStateStore(fail=True))
    result = _send(svc, _student(parents_phone="1"), FakeOpener())
    assert isinstance(result.error, InvalidPhone)
    assert result.synced is False
    assert len(store.calls) == 1

def test_student_without_lessons_uses_na_key():
    svc, store, scoring = _service()
    result = _send(svc, _student(lessons={}), FakeOpener())
    assert result.ok
    assert store.calls == [("15", "N/A", True)]
    assert scoring.by_type() == {"attendance": {"status": "absent", "previousStatus": None}}

def test_repeated_sends_keep_one_state_row_and_audit(tmp_path):
    repo = MessageStateRepo(str(tmp_path))
    audit = AuditService(str(tmp_path))
    svc = NotificationService(
        signer=PublicLinkSigner("https://school.example", "k"),
        state=MessageStateService(repo),
        scoring=FakeScoring(),
        audit=audit,
    )
    student = _student()
    asyncio.run(svc.send(student, SystemConfig(), FakeOpener(opened=False)))
    asyncio.run(svc.send(student, SystemConfig(), FakeOpener()))
    asyncio.run(svc.send(student, SystemConfig(), FakeOpener()))

    assert repo.get("15", "L3").delivered is True
    assert len(repo.list_for_student("15")) == 1
    actions = [e["action"] for e in audit.for_student("15")]
    assert actions == ["GUARDIAN_NOTIFY_FAILED", "GUARDIAN_NOTIFY_SENT", "GUARDIAN_NOTIFY_SENT"]

def test_concurrent_sends_for_different_students(tmp_path):
    repo = MessageStateRepo(str(tmp_path))
    svc = NotificationService(
        signer=PublicLinkSigner("https://school.example", "k"),
        state=MessageStateService(repo),
        scoring=FakeScoring(),
    )

    async def run():
        students = [_student(id=str(i)) for i in range(5)]
        return await asyncio.gather(*(svc.send(s, SystemConfig(), FakeOpener()) for s in students))

    results = asyncio.run(run())
    assert all(r.ok for r in results)
    assert all(repo.get(str(i), "L3").delivered for i in range(5))

@pytest.mark.parametrize("history", [["oops"], {"data": "oops"}, "oops"])
def test_malformed_scoring_history_stays_inside_scoring(history):
    submitted = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == HISTORY_PATH:
            return httpx.Response(200, json={"found": True, "history": history})
        submitted.append(json.loads(request.content))
        return httpx.Response(200, json={"ok": True})

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://scoring.test") as client:
            svc, store, _ = _service(scoring=HttpScoringBackend(client))
            return await svc.send(_student(), SCORING_ON, FakeOpener()), store

    result, store = asyncio.run(run())
    assert result.ok
    assert result.status == SUCCESS_STATUS
    assert store.calls == [("15", "L3", True)]
    assert sorted(o.type for o in result.scoring) == ["attendance", "homework"]
    assert all(o.ok for o in result.scoring)
    by_type = {p["type"]: p["data"] for p in submitted}
    assert by_type == {
        "attendance": {"status": "absent", "previousStatus": None},
        "homework": {"hwDone": False, "previousHwDone": None},
    }
