from __future__ import annotations
import logging
from typing import Optional
from guardian_bot.domain.errors import NotificationError, SyncFailed
from guardian_bot.domain.lesson_view import lesson_name_or_na, resolve_lesson
from guardian_bot.domain.models import NotificationResult, Student, SystemConfig
from guardian_bot.integrations.channel.base import ChannelOpener
from guardian_bot.integrations.scoring.base import ScoringBackend
from guardian_bot.services.audit_service import NOTIFY_FAILED, NOTIFY_SENT, SCORING_REQUEST, AuditService
from guardian_bot.services.dispatch_service import DEFAULT_CHANNEL_BASE, Dispatcher
from guardian_bot.services.message_composer import compose_message
from guardian_bot.services.message_state_service import MessageStateService
from guardian_bot.services.scoring_service import ScoreChangedFn, ScoreFailedFn, ScoringCoordinator
from guardian_bot.utils.logs import log_event
from guardian_bot.utils.phone import normalize_phone
from guardian_bot.utils.signing import PublicLinkSigner
from guardian_bot.utils.status import SUCCESS_STATUS

log = logging.getLogger(__name__)

class NotificationService:
    """
    One guardian notification attempt:
      phone -> message -> dispatch -> message state -> scoring (0..2 requests)

    Every attempt writes the message state exactly once: False on any early
    exit, True once the channel took the link.
    """

    def __init__(self, signer: PublicLinkSigner, state: MessageStateService, scoring: ScoringBackend,
                 channel_base_url: str = DEFAULT_CHANNEL_BASE, audit: AuditService | None = None):
        self.signer = signer
        self.state = state
        self.scoring = scoring
        self.channel_base_url = channel_base_url
        self.audit = audit

    async def send(self, student: Student, config: SystemConfig, opener: ChannelOpener,
                   actor_id: Optional[int] = None,
                   on_score_changed: Optional[ScoreChangedFn] = None,
                   on_score_failed: Optional[ScoreFailedFn] = None) -> NotificationResult:
        lesson_name = lesson_name_or_na(student)
        try:
            phone = normalize_phone(student.parents_phone)
            lesson = resolve_lesson(student)
            message = compose_message(student, lesson, config.display_name, self.signer.sign)
            log.info("Attempting to send WhatsApp to: %s Original: %s", phone, student.parents_phone)
            await Dispatcher(opener, self.channel_base_url).dispatch_or_raise(phone, message)
        except NotificationError as e:
            log.info("Notification for student=%s stopped: %s", student.id, e.code)
            return await self._fail(student, lesson_name, e, actor_id)
        except Exception as e:
            log.exception("WhatsApp sending error for student=%s", student.id)
            return await self._fail(student, lesson_name, e, actor_id)

        result = NotificationResult(status=SUCCESS_STATUS, delivered=True)
        try:
            await self.state.sync(student.id, lesson_name, True)
        except SyncFailed as e:
            # the guardian already has the message; only bookkeeping is off
            result.status = e.status
            result.error = e
            log_event(self.audit, actor_id, NOTIFY_SENT, student.id, lesson_name, {"synced": False})
            return result
        result.synced = True
        log_event(self.audit, actor_id, NOTIFY_SENT, student.id, lesson_name, {"synced": True})

        coordinator = ScoringCoordinator(self.scoring, on_score_changed, on_score_failed)
        result.scoring = await coordinator.run(student.id, lesson, config.scoring_enabled)
        for outcome in result.scoring:
            log_event(self.audit, actor_id, SCORING_REQUEST, student.id, lesson_name,
                      {"type": outcome.type, "ok": outcome.ok, "data": outcome.data})
        return result

    async def _fail(self, student: Student, lesson_name: str, error: Exception,
                    actor_id: Optional[int]) -> NotificationResult:
        status = error.status if isinstance(error, NotificationError) else NotificationError.status
        result = NotificationResult(status=status, error=error)
        try:
            await self.state.sync(student.id, lesson_name, False)
            result.synced = True
        except SyncFailed:
            # the first failure stays the reported one
            log.warning("Could not record failed notification for student=%s", student.id)
        code = error.code if isinstance(error, NotificationError) else type(error).__name__
        log_event(self.audit, actor_id, NOTIFY_FAILED, student.id, lesson_name, {"error": code})
        return result
