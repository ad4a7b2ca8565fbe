from __future__ import annotations
import json
import logging
from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from aiogram.utils.markdown import html_decoration as hd

from guardian_bot.domain.roles import NOTIFY_ROLES
from guardian_bot.repositories.message_state_repo import MessageStateRepo
from guardian_bot.services.audit_service import AuditService

router = Router(name="teachers_status")
log = logging.getLogger(__name__)

MAX_EVENTS = 10

def format_student_status(student_id: str, states: list[dict], events: list[dict]) -> str:
    """Per-lesson message state plus the latest audit events, HTML-safe."""
    lines = [f"📋 <b>Студент {hd.quote(student_id)}</b>"]
    if not states:
        lines.append("Сообщений родителям ещё не было.")
    for s in states:
        mark = "✅" if str(s.get("message_state", "")).lower() == "true" else "❌"
        lines.append(f"{mark} {hd.quote(str(s.get('lesson', '')))} — {hd.quote(str(s.get('updated_at', '')))}")
    if events:
        lines += ["", "🕘 Последние события:"]
        for e in events[-MAX_EVENTS:]:
            meta = json.loads(e.get("meta_json") or "{}")
            extra = meta.get("error") or meta.get("type") or ""
            tail = f" ({hd.quote(str(extra))})" if extra else ""
            lines.append(f"• {hd.quote(str(e.get('ts', ''))[:19])} {hd.quote(str(e.get('action', '')))}{tail}")
    return "\n".join(lines)

@router.message(Command("status"))
async def student_status(message: Message, command: CommandObject, role: str,
                         message_states: MessageStateRepo, audit: AuditService):
    if role not in NOTIFY_ROLES:
        await message.answer("❌ Команда доступна только преподавателям.")
        return
    student_id = (command.args or "").strip().split(" ")[0]
    if not student_id:
        await message.answer("Использование: /status &lt;student_id&gt;")
        return
    text = format_student_status(student_id, message_states.list_for_student(student_id),
                                 audit.for_student(student_id))
    await message.answer(text, parse_mode="HTML")
