from __future__ import annotations
import logging
from typing import List
from aiogram import Router, F
from aiogram.types import Message
from guardian_bot.domain.roles import NOTIFY_ROLES, Role

router = Router(name="common")
log = logging.getLogger(__name__)

def _help_for_role(role: str) -> List[str]:
    base = ["/start — приветствие", "/help — помощь", "/whoami — показать ваш ID/роль"]
    if role in NOTIFY_ROLES:
        base += ["/students — ростер и кнопки отправки",
                 "/notify <student_id> — сообщение родителю об уроке",
                 "/status <student_id> — история сообщений по студенту"]
    if role == Role.OWNER.value:
        base += ["/system — название школы и начисление баллов",
                 "/system name <название> | /system scoring on|off"]
    return base

@router.message(F.text == "/start")
async def start(message: Message, role: str):
    lines = ["👋 Привет! Бот отправляет родителям итоги урока в WhatsApp.", f"Ваша роль: <b>{role}</b>"]
    if role in NOTIFY_ROLES:
        lines.append("Откройте /students и нажмите «Send» рядом со студентом.")
    else:
        lines.append("Доступ выдаёт владелец бота (TEACHER_TG_IDS).")
    await message.answer("\n".join(lines), parse_mode="HTML")

@router.message(F.text == "/help")
async def help_cmd(message: Message, role: str):
    text = "📖 Доступные команды:\n" + "\n".join(f"• {x}" for x in _help_for_role(role))
    await message.answer(text, parse_mode=None)

@router.message(F.text == "/whoami")
async def whoami(message: Message, role: str):
    note = "" if role != Role.UNKNOWN.value else " (нет доступа к рассылке)"
    await message.answer(f"👤 <b>ID:</b> {message.from_user.id} | role={role}{note}", parse_mode="HTML")
