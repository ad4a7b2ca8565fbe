from __future__ import annotations
import asyncio
import logging
from aiogram import Bot, Router, F
from aiogram.filters import Command, CommandObject
from aiogram.exceptions import TelegramAPIError
from aiogram.types import CallbackQuery, Message
from aiogram.utils.markdown import html_decoration as hd

from guardian_bot.bot.keyboards.common import NOTIFY_PREFIX, students_keyboard
from guardian_bot.domain.models import NotificationResult, ScoringOutcome
from guardian_bot.domain.roles import NOTIFY_ROLES
from guardian_bot.repositories.students_repo import StudentsRepo
from guardian_bot.services.dispatch_service import build_channel
from guardian_bot.services.notification_service import NotificationService
from guardian_bot.services.system_config_service import SystemConfigService

router = Router(name="teachers_notify")
log = logging.getLogger(__name__)

DENIED = "❌ Команда доступна только преподавателям."

# strong refs so pending status cleanups are not garbage collected
_cleanup_tasks: set[asyncio.Task] = set()

async def _clear_later(msg: Message, delay: float) -> None:
    await asyncio.sleep(delay)
    try:
        await msg.delete()
    except TelegramAPIError as e:
        log.debug("Status message already gone: %s", e)

def schedule_status_clear(msg: Message, delay: float) -> None:
    task = asyncio.create_task(_clear_later(msg, delay))
    _cleanup_tasks.add(task)
    task.add_done_callback(_cleanup_tasks.discard)

def status_line(result: NotificationResult) -> str:
    if result.ok:
        mark = "✅"
    elif result.delivered:
        mark = "⚠️"
    else:
        mark = "❌"
    return f"{mark} {hd.quote(result.status)}"

async def run_notify(bot: Bot, chat_id: int, actor_id: int | None, student_id: str,
                     students: StudentsRepo, system: SystemConfigService,
                     notifications: NotificationService, channel_opener: str,
                     status_clear_seconds: float) -> NotificationResult | None:
    student = students.get(student_id)
    if student is None:
        await bot.send_message(chat_id, f"Студент {hd.quote(str(student_id))} не найден.")
        return None

    opener = build_channel(channel_opener, bot=bot, chat_id=chat_id)
    name = hd.quote(student.name or student.id)

    async def score_changed() -> None:
        await bot.send_message(chat_id, f"📈 Баллы обновлены: {name}")

    async def score_failed(outcome: ScoringOutcome) -> None:
        await bot.send_message(chat_id, f"⚠️ Не удалось обновить баллы ({outcome.type}): {name}")

    result = await notifications.send(
        student, system.get(), opener, actor_id=actor_id,
        on_score_changed=score_changed, on_score_failed=score_failed,
    )
    status_msg = await bot.send_message(chat_id, status_line(result))
    schedule_status_clear(status_msg, status_clear_seconds)
    return result

@router.message(F.text == "/students")
async def list_students(message: Message, role: str, students: StudentsRepo):
    if role not in NOTIFY_ROLES:
        await message.answer(DENIED)
        return
    roster = students.list_all()
    if not roster:
        await message.answer("Ростер пуст.")
        return
    await message.answer("Кому отправить сообщение родителю?", reply_markup=students_keyboard(roster))

@router.message(Command("notify"))
async def notify_cmd(message: Message, command: CommandObject, bot: Bot, role: str, students: StudentsRepo,
                     system: SystemConfigService, notifications: NotificationService,
                     channel_opener: str, status_clear_seconds: float):
    if role not in NOTIFY_ROLES:
        await message.answer(DENIED)
        return
    student_id = (command.args or "").strip().split(" ")[0]
    if not student_id:
        await message.answer("Использование: /notify &lt;student_id&gt;")
        return
    await run_notify(bot, message.chat.id, message.from_user.id, student_id, students, system,
                     notifications, channel_opener, status_clear_seconds)

@router.callback_query(F.data.startswith(NOTIFY_PREFIX))
async def notify_cb(callback: CallbackQuery, bot: Bot, role: str, students: StudentsRepo,
                    system: SystemConfigService, notifications: NotificationService,
                    channel_opener: str, status_clear_seconds: float):
    if role not in NOTIFY_ROLES:
        await callback.answer(DENIED, show_alert=True)
        return
    await callback.answer()
    student_id = callback.data[len(NOTIFY_PREFIX):]
    await run_notify(bot, callback.message.chat.id, callback.from_user.id, student_id, students,
                     system, notifications, channel_opener, status_clear_seconds)
