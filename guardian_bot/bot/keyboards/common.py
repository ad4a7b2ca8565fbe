from aiogram.utils.keyboard import InlineKeyboardBuilder
from aiogram.types import InlineKeyboardButton
from guardian_bot.domain.lesson_view import lesson_name_or_na
from guardian_bot.domain.models import Student

NOTIFY_PREFIX = "notify:"

def students_keyboard(students: list[Student]):
    kb = InlineKeyboardBuilder()
    for s in students:
        text = f"📨 Send | {s.id} | {s.name or '—'} ({lesson_name_or_na(s)})"
        kb.row(InlineKeyboardButton(text=text, callback_data=f"{NOTIFY_PREFIX}{s.id}"))
    return kb.as_markup()
