import logging
from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from aiogram.utils.keyboard import InlineKeyboardBuilder
from .base import ChannelOpener

log = logging.getLogger(__name__)

class TelegramChannelOpener(ChannelOpener):
    """Posts the deep link as a URL button into the teacher's chat."""

    def __init__(self, bot: Bot, chat_id: int, button_text: str = "📲 Open WhatsApp"):
        self.bot = bot
        self.chat_id = chat_id
        self.button_text = button_text

    async def open(self, url: str) -> bool:
        kb = InlineKeyboardBuilder()
        kb.button(text=self.button_text, url=url)
        try:
            await self.bot.send_message(self.chat_id, "Tap to send the follow up message:",
                                        reply_markup=kb.as_markup())
        except TelegramAPIError as e:
            log.warning("Telegram refused channel link for chat %s: %s", self.chat_id, e)
            return False
        return True
