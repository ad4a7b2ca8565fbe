from __future__ import annotations
import logging
from urllib.parse import quote
from aiogram import Bot
from guardian_bot.domain.errors import DispatchBlocked
from guardian_bot.integrations.channel.base import ChannelOpener
from guardian_bot.integrations.channel.browser_opener import BrowserChannelOpener
from guardian_bot.integrations.channel.telegram_opener import TelegramChannelOpener
from guardian_bot.utils.status import DispatchResult

log = logging.getLogger(__name__)

DEFAULT_CHANNEL_BASE = "https://wa.me"

# characters JavaScript's encodeURIComponent leaves alone, besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"

def encode_uri_component(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)

def build_deep_link(base_url: str, phone: str, message: str) -> str:
    return f"{base_url.rstrip('/')}/{phone}?text={encode_uri_component(message)}"

def build_channel(kind: str, bot: Bot | None = None, chat_id: int | None = None) -> ChannelOpener:
    if kind == "browser":
        return BrowserChannelOpener()
    elif kind == "telegram":
        if bot is None or chat_id is None:
            raise ValueError("telegram channel needs a bot and a chat id")
        return TelegramChannelOpener(bot, chat_id)
    else:
        raise ValueError(f"Unknown channel opener: {kind}")

class Dispatcher:
    """Hands a composed message to the external channel.

    Only a local refusal to open the link is observable; recipient offline,
    unknown number or unread message all count as handed off.
    """

    def __init__(self, opener: ChannelOpener, base_url: str = DEFAULT_CHANNEL_BASE):
        self.opener = opener
        self.base_url = base_url

    async def dispatch(self, phone: str, message: str) -> DispatchResult:
        url = build_deep_link(self.base_url, phone, message)
        opened = await self.opener.open(url)
        if not opened:
            log.warning("Channel link for %s was not opened", phone)
            return DispatchResult.LOCALLY_BLOCKED
        return DispatchResult.HANDED_OFF

    async def dispatch_or_raise(self, phone: str, message: str) -> DispatchResult:
        result = await self.dispatch(phone, message)
        if result is DispatchResult.LOCALLY_BLOCKED:
            raise DispatchBlocked("channel link was not opened")
        return result
