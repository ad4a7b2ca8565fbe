import asyncio
import logging
import webbrowser
from .base import ChannelOpener

log = logging.getLogger(__name__)

class BrowserChannelOpener(ChannelOpener):
    """Opens the link in the host's default browser (bot running on the teacher's machine)."""

    def __init__(self, new_tab: bool = True):
        self.new = 2 if new_tab else 0

    async def open(self, url: str) -> bool:
        try:
            opened = await asyncio.to_thread(webbrowser.open, url, self.new)
        except webbrowser.Error as e:
            log.warning("Browser refused to open channel link: %s", e)
            return False
        return bool(opened)
