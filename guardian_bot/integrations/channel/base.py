from typing import Protocol

class ChannelOpener(Protocol):
    async def open(self, url: str) -> bool:
        """Hand the deep link over. False only if it could not be opened locally."""
        ...
