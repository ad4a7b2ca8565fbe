from typing import Callable, Dict, Any, Awaitable, Iterable
from aiogram import BaseMiddleware
from aiogram.types import TelegramObject
from guardian_bot.domain.roles import Role


class RoleMiddleware(BaseMiddleware):
    def __init__(self, owner_id: int, teacher_ids: Iterable[int]):
        super().__init__()
        self.owner_id = owner_id
        self.teacher_ids = frozenset(teacher_ids)

    def role_of(self, tg_id: int | None) -> str:
        if not tg_id:
            return Role.UNKNOWN.value
        if tg_id == self.owner_id:
            return Role.OWNER.value
        if tg_id in self.teacher_ids:
            return Role.TEACHER.value
        return Role.UNKNOWN.value

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any]
    ) -> Any:
        tg_id = None
        if getattr(event, "from_user", None):
            tg_id = event.from_user.id
        elif getattr(event, "message", None) and event.message.from_user:
            tg_id = event.message.from_user.id

        data["role"] = self.role_of(tg_id)
        return await handler(event, data)
