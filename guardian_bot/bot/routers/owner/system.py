from __future__ import annotations
import logging
from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from aiogram.utils.markdown import html_decoration as hd

from guardian_bot.domain.roles import Role
from guardian_bot.services.system_config_service import SystemConfigService

router = Router(name="owner_system")
log = logging.getLogger(__name__)

USAGE = "Использование: /system | /system name &lt;название&gt; | /system scoring on|off"

def apply_system_command(system: SystemConfigService, args: str | None) -> str:
    """Parse `/system ...` arguments, update settings, return the HTML reply."""
    parts = (args or "").strip().split(maxsplit=1)
    if parts:
        key = parts[0].lower()
        value = parts[1].strip() if len(parts) > 1 else ""
        if key == "name" and value:
            system.set("name", value)
        elif key == "scoring" and value.lower() in ("on", "off"):
            system.set("scoring_system", value.lower() == "on")
        else:
            return USAGE
        log.info("System setting %s changed", key)
    cfg = system.get()
    return (f"⚙️ Название: <b>{hd.quote(cfg.display_name)}</b>\n"
            f"Начисление баллов: {'вкл' if cfg.scoring_enabled else 'выкл'}")

@router.message(Command("system"))
async def system_cmd(message: Message, command: CommandObject, role: str, system: SystemConfigService):
    if role != Role.OWNER.value:
        await message.answer("❌ Команда доступна только владельцу.")
        return
    await message.answer(apply_system_command(system, command.args), parse_mode="HTML")
