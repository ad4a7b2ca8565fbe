from __future__ import annotations
import asyncio, logging, os
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.memory import MemoryStorage

from guardian_bot.config import Config, load_config
from guardian_bot.logger import setup_logging

# Repositories / services
from guardian_bot.repositories.message_state_repo import MessageStateRepo
from guardian_bot.repositories.scoring_history_repo import ScoringHistoryRepo
from guardian_bot.repositories.students_repo import StudentsRepo
from guardian_bot.integrations.scoring.base import ScoringBackend
from guardian_bot.integrations.scoring.http_backend import HttpScoringBackend, build_http_client
from guardian_bot.integrations.scoring.local_ledger import LocalScoringLedger
from guardian_bot.services.audit_service import AuditService
from guardian_bot.services.message_state_service import MessageStateService
from guardian_bot.services.notification_service import NotificationService
from guardian_bot.services.system_config_service import SystemConfigService
from guardian_bot.utils.signing import PublicLinkSigner

# Middlewares
from guardian_bot.bot.middlewares.role_middleware import RoleMiddleware

# Routers
from guardian_bot.bot.routers.common import router as common_router
from guardian_bot.bot.routers.owner import router as owner_router
from guardian_bot.bot.routers.teachers import router as teachers_router

def build_scoring(cfg: Config, http_client) -> ScoringBackend:
    if http_client is not None:
        return HttpScoringBackend(http_client)
    return LocalScoringLedger(ScoringHistoryRepo(cfg.data_dir))

async def main() -> None:
    cfg = load_config()
    setup_logging(cfg.log_level)
    log = logging.getLogger("main")
    os.makedirs(cfg.data_dir, exist_ok=True)

    bot = Bot(token=cfg.bot_token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
    dp = Dispatcher(storage=MemoryStorage())

    http_client = build_http_client(cfg.scoring_api_url, cfg.http_timeout) if cfg.scoring_api_url else None

    # Services
    students = StudentsRepo(cfg.data_dir)
    system = SystemConfigService(cfg.data_dir, cfg.system_name, cfg.scoring_default)
    audit = AuditService(cfg.data_dir)
    message_states = MessageStateRepo(cfg.data_dir)
    notifications = NotificationService(
        signer=PublicLinkSigner(cfg.public_base_url, cfg.public_link_secret),
        state=MessageStateService(message_states),
        scoring=build_scoring(cfg, http_client),
        channel_base_url=cfg.channel_base_url,
        audit=audit,
    )
    if not cfg.public_link_secret:
        log.warning("PUBLIC_LINK_SECRET is not set; every notification will fail to sign its link")
    log.info("Owner TG resolved to: %s, teachers: %s", cfg.owner_tg_id or "0 (not set)", len(cfg.teacher_tg_ids))
    log.info("Scoring backend: %s", "http " + cfg.scoring_api_url if http_client else "local ledger")

    # Middlewares
    roles = RoleMiddleware(cfg.owner_tg_id, cfg.teacher_tg_ids)
    dp.message.middleware(roles)
    dp.callback_query.middleware(roles)

    # DI
    dp["students"] = students
    dp["system"] = system
    dp["notifications"] = notifications
    dp["message_states"] = message_states
    dp["audit"] = audit
    dp["channel_opener"] = cfg.channel_opener
    dp["status_clear_seconds"] = cfg.status_clear_seconds

    # Routers
    dp.include_router(common_router)
    dp.include_router(owner_router)
    dp.include_router(teachers_router)

    me = await bot.get_me()
    log.info("Starting bot as @%s id=%s", me.username, me.id)
    try:
        await dp.start_polling(bot, polling_timeout=60, allowed_updates=["message", "callback_query"])
    finally:
        if http_client is not None:
            await http_client.aclose()
        log.info("Bot stopped")

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
