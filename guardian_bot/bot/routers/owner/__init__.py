from aiogram import Router
from .system import router as system_router

router = Router(name="owner_root")

router.include_router(system_router)
