from aiogram import Router
from .notify import router as notify_router
from .status import router as status_router

router = Router(name="teachers_root")

router.include_router(notify_router)
router.include_router(status_router)
