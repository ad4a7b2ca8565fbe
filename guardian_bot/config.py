from __future__ import annotations

import os
from dataclasses import dataclass

@dataclass(frozen=True)
class Config:
    bot_token: str
    owner_tg_id: int
    teacher_tg_ids: frozenset[int]
    data_dir: str
    log_level: str
    system_name: str
    scoring_default: bool
    channel_base_url: str
    channel_opener: str
    public_base_url: str
    public_link_secret: str | None
    scoring_api_url: str | None
    http_timeout: float
    status_clear_seconds: float

def _read_owner_tg_id() -> int:
    """
    Robust owner id resolution:
    - PRIMARY: OWNER_TG_ID
    - FALLBACKS: OWNER_ID, OWNER, ADMIN_TG_ID
    Trims spaces and ignores non-digit garbage.
    """
    candidates = ["OWNER_TG_ID", "OWNER_ID", "OWNER", "ADMIN_TG_ID"]
    for key in candidates:
        raw = os.getenv(key)
        if not raw:
            continue
        # allow accidental quotes or comments like '123 # me'
        parts = raw.strip().strip('\'"').split()
        if parts and parts[0].isdigit():
            return int(parts[0])
    return 0

def _read_id_list(key: str) -> frozenset[int]:
    raw = os.getenv(key) or ""
    return frozenset(int(p) for p in (x.strip() for x in raw.split(",")) if p.isdigit())

def _read_float(key: str, default: float) -> float:
    raw = (os.getenv(key) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be a number, got {raw!r}")

def load_config() -> Config:
    from dotenv import load_dotenv
    load_dotenv()

    token = (os.getenv("BOT_TOKEN") or "").strip()
    if not token:
        raise RuntimeError("BOT_TOKEN is not set in environment")

    data_dir = os.getenv("DATA_DIR", "./data")
    log_level = (os.getenv("LOG_LEVEL", "INFO") or "INFO").upper()
    opener = (os.getenv("CHANNEL_OPENER", "telegram") or "telegram").lower()
    scoring_default = (os.getenv("SCORING_SYSTEM") or "").strip().lower() == "true"

    os.makedirs(data_dir, exist_ok=True)

    return Config(
        bot_token=token,
        owner_tg_id=_read_owner_tg_id(),
        teacher_tg_ids=_read_id_list("TEACHER_TG_IDS"),
        data_dir=data_dir,
        log_level=log_level,
        system_name=os.getenv("SYSTEM_NAME") or "Demo Attendance System",
        scoring_default=scoring_default,
        channel_base_url=os.getenv("CHANNEL_BASE_URL") or "https://wa.me",
        channel_opener=opener,
        public_base_url=os.getenv("PUBLIC_BASE_URL") or "http://localhost:3000",
        public_link_secret=os.getenv("PUBLIC_LINK_SECRET") or None,
        scoring_api_url=os.getenv("SCORING_API_URL") or None,
        http_timeout=_read_float("HTTP_TIMEOUT", 10.0),
        status_clear_seconds=_read_float("STATUS_CLEAR_SECONDS", 3.0),
    )
