from datetime import datetime, timezone

def now_iso() -> str:
    # microsecond precision keeps same-second history rows ordered
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")
