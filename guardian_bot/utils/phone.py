from __future__ import annotations
import re
from typing import Optional

from guardian_bot.domain.errors import InvalidPhone, MissingCountryCode

COUNTRY_CODE = "20"
LOCAL_PREFIXES = ("012", "011", "010", "015")
MIN_DIGITS = 3

_NON_DIGITS = re.compile(r"[^0-9]")

def normalize_phone(raw: Optional[str]) -> str:
    """
    Raw guardian phone -> digits-only number with country code.
    - "010 1234-567" -> "20101234567" (local prefix: drop the 0, prepend 20)
    - "20101234567"  -> unchanged
    - anything else  -> MissingCountryCode, never guessed
    """
    digits = _NON_DIGITS.sub("", str(raw)) if raw is not None else ""
    if len(digits) < MIN_DIGITS:
        raise InvalidPhone(f"only {len(digits)} digits")

    if digits.startswith(LOCAL_PREFIXES):
        return COUNTRY_CODE + digits[1:]
    if digits.startswith(COUNTRY_CODE):
        return digits
    raise MissingCountryCode("no local prefix and no country code")
