from __future__ import annotations
import hashlib
import hmac
from urllib.parse import quote

class PublicLinkSigner:
    """Builds the public progress link for a student, signed with HMAC-SHA256."""

    def __init__(self, base_url: str, secret: str | None):
        self.base_url = base_url.rstrip("/")
        self.secret = secret

    def signature(self, student_id: str) -> str:
        if not self.secret:
            raise RuntimeError("PUBLIC_LINK_SECRET is not set in environment")
        mac = hmac.new(self.secret.encode("utf-8"), str(student_id).encode("utf-8"), hashlib.sha256)
        return mac.hexdigest()

    def sign(self, student_id: str) -> str:
        sid = str(student_id)
        return f"{self.base_url}/public/student/{quote(sid, safe='')}?sig={self.signature(sid)}"
