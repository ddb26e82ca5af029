"""
Signed URL Service

HMAC-signed, time-limited URLs for blobs served from the local
filesystem. GCS produces its own V4 signed URLs and does not use this.

URL layout: ``{base_url}/{quoted key}?expires={unix ts}&signature={hex}``
"""

import calendar
import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from urllib.parse import quote


def _unix(moment: datetime) -> int:
    # Naive datetimes in this package are UTC
    return calendar.timegm(moment.utctimetuple())


@dataclass
class SignedUrl:
    url: str
    key: str
    expires_at: datetime
    signature: str

    @property
    def expires_ts(self) -> int:
        return _unix(self.expires_at)

    def is_expired(self) -> bool:
        return datetime.utcnow() >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "key": self.key,
            "expires_at": self.expires_at.isoformat(),
            "signature": self.signature,
        }


class SignedUrlService:
    """
    Signs and checks local blob URLs.

    The HMAC covers both the storage key and the expiry timestamp, so a
    URL cannot be pointed at another blob or extended.
    """

    def __init__(self, secret_key: Optional[str] = None, base_url: str = "/storage"):
        """
        Args:
            secret_key: HMAC key. When empty a random per-process key is used,
                which invalidates outstanding URLs on restart.
            base_url: Prefix of the endpoint that serves local blobs
        """
        self.secret_key = secret_key or secrets.token_hex(32)
        self.base_url = base_url.rstrip("/")

    def generate_signed_url(self, key: str, ttl_seconds: int) -> SignedUrl:
        """
        Sign ``key`` for ``ttl_seconds`` seconds from now.

        Returns:
            SignedUrl whose expiry is truncated to whole seconds
        """
        expires_at = datetime.utcnow().replace(microsecond=0) + timedelta(seconds=ttl_seconds)
        signature = self._sign(key, _unix(expires_at))
        url = f"{self.base_url}/{quote(key)}?expires={_unix(expires_at)}&signature={signature}"
        return SignedUrl(url=url, key=key, expires_at=expires_at, signature=signature)

    def verify(self, key: str, expires_ts: int, signature: str,
               now: Optional[datetime] = None) -> bool:
        """
        Check a signature taken from a served URL.

        Args:
            key: Unquoted storage key from the URL path
            expires_ts: ``expires`` query parameter
            signature: ``signature`` query parameter
            now: Reference time, UTC (defaults to now)

        Returns:
            True only if the signature matches and the URL has not expired
        """
        if not signature:
            return False
        if not hmac.compare_digest(signature, self._sign(key, int(expires_ts))):
            return False
        return _unix(now or datetime.utcnow()) < int(expires_ts)

    def _sign(self, key: str, expires_ts: int) -> str:
        return hmac.new(
            self.secret_key.encode("utf-8"),
            f"{key}:{expires_ts}".encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
