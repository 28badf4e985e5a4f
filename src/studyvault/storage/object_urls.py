"""Transient object URLs for stored file bytes.

Every create() returns a new ``blob:studyvault/<token>`` URL that stays
valid until revoked. Whoever asked for the URL owns it and must revoke it
when done; nothing expires on its own.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)

URL_PREFIX = "blob:studyvault/"


@dataclass
class ObjectUrlEntry:
    """Bytes behind an object URL."""

    data: bytes
    mime_type: str


class ObjectUrlRegistry:
    """In-process registry of live object URLs."""

    def __init__(self):
        self._entries: dict[str, ObjectUrlEntry] = {}
        self._lock = threading.Lock()

    def create(self, data: bytes, mime_type: str) -> str:
        """Register bytes and return a fresh URL for them."""
        token = uuid.uuid4().hex
        with self._lock:
            self._entries[token] = ObjectUrlEntry(data=data, mime_type=mime_type)
        logger.debug("object_url.created", token=token, size=len(data))
        return URL_PREFIX + token

    def get(self, url_or_token: str) -> ObjectUrlEntry | None:
        with self._lock:
            return self._entries.get(self.token_of(url_or_token))

    def revoke(self, url_or_token: str) -> bool:
        """Release an object URL. Returns False if it was not live."""
        token = self.token_of(url_or_token)
        with self._lock:
            entry = self._entries.pop(token, None)
        if entry is not None:
            logger.debug("object_url.revoked", token=token)
        return entry is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @staticmethod
    def token_of(url_or_token: str) -> str:
        if url_or_token.startswith(URL_PREFIX):
            return url_or_token[len(URL_PREFIX):]
        return url_or_token
