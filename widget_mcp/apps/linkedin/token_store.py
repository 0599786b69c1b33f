"""In-memory OAuth token store with per-entry expiry.

The LinkedIn OAuth flow is not implemented, so nothing in the server ever
calls ``put``: a running server always starts with an empty store and
``publish_post`` answers NOT_AUTHENTICATED. The store is injected through
``register_tools(token_store=...)`` so tests can exercise the
authenticated paths.

Single tenant: the first live ``linkedin:<user id>`` entry is the
authenticated user. Token refresh is not implemented; an expired entry
simply disappears.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)

KEY_PREFIX = "linkedin:"


@dataclass
class StoredToken:
    access_token: str
    expires_at: float
    profile: Dict[str, Any] = field(default_factory=dict)


class TokenStore:
    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._entries: Dict[str, StoredToken] = {}

    def put(
        self,
        user_id: str,
        access_token: str,
        ttl: float,
        profile: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._entries[f"{KEY_PREFIX}{user_id}"] = StoredToken(
            access_token=access_token,
            expires_at=self._clock() + ttl,
            profile=profile or {},
        )
        logger.info(f"Stored token for {user_id} (ttl={ttl}s)")

    def get(self, user_id: str) -> Optional[StoredToken]:
        key = f"{KEY_PREFIX}{user_id}"
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry

    def delete(self, user_id: str) -> None:
        self._entries.pop(f"{KEY_PREFIX}{user_id}", None)

    def _live(self) -> Iterator[Tuple[str, StoredToken]]:
        for key in list(self._entries):
            user_id = key[len(KEY_PREFIX):]
            entry = self.get(user_id)
            if entry is not None:
                yield user_id, entry

    def authenticated_user(self) -> Optional[Tuple[str, StoredToken]]:
        """First user with a live token, or None."""
        return next(self._live(), None)
