"""
Server-side session storage handed to the provider SDK.

The SDK persists its session (tokens, user, identities) and PKCE code
verifiers through an `AsyncSupportedStorage`. Those values are too large for a
browser cookie, so the cookie only carries an opaque session id and the items
live in a backend keyed by that id:

- development: an in-process dict
- staging / production: Redis, with the session TTL refreshed on every write
"""
import secrets
from typing import Dict, Optional

import redis.asyncio as aioredis
from supabase_auth import AsyncSupportedStorage

from core.config import config, logger, REDIS_URL, SESSION_MAX_AGE_SECONDS

SESSION_ID_KEY = "sid"
KEY_PREFIX = "secureauth:session:"


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


class MemorySessionBackend:
    """Per-process backend for local development and tests."""

    def __init__(self):
        self._sessions: Dict[str, Dict[str, str]] = {}

    async def get(self, sid: str, key: str) -> Optional[str]:
        return self._sessions.get(sid, {}).get(key)

    async def set(self, sid: str, key: str, value: str):
        self._sessions.setdefault(sid, {})[key] = value

    async def delete(self, sid: str, key: str):
        self._sessions.get(sid, {}).pop(key, None)

    async def drop(self, sid: str):
        self._sessions.pop(sid, None)

    def items(self, sid: str) -> Dict[str, str]:
        return dict(self._sessions.get(sid, {}))

    async def close(self):
        self._sessions.clear()


class RedisSessionBackend:
    """One Redis hash per browser session, expiring with the session cookie."""

    def __init__(self, client: aioredis.Redis, ttl_seconds: int = SESSION_MAX_AGE_SECONDS):
        self._client = client
        self._ttl = ttl_seconds

    @staticmethod
    def _key(sid: str) -> str:
        return f"{KEY_PREFIX}{sid}"

    async def get(self, sid: str, key: str) -> Optional[str]:
        return await self._client.hget(self._key(sid), key)

    async def set(self, sid: str, key: str, value: str):
        await self._client.hset(self._key(sid), key, value)
        await self._client.expire(self._key(sid), self._ttl)

    async def delete(self, sid: str, key: str):
        await self._client.hdel(self._key(sid), key)

    async def drop(self, sid: str):
        await self._client.delete(self._key(sid))

    async def close(self):
        await self._client.aclose()
        logger.info("Redis session backend closed")


# Global backend instance
_backend = None


def get_session_backend():
    """Returns the process-wide session backend, creating it on first use."""
    global _backend
    if _backend is None:
        if config.use_redis_sessions:
            _backend = RedisSessionBackend(aioredis.from_url(REDIS_URL, decode_responses=True))
            logger.info("Provider sessions stored in Redis")
        else:
            _backend = MemorySessionBackend()
            logger.info("Provider sessions stored in process memory")
    return _backend


async def close_session_backend():
    global _backend
    if _backend is not None:
        await _backend.close()
        _backend = None


class ServerSideStorage(AsyncSupportedStorage):
    """Provider storage for one browser session, identified by `sid`."""

    def __init__(self, backend, sid: str):
        self._backend = backend
        self.sid = sid

    async def get_item(self, key: str) -> Optional[str]:
        return await self._backend.get(self.sid, key)

    async def set_item(self, key: str, value: str) -> None:
        await self._backend.set(self.sid, key, value)

    async def remove_item(self, key: str) -> None:
        await self._backend.delete(self.sid, key)

    async def clear(self):
        """Drops every provider item held for this browser session."""
        await self._backend.drop(self.sid)
