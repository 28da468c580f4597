# storefront/services/token_service.py
import secrets

import redis

from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, AUTH_TOKEN_TTL_SECONDS


class TokenService:
    """Nieprzezroczyste tokeny sesji trzymane w redisie z TTL."""

    def __init__(self, url: str | None = None, ttl: int = AUTH_TOKEN_TTL_SECONDS):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @staticmethod
    def _key(token: str) -> str:
        return f"auth:token:{token}"

    @redis_retry()
    def issue(self, user_id: int) -> str:
        token = secrets.token_urlsafe(32)
        self.redis.set(name=self._key(token), value=str(user_id), ex=self.ttl)
        return token

    @redis_retry()
    def resolve(self, token: str) -> int | None:
        value = self.redis.get(self._key(token))
        return int(value) if value is not None else None
