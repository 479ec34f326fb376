"""
Redis cache configuration and utilities
Key/value cache with an in-memory fallback when Redis is unreachable
"""

import redis.asyncio as redis
from typing import Optional, Any, Union
import json
from datetime import timedelta, datetime
import logging

from .config import settings

logger = logging.getLogger(__name__)

class RedisCache:
    """Redis cache manager with in-memory fallback"""

    def __init__(self):
        self.redis_client: Optional[redis.Redis] = None
        self._fallback_cache: dict = {}  # In-memory fallback for development and tests
        self._use_redis = False

    async def connect(self):
        """Initialize Redis connection"""
        try:
            self.redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=settings.REDIS_DECODE_RESPONSES,
                max_connections=settings.REDIS_MAX_CONNECTIONS
            )
            await self.redis_client.ping()
            logger.info("Redis connection established")
            self._use_redis = True
        except Exception as e:
            logger.warning(f"Failed to connect to Redis, using in-memory fallback: {e}")
            self.redis_client = None
            self._use_redis = False

    async def disconnect(self):
        """Close Redis connection"""
        if self.redis_client:
            await self.redis_client.close()
            logger.info("Redis connection closed")

    def _fallback_get(self, key: str) -> Optional[Any]:
        cache_item = self._fallback_cache.get(key)
        if cache_item is None:
            return None
        expires_at = cache_item.get('expires_at')
        if expires_at and datetime.now() > expires_at:
            del self._fallback_cache[key]
            return None
        return cache_item['value']

    def _sweep_expired(self, now: datetime) -> None:
        """Drop every expired fallback entry, read or not"""
        expired = [
            key for key, item in self._fallback_cache.items()
            if item.get('expires_at') and now > item['expires_at']
        ]
        for key in expired:
            del self._fallback_cache[key]

    async def get(self, key: str) -> Optional[Any]:
        """Get JSON value from cache"""
        try:
            if self._use_redis and self.redis_client:
                value = await self.redis_client.get(key)
                return json.loads(value) if value else None
            return self._fallback_get(key)
        except Exception as e:
            logger.error(f"Cache get error: {e}")
            return None

    async def set(
        self,
        key: str,
        value: Any,
        expire: Optional[Union[int, timedelta]] = None
    ) -> bool:
        """Set JSON-serialisable value in cache with optional expiration"""
        if isinstance(expire, timedelta):
            expire = int(expire.total_seconds())
        try:
            if self._use_redis and self.redis_client:
                payload = json.dumps(value)
                if expire:
                    return await self.redis_client.setex(key, expire, payload)
                return await self.redis_client.set(key, payload)

            now = datetime.now()
            self._sweep_expired(now)
            cache_item = {'value': value}
            if expire:
                cache_item['expires_at'] = now + timedelta(seconds=expire)
            self._fallback_cache[key] = cache_item
            return True
        except Exception as e:
            logger.error(f"Cache set error: {e}")
            return False

    async def delete(self, *keys: str) -> int:
        """Delete keys from cache, returning how many existed"""
        if not keys:
            return 0
        try:
            if self._use_redis and self.redis_client:
                return await self.redis_client.delete(*keys)
            removed = 0
            for key in keys:
                if self._fallback_cache.pop(key, None) is not None:
                    removed += 1
            return removed
        except Exception as e:
            logger.error(f"Cache delete error: {e}")
            return 0

    async def ping(self) -> bool:
        """True when Redis answers; False while serving from memory"""
        if not (self._use_redis and self.redis_client):
            return False
        try:
            return bool(await self.redis_client.ping())
        except Exception as e:
            logger.error(f"Cache ping error: {e}")
            return False

# Global cache instance
cache = RedisCache()
