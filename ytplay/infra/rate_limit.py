import json
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import Request

from ytplay.config.settings import RateLimitConfig, config
from ytplay.core.exceptions import IpBanned, RateLimitExceeded
from ytplay.i18n import i18n
from ytplay.infra.redis import get_redis

logger = logging.getLogger(__name__)

BAN_PREFIX = "ban:"


def client_ip(request: Request, trust_forwarded: bool = False) -> str:
    """Socket address, or the first X-Forwarded-For hop when a proxy is trusted"""
    if trust_forwarded:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RedisRateLimiter:
    """Redis-based rate limiter that bans IPs exceeding the window"""

    def __init__(self, settings: RateLimitConfig = config.rate_limit):
        self.settings = settings

        self.lua_script = """
        local key = KEYS[1]
        local limit = tonumber(ARGV[1])
        local window = tonumber(ARGV[2])

        local current = redis.call('INCR', key)
        if current == 1 then
            redis.call('EXPIRE', key, window)
        end

        if current > limit then
            local ttl = redis.call('TTL', key)
            return {0, ttl}
        end

        return {1, 0}
        """

    async def __call__(self, request: Request):
        if not self.settings.enabled:
            return True

        ip = client_ip(request, self.settings.trust_forwarded)
        if ip in self.settings.whitelist:
            return True

        redis = get_redis()
        if not redis:
            return True

        try:
            if await redis.exists(f"{BAN_PREFIX}{ip}"):
                raise IpBanned(ip)

            allowed, ttl = await redis.eval(
                self.lua_script,
                1,
                f"rate:{ip}",
                self.settings.max_requests,
                self.settings.window_seconds
            )
            if allowed:
                return True

            reason = f"exceeded_{self.settings.max_requests}_per_{self.settings.window_seconds}s"
            await self.ban(ip, reason)
            raise RateLimitExceeded(
                self.settings.max_requests,
                self.settings.window_seconds,
                retry_after=self.settings.ban_seconds,
            )
        except (IpBanned, RateLimitExceeded):
            raise
        except Exception as e:
            # Fail open when Redis misbehaves
            logger.warning(f"Rate limiter unavailable: {e}")
            return True

    async def ban(self, ip: str, reason: str) -> None:
        redis = get_redis()
        if not redis:
            return
        entry = {
            "bannedAt": datetime.now(timezone.utc).isoformat(),
            "reason": reason,
            "by": "rateLimiter",
        }
        await redis.setex(f"{BAN_PREFIX}{ip}", self.settings.ban_seconds, json.dumps(entry))
        logger.warning(i18n.get("log.ip_banned", ip=ip, reason=reason))

    async def unban(self, ip: str) -> bool:
        redis = get_redis()
        if not redis:
            return False
        removed = await redis.delete(f"{BAN_PREFIX}{ip}")
        if removed:
            logger.info(i18n.get("log.ip_unbanned", ip=ip))
        return bool(removed)

    async def banned(self) -> Dict[str, Optional[dict]]:
        redis = get_redis()
        if not redis:
            return {}
        bans: Dict[str, Optional[dict]] = {}
        async for key in redis.scan_iter(match=f"{BAN_PREFIX}*", count=100):
            raw = await redis.get(key)
            bans[key[len(BAN_PREFIX):]] = json.loads(raw) if raw else None
        return bans

rate_limiter = RedisRateLimiter()
