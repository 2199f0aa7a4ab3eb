from typing import Optional
import redis.asyncio as aioredis
from rich.console import Console
from ytplay.config.settings import config
from ytplay.core.state import state

console = Console()

async def init_redis() -> Optional[aioredis.Redis]:
    """Open the Redis connection used for rate limiting and bans"""
    try:
        redis_client = aioredis.from_url(
            config.redis.url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=config.redis.socket_timeout
        )
        await redis_client.ping()

        banned = 0
        async for _ in redis_client.scan_iter(match="ban:*", count=100):
            banned += 1

        if banned:
            console.print(f"[yellow]✓ Redis connected ({banned} banned IPs)[/yellow]")
        else:
            console.print("[green]✓ Redis connected[/green]")
        return redis_client

    except Exception as e:
        console.print(f"[yellow]⚠ Redis connection failed, rate limiting disabled: {str(e)}[/yellow]")
        return None

def get_redis() -> Optional[aioredis.Redis]:
    """Get Redis client from state"""
    return state.redis

async def close_redis() -> None:
    """Close Redis connection"""
    if state.redis:
        await state.redis.aclose()
        state.redis = None
        console.print("[dim]✓ Redis connection closed[/dim]")
