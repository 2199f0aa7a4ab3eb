import time

from fastapi import APIRouter

from ytplay.config.settings import config
from ytplay.core.state import state
from ytplay.i18n import i18n

router = APIRouter()


async def redis_status() -> str:
    if not state.redis:
        return i18n.get("response.redis_disabled")
    try:
        await state.redis.ping()
        return i18n.get("response.redis_connected")
    except Exception:
        return i18n.get("response.redis_disconnected")


@router.get("/")
async def root():
    """Root endpoint"""
    return {
        "status": i18n.get("response.status_running"),
        "service": config.api.title,
        "version": config.api.version,
        "endpoints": ["/play"],
        "redis_enabled": state.redis is not None
    }


@router.get("/health")
async def health_check():
    """Lightweight health check"""
    return {
        "status": i18n.get("health.status"),
        "redis": await redis_status()
    }


@router.get("/status")
async def status():
    """Server status with handler latency and start time"""
    start = time.perf_counter()
    redis = await redis_status()
    latency_ms = (time.perf_counter() - start) * 1000
    return {
        "status": i18n.get("response.status_online"),
        "redis": redis,
        "latency": f"{latency_ms:.2f}ms",
        "version": config.api.version,
        "startTime": int(state.start_time * 1000)
    }
