from fastapi import APIRouter, Depends, HTTPException, Security
from fastapi.security import APIKeyHeader
from pydantic import BaseModel
from ytplay.config.settings import config
from ytplay.i18n import i18n
from ytplay.infra.rate_limit import rate_limiter
from ytplay.infra.redis import get_redis
import os

router = APIRouter()

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

class UnbanRequest(BaseModel):
    ip: str

async def verify_api_key(api_key: str = Security(api_key_header)):
    """Verify API key for admin endpoints"""
    expected_key = os.getenv("ADMIN_API_KEY")
    if not expected_key:
        return None

    if api_key != expected_key:
        raise HTTPException(status_code=403, detail=i18n.get("error.invalid_api_key"))
    return api_key

@router.get("/config", dependencies=[Depends(verify_api_key)])
async def get_config():
    """Get current configuration without secrets (admin only)"""
    return {
        "rate_limit": config.rate_limit.model_dump(),
        "http": config.http.model_dump(),
        "search": config.search.model_dump(),
        "savetube": config.savetube.model_dump(exclude={"secret_key"}),
        "ytmp3": config.ytmp3.model_dump(),
        "i18n": config.i18n.model_dump()
    }

@router.get("/bans", dependencies=[Depends(verify_api_key)])
async def list_bans():
    """List banned IPs (admin only)"""
    return {"success": True, "banned": await rate_limiter.banned()}

@router.post("/unban", dependencies=[Depends(verify_api_key)])
async def unban(body: UnbanRequest):
    """Lift a ban (admin only)"""
    if not get_redis():
        raise HTTPException(status_code=503, detail=i18n.get("error.redis_unavailable"))

    if not await rate_limiter.unban(body.ip):
        raise HTTPException(status_code=404, detail=i18n.get("error.ip_not_banned", ip=body.ip))
    return {"success": True, "message": i18n.get("response.ip_unbanned", ip=body.ip)}
