import uuid
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from ytplay.api import admin, health, play
from ytplay.config.settings import config
from ytplay.core.exceptions import PlayError
from ytplay.core.logging import setup_logging
from ytplay.core.state import state
from ytplay.i18n import i18n
from ytplay.infra.redis import init_redis, close_redis
from ytplay.models.response import ErrorResponse
from ytplay.utils.locale import get_locale

setup_logging()

app = FastAPI(
    title=config.api.title,
    version=config.api.version,
    docs_url="/docs" if config.api.debug else None,
    redoc_url=None
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response

@app.exception_handler(PlayError)
async def play_error_handler(request: Request, exc: PlayError):
    """Render domain errors as the JSON error envelope"""
    locale = get_locale(request.headers.get("accept-language"))
    body = ErrorResponse(
        creator=config.api.creator,
        statusCode=exc.status_code,
        error=i18n.get(exc.message_key, locale=locale, reason=str(exc), **exc.params),
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(), headers=exc.headers)

# Routes
app.include_router(health.router, tags=["Health"])
app.include_router(play.router, tags=["Search"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])

@app.on_event("startup")
async def startup_event():
    state.redis = await init_redis()

@app.on_event("shutdown")
async def shutdown_event():
    await close_redis()
