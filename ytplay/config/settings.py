from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, List

UA_CHROME = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/91.0.4472.124 Safari/537.36"
)

class RedisConfig(BaseModel):
    url: str = Field(default="redis://redis:6379", description="Redis connection URL")
    socket_timeout: int = Field(default=5, description="Redis socket timeout in seconds")

class RateLimitConfig(BaseModel):
    enabled: bool = Field(default=True, description="Enable rate limiting")
    max_requests: int = Field(default=25, ge=1, description="Max requests per window")
    window_seconds: int = Field(default=10, ge=1, description="Rate limit window in seconds")
    ban_seconds: int = Field(default=86400, ge=1, description="Ban duration after exceeding the limit")
    whitelist: List[str] = Field(default_factory=list, description="IPs that bypass the limiter")
    trust_forwarded: bool = Field(default=False, description="Take the client IP from X-Forwarded-For (only behind a trusted proxy)")

class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    format: str = Field(default="%(message)s", description="Log format")
    enable_rich: bool = Field(default=True, description="Enable rich console logging")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

class I18nConfig(BaseModel):
    default_locale: str = Field(default="en", description="Default locale")
    supported_locales: list = Field(default=["en", "id"], description="Supported locales")

class ApiConfig(BaseModel):
    title: str = Field(default="YouTube Play API", description="API title")
    version: str = Field(default="1.0.0", description="API version")
    cors_origins: list = Field(default=["*"], description="CORS allowed origins")
    debug: bool = Field(default=False, description="Enable debug mode")
    creator: str = Field(default="GIMI❤️", description="Creator tag attached to responses")

class HttpConfig(BaseModel):
    timeout: float = Field(default=30.0, gt=0, description="Per-call timeout for upstream requests")

class SearchConfig(BaseModel):
    results_url: str = Field(default="https://www.youtube.com/results", description="Search results page")
    user_agent: str = Field(default=UA_CHROME, description="Browser user agent for scraping")
    url_marker: str = Field(default="youtu", description="Substring marking a query as a YouTube URL")
    watch_url: str = Field(default="https://www.youtube.com/watch?v=", description="Canonical watch URL prefix")

class SaveTubeConfig(BaseModel):
    base_url: str = Field(default="https://media.savetube.me/api", description="Provider API base")
    cdn_path: str = Field(default="/random-cdn", description="Random CDN endpoint")
    info_path: str = Field(default="/v2/info", description="Encrypted info endpoint")
    download_path: str = Field(default="/download", description="Download link endpoint")
    secret_key: str = Field(
        default="C5D58EF67A7584E4A29F6C35BBC4EB12",
        min_length=32,
        max_length=32,
        description="Hex AES-128 key for the info payload",
    )
    audio_quality: str = Field(default="128", description="Audio bitrate requested")
    headers: Dict[str, str] = Field(
        default_factory=lambda: {
            "accept": "*/*",
            "content-type": "application/json",
            "origin": "https://yt.savetube.me",
            "referer": "https://yt.savetube.me/",
            "user-agent": "Postify/1.0.0",
        },
        description="Headers mimicking the provider front end",
    )

class Ytmp3Config(BaseModel):
    init_url: str = Field(default="https://d.ymcdn.org/api/v1/init", description="Conversion init endpoint")
    init_params: Dict[str, str] = Field(
        default_factory=lambda: {"p": "y", "23": "1llum1n471"},
        description="Fixed init query markers",
    )
    referer: str = Field(default="https://id.ytmp3.mobi/", description="Referer sent on every call")
    target_format: str = Field(default="mp4", description="Conversion target format")
    poll_attempts: int = Field(default=10, ge=1, description="Max progress polls")
    poll_interval: float = Field(default=1.5, ge=0, description="Delay between polls in seconds")
    completion_progress: int = Field(default=3, description="Progress value signalling completion")

class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="YTPLAY_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    redis: RedisConfig = Field(default_factory=RedisConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    i18n: I18nConfig = Field(default_factory=I18nConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    savetube: SaveTubeConfig = Field(default_factory=SaveTubeConfig)
    ytmp3: Ytmp3Config = Field(default_factory=Ytmp3Config)

config = Config()
