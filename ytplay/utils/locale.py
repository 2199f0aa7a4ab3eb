from typing import Optional
from urllib.parse import urlparse
from ytplay.config.settings import config

def get_locale(accept_language: Optional[str] = None) -> str:
    """Pick the first supported locale from an Accept-Language header"""
    if not accept_language:
        return config.i18n.default_locale

    for lang in accept_language.split(","):
        locale = lang.strip().split(";")[0].split("-")[0].lower()
        if locale in config.i18n.supported_locales:
            return locale

    return config.i18n.default_locale

def safe_url_for_log(url: str) -> str:
    """Strip query strings (search terms, signed tokens) before logging"""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return "invalid_url"

    base_url = f"{parsed.scheme}://{parsed.netloc}{parsed.path}"
    if parsed.query:
        return f"{base_url}?..."
    return base_url

def safe_query_for_log(query: str) -> str:
    """Redact URL queries; plain search terms are logged as typed"""
    parsed = urlparse(query)
    if parsed.scheme and parsed.netloc:
        return safe_url_for_log(query)
    return query
