from .crypto import decrypt_payload, pkcs7_unpad
from .locale import get_locale, safe_query_for_log, safe_url_for_log

__all__ = ["decrypt_payload", "get_locale", "pkcs7_unpad", "safe_query_for_log", "safe_url_for_log"]
