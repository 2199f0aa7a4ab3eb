import functools
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from ytplay.config.settings import config

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).resolve().parent.parent / "locales"


class I18n:
    """Nested-key message catalog backed by JSON locale files"""

    def __init__(self, locales_dir: Path = LOCALES_DIR, default_locale: str = config.i18n.default_locale):
        self.locales: Dict[str, Dict[str, Any]] = {}
        self.default_locale = default_locale
        self.load_locales(locales_dir)

    def load_locales(self, locales_dir: Path) -> None:
        if not locales_dir.is_dir():
            logger.warning(f"Locales directory not found at {locales_dir}")
            return

        for path in sorted(locales_dir.glob("*.json")):
            try:
                with path.open("r", encoding="utf-8") as f:
                    self.locales[path.stem] = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Error loading locale {path.stem}: {e}")

    def _lookup(self, key: str, locale: str) -> Optional[str]:
        value: Any = self.locales.get(locale, {})
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return None
            value = value[part]
        return value if isinstance(value, str) else None

    def get(self, key: str, locale: Optional[str] = None, **kwargs) -> str:
        """Get translated string by key, falling back to the default locale"""
        template = self._lookup(key, locale or self.default_locale)
        if template is None and locale != self.default_locale:
            template = self._lookup(key, self.default_locale)
        if template is None:
            return key

        try:
            return template.format(**kwargs)
        except (KeyError, IndexError):
            return template

    def translator(self, locale: str) -> Callable[..., str]:
        return functools.partial(self.get, locale=locale)


i18n = I18n()
