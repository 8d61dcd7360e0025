"""
Message Catalog
===============
Localized OTP message templates.

Templates use positional placeholders: ``{0}``, ``{1}``, ...
"""

from typing import Dict, Mapping, Optional

import structlog

from stepup_core.errors import InvalidOperationContextError

logger = structlog.get_logger(__name__)


DEFAULT_TEMPLATES: Dict[str, Dict[str, str]] = {
    "en": {
        "login.smsText": "Authorization code for login: {0}",
        "authorize_payment.smsText": (
            "Payment of {0} {1} to account {2}. Authorization code: {3}"
        ),
    },
    "cs": {
        "login.smsText": "Autorizační kód pro přihlášení: {0}",
        "authorize_payment.smsText": (
            "Platba {0} {1} na účet {2}. Autorizační kód: {3}"
        ),
    },
}


class MessageCatalog:
    """Template lookup by key and language with default-language fallback."""

    def __init__(
        self,
        templates: Optional[Mapping[str, Mapping[str, str]]] = None,
        default_lang: str = "en",
    ):
        self._templates = {
            lang: dict(entries)
            for lang, entries in (templates or DEFAULT_TEMPLATES).items()
        }
        self.default_lang = default_lang

    def get(self, key: str, lang: Optional[str] = None) -> str:
        """
        Get a template.

        Raises:
            InvalidOperationContextError: If no language defines the key
        """
        lang = (lang or self.default_lang).lower()
        template = self._templates.get(lang, {}).get(key)
        if template is None:
            template = self._templates.get(self.default_lang, {}).get(key)
            if template is None:
                raise InvalidOperationContextError(f"Missing message template: {key}")
            logger.debug("Falling back to default language", key=key, lang=lang)
        return template

    def add(self, lang: str, key: str, template: str) -> None:
        self._templates.setdefault(lang.lower(), {})[key] = template
