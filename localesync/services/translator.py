"""
Translator backends - the external text translation provider
"""
from abc import ABC, abstractmethod
from typing import Optional
import html
import logging

import httpx

from localesync.core.config import settings
from localesync.core.exceptions import TranslatorError

logger = logging.getLogger(__name__)


class BaseTranslator(ABC):
    """
    Base translator interface.
    Adding a provider only requires implementing `translate`.
    """
    
    @abstractmethod
    def translate(self, text: str, target_locale: str) -> str:
        """
        Translate text into the target locale.
        
        Args:
            text: Source text
            target_locale: Locale code (e.g., 'es', 'fr')
        
        Returns:
            Translated text
        
        Raises:
            TranslatorError: provider failed or timed out
        """
        pass


class PassthroughTranslator(BaseTranslator):
    """Offline/test translator: tags text with the locale code"""
    
    def translate(self, text: str, target_locale: str) -> str:
        return f"[{target_locale}] {text}"


class GoogleTranslator(BaseTranslator):
    """Google Cloud Translation API (v2, REST)"""
    
    BASE_URL = "https://translation.googleapis.com/language/translate/v2"
    
    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None
    ):
        self.api_key = api_key or settings.GOOGLE_TRANSLATE_API_KEY
        if not self.api_key:
            raise TranslatorError("GOOGLE_TRANSLATE_API_KEY is not configured")
        self.timeout = httpx.Timeout(timeout or settings.TRANSLATOR_TIMEOUT, connect=10.0)
        self._client = client
    
    def _post(self, payload: dict) -> httpx.Response:
        if self._client is not None:
            return self._client.post(self.BASE_URL, params={"key": self.api_key}, data=payload)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(self.BASE_URL, params={"key": self.api_key}, data=payload)
    
    def translate(self, text: str, target_locale: str) -> str:
        payload = {
            "q": text,
            "target": target_locale,
            "format": "html",
        }
        
        try:
            response = self._post(payload)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            logger.warning(f"Google Translate timeout for locale {target_locale}: {e}")
            raise TranslatorError(f"Google Translate timed out for {target_locale}") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"Google Translate error: {e.response.status_code} - {e.response.text}")
            raise TranslatorError(f"Google Translate returned {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Google Translate request failed: {e}")
            raise TranslatorError(f"Google Translate request failed: {e}") from e
        
        try:
            translated = data["data"]["translations"][0]["translatedText"]
        except (KeyError, IndexError, TypeError) as e:
            raise TranslatorError(f"Unexpected Google Translate response: {data!r}") from e
        
        return html.unescape(translated)


TRANSLATORS = {
    "passthrough": PassthroughTranslator,
    "google": GoogleTranslator,
}


def get_translator(backend: Optional[str] = None) -> BaseTranslator:
    """
    Build the configured translator.
    
    Args:
        backend: Override settings.TRANSLATOR_BACKEND
    """
    backend = (backend or settings.TRANSLATOR_BACKEND).lower()
    translator_cls = TRANSLATORS.get(backend)
    if translator_cls is None:
        raise TranslatorError(f"Unknown translator backend '{backend}'. Available: {sorted(TRANSLATORS)}")
    return translator_cls()
