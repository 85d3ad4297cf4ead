# provider.py
import logging
from typing import Callable, Optional, Sequence, TypeVar

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from errors import (
    ConfigurationError,
    ExhaustionError,
    MalformedResponseError,
    ResponseParseError,
    UpstreamError,
    UpstreamFailure,
    UpstreamOverloadedError,
)
from extraction import ExtractionError, parse_generated_site
from models import GeneratedSite
from settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Gemini answers 503 UNAVAILABLE when a model is overloaded
OVERLOAD_STATUS = 503


def build_genai_client(settings: Settings) -> Optional[genai.Client]:
    if not settings.API_KEY:
        return None
    return genai.Client(
        api_key=settings.API_KEY,
        http_options=types.HttpOptions(timeout=settings.REQUEST_TIMEOUT_MS),
    )


class ProviderClient:
    """Calls Gemini with overload retries and an ordered model fallback."""

    def __init__(self, settings: Settings, client: Optional[genai.Client] = None):
        self.settings = settings
        self._client = client

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Model %s overloaded (attempt %d/%d). Retrying in %.1fs...",
            getattr(exc, "model", "?"),
            retry_state.attempt_number,
            self.settings.MAX_ATTEMPTS,
            self.settings.RETRY_DELAY_SECONDS,
        )

    def ensure_configured(self):
        if not self.settings.API_KEY or self._client is None:
            raise ConfigurationError("GOOGLE_API_KEY is not defined.")
        return self._client

    def _call_model(self, model: str, prompt: str) -> str:
        client = self.ensure_configured()
        config = None
        if self.settings.TEMPERATURE is not None:
            config = types.GenerateContentConfig(temperature=self.settings.TEMPERATURE)

        try:
            response = client.models.generate_content(
                model=model,
                contents=[{"role": "user", "parts": [{"text": prompt}]}],
                config=config,
            )
        except genai_errors.APIError as e:
            if e.code == OVERLOAD_STATUS:
                raise UpstreamOverloadedError(model, "model overloaded") from e
            logger.error("Google API error from %s: %s %s", model, e.code, e.message)
            raise UpstreamFailure(model, f"request failed with status {e.code}") from e
        except genai_errors.UnknownApiResponseError as e:
            logger.error("Unreadable response body from %s: %s", model, e)
            raise UpstreamFailure(model, "response body is not valid JSON") from e
        except httpx.HTTPError as e:
            raise UpstreamFailure(model, f"transport error: {type(e).__name__}") from e
        except Exception as e:
            logger.exception("Unexpected error calling %s", model)
            raise UpstreamFailure(model, f"unexpected error: {type(e).__name__}") from e

        text = response.text if getattr(response, "candidates", None) else None
        if not text:
            raise MalformedResponseError(model, "invalid response structure from Google API")
        return text

    def generate_text(self, model: str, prompt: str) -> str:
        """One model, retried only while it reports overload."""
        retryer = Retrying(
            reraise=True,
            stop=stop_after_attempt(self.settings.MAX_ATTEMPTS),
            wait=wait_fixed(self.settings.RETRY_DELAY_SECONDS),
            retry=retry_if_exception_type(UpstreamOverloadedError),
            before_sleep=self._log_retry,
        )
        return retryer(self._call_model, model, prompt)

    def _attempt(self, model: str, prompt: str, parse: Callable[[str], T]) -> T:
        text = self.generate_text(model, prompt)
        try:
            return parse(text)
        except ExtractionError as e:
            raise ResponseParseError(model, str(e)) from e

    def generate_structured(
        self,
        prompt: str,
        parse: Callable[[str], T],
        models: Optional[Sequence[str]] = None,
    ) -> T:
        """Try each model in order and return the first result ``parse`` accepts.

        Overload exhaustion, other upstream failures and parse failures all
        move on to the next model. Only when every model has failed is
        :class:`ExhaustionError` raised.
        """
        self.ensure_configured()
        models = list(models if models is not None else self.settings.MODEL_NAMES)

        for model in models:
            logger.info("Trying model: %s", model)
            try:
                result = self._attempt(model, prompt, parse)
            except UpstreamOverloadedError:
                logger.error("Model %s still overloaded after %d attempts", model, self.settings.MAX_ATTEMPTS)
                continue
            except UpstreamError as e:
                logger.error("Error using %s: %s", model, e)
                continue
            logger.info("Success using model: %s", model)
            return result

        raise ExhaustionError(models)

    def generate_site(self, prompt: str) -> GeneratedSite:
        return self.generate_structured(prompt, parse_generated_site)
