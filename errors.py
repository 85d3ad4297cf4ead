# errors.py
from typing import Optional, Sequence


class SiteGenError(Exception):
    """Base error. Carries the HTTP status and the message safe to show callers."""

    status_code = 500
    public_message = "Internal server error."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)


class ConfigurationError(SiteGenError):
    public_message = "The AI service is not configured."


class InputValidationError(SiteGenError):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        # the caller sent it, so it is safe to echo back
        self.public_message = message


class UpstreamError(SiteGenError):
    """A single model attempt failed. Never leaves the fallback loop."""

    status_code = 502

    def __init__(self, model: str, message: str):
        super().__init__(f"{model}: {message}")
        self.model = model


class UpstreamOverloadedError(UpstreamError):
    pass


class UpstreamFailure(UpstreamError):
    pass


class MalformedResponseError(UpstreamFailure):
    """Upstream answered 2xx but without candidate text."""


class ResponseParseError(UpstreamError):
    pass


class ExhaustionError(SiteGenError):
    status_code = 503
    public_message = (
        "All Gemini models are currently overloaded or unavailable. "
        "Please try again later."
    )

    def __init__(self, models: Sequence[str]):
        super().__init__(f"no model succeeded: {', '.join(models) or '(none configured)'}")
        self.models = list(models)


class AssistantError(SiteGenError):
    public_message = "AI assistant failed. Try again later."
