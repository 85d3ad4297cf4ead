import pytest
from fastapi.testclient import TestClient
from google.genai import errors as genai_errors

from main import create_app
from provider import ProviderClient
from settings import Settings

MODELS = ["model-a", "model-b", "model-c"]

SITE_JSON = '{"html": "<h1>Hi</h1>", "css": "h1 { color: red; }", "js": "console.log(1);"}'


def overloaded():
    return genai_errors.ServerError(
        503, {"error": {"code": 503, "message": "The model is overloaded.", "status": "UNAVAILABLE"}}
    )


def bad_request():
    return genai_errors.ClientError(
        400, {"error": {"code": 400, "message": "Invalid argument.", "status": "INVALID_ARGUMENT"}}
    )


class FakeResponse:
    def __init__(self, text):
        self.text = text
        self.candidates = [object()] if text is not None else []


class FakeModels:
    """Replays scripted outcomes per model; the last outcome repeats."""

    def __init__(self, script):
        self.script = {model: list(outcomes) for model, outcomes in script.items()}
        self.calls = []

    def generate_content(self, model, contents, config=None):
        self.calls.append(model)
        outcomes = self.script[model]
        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return FakeResponse(outcome)


class FakeGenaiClient:
    def __init__(self, script):
        self.models = FakeModels(script)


@pytest.fixture
def settings():
    return Settings(
        API_KEY="test-key",
        MODEL_NAMES=list(MODELS),
        CHAT_MODEL="chat-model",
        MAX_ATTEMPTS=3,
        RETRY_DELAY_SECONDS=0,
        STATIC_DIR="",
    )


@pytest.fixture
def make_provider(settings):
    def _make(script):
        fake = FakeGenaiClient(script)
        return ProviderClient(settings, fake), fake.models

    return _make


@pytest.fixture
def make_client(settings):
    def _make(script, **overrides):
        fake = FakeGenaiClient(script)
        app_settings = settings.model_copy(update=overrides)
        client = TestClient(create_app(app_settings, fake))
        return client, fake.models

    return _make
