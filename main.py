# main.py
import logging
import os

from dotenv import load_dotenv
load_dotenv(override=True)

from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from google import genai

from errors import (
    AssistantError,
    InputValidationError,
    MalformedResponseError,
    SiteGenError,
    UpstreamError,
)
from models import ChatReply, ChatRequest, ErrorResponse, GeneratedSite, GenerationRequest
from provider import ProviderClient, build_genai_client
from settings import Settings

logger = logging.getLogger(__name__)

CHAT_FALLBACK_REPLY = "I am unable to answer right now."

SITE_PROMPT = (
    "You are an expert web developer. A user requested a webpage for topic: \"{topic}\".\n"
    "Generate a complete, modern, visually appealing single-page website.\n"
    "HTML, CSS, and JS must each exceed 50 lines.\n"
    "Respond ONLY with a single JSON object:\n"
    "{{\"html\": \"HTML code here\", \"css\": \"CSS code here\", \"js\": \"JS code here\"}}\n"
    "No extra explanations or markdown."
)


def build_site_prompt(topic: str) -> str:
    return SITE_PROMPT.format(topic=topic.strip())


def _require(value: Optional[str], message: str) -> str:
    if not value or not value.strip():
        raise InputValidationError(message)
    return value


def create_app(
    settings: Optional[Settings] = None,
    genai_client: Optional[genai.Client] = None,
) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if genai_client is None:
        genai_client = build_genai_client(settings)
    provider = ProviderClient(settings, genai_client)

    app = FastAPI(title="SiteGen API", version="1.0.0")
    app.state.settings = settings
    app.state.provider = provider

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Errors ---
    @app.exception_handler(SiteGenError)
    async def sitegen_error_handler(request: Request, exc: SiteGenError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info("%s %s rejected: %d validation error(s)", request.method, request.url.path, len(exc.errors()))
        return JSONResponse(status_code=400, content={"error": "Invalid request body."})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("%s %s crashed", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": SiteGenError.public_message})

    error_responses = {
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    @app.post(
        "/generate",
        response_model=GeneratedSite,
        responses={**error_responses, 503: {"model": ErrorResponse}},
    )
    def generate(req: GenerationRequest):
        # credential check precedes input validation
        provider.ensure_configured()
        topic = _require(req.topic, "No topic provided in request.")
        return provider.generate_site(build_site_prompt(topic))

    @app.post("/chat", response_model=ChatReply, responses=error_responses)
    def chat(req: ChatRequest):
        provider.ensure_configured()
        message = _require(req.message, "Message is required")
        try:
            text = provider.generate_text(settings.CHAT_MODEL, message)
        except MalformedResponseError as e:
            logger.warning("Chat model %s returned no text: %s", settings.CHAT_MODEL, e)
            return ChatReply(reply=CHAT_FALLBACK_REPLY)
        except UpstreamError as e:
            raise AssistantError() from e
        if not text.strip():
            return ChatReply(reply=CHAT_FALLBACK_REPLY)
        return ChatReply(reply=text)

    # --- Static site (mounted last so API routes win) ---
    if settings.STATIC_DIR and os.path.isdir(settings.STATIC_DIR):
        app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")
    else:
        logger.info("Static directory %r not found; static serving disabled", settings.STATIC_DIR)

    return app


app = create_app()


if __name__ == "__main__":
    _settings = app.state.settings
    logger.info("Server running at http://%s:%d", _settings.HOST, _settings.PORT)
    uvicorn.run(app, host=_settings.HOST, port=_settings.PORT)
