# models.py
from typing import Optional

from pydantic import BaseModel, Field


class GenerationRequest(BaseModel):
    # presence is checked by the handler
    topic: Optional[str] = Field(None, description="What the generated website is about")


class ChatRequest(BaseModel):
    message: Optional[str] = Field(None, description="User message")


class GeneratedSite(BaseModel):
    html: str
    css: str
    js: str


class ChatReply(BaseModel):
    reply: str


class ErrorResponse(BaseModel):
    error: str
