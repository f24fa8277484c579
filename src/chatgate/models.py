# src/chatgate/models.py
from __future__ import annotations
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field

# Wire format is camelCase; Python side stays snake_case.


class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SetupRequest(_Wire):
    # Optional on purpose: a missing key is a 400 with our own message, not a 422
    api_key: Optional[str] = Field(None, alias="apiKey")
    session_id: Optional[str] = Field(None, alias="sessionId")


class SetupResponse(_Wire):
    success: bool = True
    model: str
    message: str


class ChatRequest(_Wire):
    message: Optional[str] = None
    custom_prompt: Optional[str] = Field(None, alias="customPrompt")
    response_length: Optional[int] = Field(None, alias="responseLength")
    tone: Optional[str] = None
    temperature: Optional[Union[float, str]] = None
    session_id: Optional[str] = Field(None, alias="sessionId")


class ChatResponse(_Wire):
    response: str
    model_used: str = Field(..., alias="modelUsed")


class StatusResponse(_Wire):
    status: str = "Server is running"
    active_sessions: int = Field(..., alias="activeSessions")


class ErrorResponse(BaseModel):
    error: str
