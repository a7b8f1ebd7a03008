"""
API Models

This module defines the Pydantic models used for request/response validation
across the content, settings and reading-time endpoints.

Design Goals
------------
- Strong typing
- Safe defaults (no shared mutable state)
- One wire shape for success and one for errors
"""

from __future__ import annotations

from typing import Optional, Union, Literal
from pydantic import BaseModel, Field, ConfigDict


# ---------------------------------------------------------------------
# Content Fetch Models
# ---------------------------------------------------------------------

class ContentRequest(BaseModel):
    """
    Content fetch request sent by the playback client.

    All fields are optional at the schema level: a missing token or id is a
    domain error (403/400), not a schema error.
    """
    action: Optional[str] = None
    post_id: Optional[Union[int, str]] = None
    nonce: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class ContentData(BaseModel):
    content: str

    model_config = ConfigDict(extra="forbid")


class ContentResponse(BaseModel):
    """
    Successful fetch. `content` may start with the frontend-extraction
    sentinel.
    """
    success: Literal[True] = True
    data: ContentData

    model_config = ConfigDict(extra="forbid")


class ErrorData(BaseModel):
    code: str
    message: str

    model_config = ConfigDict(extra="forbid")


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    data: ErrorData

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------
# Client Settings
# ---------------------------------------------------------------------

class ClientSettings(BaseModel):
    """
    Configuration injected into the page at render time.
    """
    ajax_url: str = Field(..., min_length=1)
    nonce: str = Field(..., min_length=1)
    ajax_action: str = Field(..., min_length=1)
    reading_text: str = "Reading..."
    pause_text: str = "Pause"
    resume_text: str = "Resume"
    error_text: str = "Error fetching content."
    unsupported_text: str = "Your browser does not support text-to-speech."
    content_selector: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------
# Reading Time
# ---------------------------------------------------------------------

class ReadTimeOptions(BaseModel):
    """
    Display options of the reading-time block.
    """
    read_aloud: Literal["yes", "no"] = "no"
    css_class: str = "readtime"
    wpm: int = 180
    link_text: str = "Listen"
    icon_class: str = "fas fa-headphones"

    model_config = ConfigDict(extra="forbid")
