"""
Client-side playback errors.

Every error carries an `ErrorCode` from the shared taxonomy and a message
fit to show the reader.
"""

from __future__ import annotations

from typing import Optional

from ..core.errors import ErrorCode


class PlaybackError(Exception):
    code: ErrorCode = ErrorCode.ENGINE_ERROR
    default_message: str = "An error occurred during speech synthesis."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class EngineUnsupported(PlaybackError):
    code = ErrorCode.ENGINE_UNSUPPORTED
    default_message = "Your browser does not support text-to-speech."


class EngineError(PlaybackError):
    code = ErrorCode.ENGINE_ERROR
    default_message = "An error occurred during speech synthesis."


class NetworkError(PlaybackError):
    code = ErrorCode.NETWORK_ERROR
    default_message = "Error communicating with the server."


class EmptyContentError(PlaybackError):
    code = ErrorCode.EMPTY_CONTENT
    default_message = "No readable content found on this page."


class ServerError(PlaybackError):
    """A well-formed error response from the fetch endpoint."""

    def __init__(self, code: ErrorCode, status_code: int, message: Optional[str] = None) -> None:
        self.code = code
        self.status_code = status_code
        super().__init__(message or "Error fetching content.")
