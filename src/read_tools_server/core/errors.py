"""
Error Taxonomy and Global Error Handling

This module defines the error conditions shared by the fetch endpoint and the
playback client, and the application-wide exception handlers.

Design Goals
------------
- Every server-detected condition maps to one status code and one error code
- Errors are returned as structured responses, never raised across the
  request boundary
- Never leak internal exception details to clients
- Log full stack traces internally for debugging
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("readtools.errors")


# ---------------------------------------------------------------------
# Error Codes
# ---------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable names for every failure the system can surface."""

    SECURITY_CHECK_FAILED = "SecurityCheckFailed"
    RATE_LIMITED = "RateLimited"
    INVALID_ITEM_ID = "InvalidItemId"
    ITEM_NOT_ACCESSIBLE = "ItemNotAccessible"
    EMPTY_CONTENT = "EmptyContent"
    CONTENT_RETRIEVAL_ERROR = "ContentRetrievalError"
    ENGINE_UNSUPPORTED = "EngineUnsupported"
    ENGINE_ERROR = "EngineError"
    NETWORK_ERROR = "NetworkError"


# ---------------------------------------------------------------------
# Server-side Exceptions
# ---------------------------------------------------------------------

class ReadToolsError(Exception):
    """
    Base class for conditions detected by the fetch endpoint.

    Subclasses fix the HTTP status code, the error code and a default
    human-readable message.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: ErrorCode = ErrorCode.CONTENT_RETRIEVAL_ERROR
    default_message: str = "Error retrieving content."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class SecurityCheckFailed(ReadToolsError):
    status_code = status.HTTP_403_FORBIDDEN
    code = ErrorCode.SECURITY_CHECK_FAILED
    default_message = "Security check failed."


class RateLimited(ReadToolsError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = ErrorCode.RATE_LIMITED
    default_message = "Too many requests. Please try again later."


class InvalidItemId(ReadToolsError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCode.INVALID_ITEM_ID
    default_message = "Error: Invalid post ID."


class ItemNotAccessible(ReadToolsError):
    status_code = status.HTTP_404_NOT_FOUND
    code = ErrorCode.ITEM_NOT_ACCESSIBLE
    default_message = "Error: Post not found or not accessible."


class EmptyContent(ReadToolsError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCode.EMPTY_CONTENT
    default_message = "Error: No readable content found."


class ContentRetrievalError(ReadToolsError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = ErrorCode.CONTENT_RETRIEVAL_ERROR
    default_message = "Error retrieving post content."


def error_payload(code: ErrorCode, message: str) -> Dict[str, Any]:
    """Build the wire shape shared by every error response."""
    return {
        "success": False,
        "data": {
            "code": code.value,
            "message": message,
        },
    }


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def read_tools_error_handler(
    request: Request,
    exc: ReadToolsError,
) -> JSONResponse:
    """
    Convert a ReadToolsError into its structured JSON response.

    Parameters
    ----------
    request : Request
        The incoming HTTP request.

    exc : ReadToolsError
        The condition raised by a route or dependency.

    Returns
    -------
    JSONResponse
        Response carrying the condition's status code and message.
    """
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "Request rejected (%s) on %s %s: %s",
        exc.code.value,
        request.method,
        request.url.path,
        exc.message,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(exc.code, exc.message),
    )


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Map malformed request bodies to a 400 in the shared error shape.
    """
    logger.warning(
        "Malformed request on %s %s: %s",
        request.method,
        request.url.path,
        exc.errors(),
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_payload(ErrorCode.INVALID_ITEM_ID, "Error: Malformed request."),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Behavior
    --------
    - Logs the full exception stack trace for internal diagnostics.
    - Returns a generic 500 error to the client with no internal details.
    - Ensures consistent error response format across the entire API.

    Parameters
    ----------
    request : Request
        The incoming HTTP request that triggered the exception.

    exc : Exception
        The uncaught exception instance.

    Returns
    -------
    JSONResponse
        A JSON 500 response with a minimal error payload.
    """

    # Log full traceback internally (never returned to client)
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_payload(ErrorCode.CONTENT_RETRIEVAL_ERROR, "Internal server error"),
    )
