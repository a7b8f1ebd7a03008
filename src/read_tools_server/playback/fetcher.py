"""
Transcript Fetcher

Client side of the content fetch: posts the item id and security token to
the endpoint and maps every outcome to a transcript or a playback error.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .errors import NetworkError, ServerError
from ..api.models import ClientSettings
from ..core.errors import ErrorCode

logger = logging.getLogger("readtools.playback")


def _error_code(raw: Any) -> ErrorCode:
    try:
        return ErrorCode(raw)
    except ValueError:
        return ErrorCode.CONTENT_RETRIEVAL_ERROR


class TranscriptFetcher:
    """
    Posts fetch requests with a shared `httpx.AsyncClient`.

    No timeout is imposed beyond the client's own transport default.
    """

    def __init__(self, config: ClientSettings, client: httpx.AsyncClient) -> None:
        self._config = config
        self._client = client

    async def fetch(self, item_id: int) -> str:
        """
        Fetch the transcript of `item_id`.

        Returns
        -------
        str
            The transcript, possibly prefixed with the extraction sentinel.

        Raises
        ------
        ServerError
            The endpoint answered with a well-formed error payload.
        NetworkError
            Transport failure, or a response that is not the expected shape.
        """
        payload = {
            "action": self._config.ajax_action,
            "post_id": item_id,
            "nonce": self._config.nonce,
        }

        try:
            resp = await self._client.post(self._config.ajax_url, json=payload)
        except httpx.HTTPError as exc:
            logger.error("Content fetch for item %d failed: %s", item_id, exc)
            raise NetworkError(self._config.error_text) from exc

        body = self._json_body(resp)

        if resp.is_success and body is not None and body.get("success") is True:
            data = body.get("data")
            content = data.get("content") if isinstance(data, dict) else None
            if isinstance(content, str):
                return content

        error = self._server_error(resp, body)
        if error is not None:
            raise error

        logger.error(
            "Malformed response for item %d (status %d)",
            item_id,
            resp.status_code,
        )
        raise NetworkError(self._config.error_text)

    @staticmethod
    def _json_body(resp: httpx.Response) -> Optional[Dict[str, Any]]:
        try:
            body = resp.json()
        except ValueError:
            return None
        return body if isinstance(body, dict) else None

    def _server_error(
        self,
        resp: httpx.Response,
        body: Optional[Dict[str, Any]],
    ) -> Optional[ServerError]:
        if body is None or body.get("success") is not False:
            return None

        data = body.get("data")
        if not isinstance(data, dict):
            return None

        message = data.get("message") or self._config.error_text
        return ServerError(_error_code(data.get("code")), resp.status_code, message)
