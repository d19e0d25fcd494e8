"""A small Elasticsearch HTTP client for services the common clients lack."""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any, Mapping, Optional

import requests

DEFAULT_URL = "http://127.0.0.1:9200"


class ElasticsearchError(Exception):
    """Raised when a request fails or Elasticsearch answers with an error."""

    def __init__(self, message: str, status: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


def _reason(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Unknown"


class Client:
    """Sends requests to one Elasticsearch node and decodes JSON replies."""

    def __init__(self, url: str = DEFAULT_URL, session: Optional[requests.Session] = None) -> None:
        self.url = url.rstrip("/")
        self.session = session if session is not None else requests.Session()

    def perform_request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
    ) -> Any:
        """Perform a request and return the decoded JSON reply.

        A string or bytes body is sent as it is; any other body is encoded
        as JSON. An empty reply gives None. A status outside 2xx, a failed
        connection or a reply that is not JSON raises ElasticsearchError.
        """
        kwargs: dict[str, Any] = {}
        if isinstance(body, (str, bytes)):
            kwargs["data"] = body.encode() if isinstance(body, str) else body
            kwargs["headers"] = {"Content-Type": "application/json"}
        elif body is not None:
            kwargs["json"] = body
        try:
            response = self.session.request(
                method, self.url + path, params=dict(params or {}), **kwargs
            )
        except requests.RequestException as exc:
            raise ElasticsearchError(f"elastic: {exc}") from exc

        status = response.status_code
        if not 200 <= status < 300:
            raise ElasticsearchError(
                f"elastic: Error {status} ({_reason(status)})", status, response.text
            )
        if not response.content.strip():
            return None
        try:
            return json.loads(response.content)
        except ValueError as exc:
            raise ElasticsearchError("invalid json", status, response.text) from exc