from __future__ import annotations

import logging
from typing import Any, Protocol

import requests

from agv_rebrand.config import settings
from agv_rebrand.errors import UpstreamError

logger = logging.getLogger(__name__)


class SourceImageFetcher(Protocol):
    def fetch_source_image(self, dni: str) -> bytes:
        ...


def _file_url(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None
    urls = payload.get("urls")
    if not isinstance(urls, dict):
        return None
    file_url = urls.get("FILE")
    return file_url if isinstance(file_url, str) and file_url else None


class AgvClient:
    """Client for the remote agv API.

    The API answers either with JSON carrying ``urls.FILE`` (which is then
    downloaded) or with the image itself. One attempt per call, no retries.
    """

    def __init__(
        self,
        base_url: str | None = None,
        path: str | None = None,
        *,
        timeout_seconds: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = (base_url or settings.remote_base).rstrip("/")
        self._path = path if path is not None else settings.upstream_path
        self._timeout = timeout_seconds if timeout_seconds is not None else settings.upstream_timeout_seconds
        self._owns_session = session is None
        self._session = session or requests.Session()

    def close(self) -> None:
        # Injected sessions belong to the caller.
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> AgvClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _get(self, url: str, **kwargs: Any) -> requests.Response:
        try:
            response = self._session.get(url, timeout=self._timeout, **kwargs)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise UpstreamError(f"Error llamando API agv: {exc}") from exc
        return response

    def download(self, url: str) -> bytes:
        logger.info("downloading source image from %s", url)
        return self._get(url).content

    def fetch_source_image(self, dni: str) -> bytes:
        response = self._get(f"{self._base_url}{self._path}", params={"dni": dni})

        try:
            payload = response.json()
        except ValueError:
            payload = None

        file_url = _file_url(payload)
        if file_url is not None:
            return self.download(file_url)

        content_type = response.headers.get("content-type", "")
        if content_type.startswith("image"):
            return response.content

        raise UpstreamError("La API agv no devolvió urls.FILE ni imagen directa.")
