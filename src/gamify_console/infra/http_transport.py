"""httpx-backed implementation of :class:`~gamify_console.core.protocols.Transport`.

This module is the **only** place in the codebase that imports ``httpx``.
All httpx exceptions are caught here and re-raised as typed
:class:`~gamify_console.exceptions.GamifyError` subclasses — nothing raw
escapes the infrastructure boundary.
"""

from __future__ import annotations

import mimetypes
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import httpx

from gamify_console.config import AppSettings
from gamify_console.core.models import RawResponse
from gamify_console.exceptions import ImageReadError, TransportError
from gamify_console.log import get_logger

logger = get_logger(__name__)


class HttpTransport:
    """Concrete :class:`Transport` holding one cookie-bearing ``httpx.Client``.

    Usage::

        with HttpTransport.from_settings(settings) as transport:
            transport.post_form("CheckLogin", data={...})
            transport.get("admin/listQuestionnaires", params={...})

    The session cookie set at login lives in the client's cookie jar and
    is attached to every later request automatically.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        user_agent: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {"User-Agent": user_agent} if user_agent else {}
        self._base_url: str = base_url
        self._client: httpx.Client = httpx.Client(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers=headers,
            follow_redirects=False,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> HttpTransport:
        return cls(
            settings.base_url,
            timeout=settings.http_timeout_seconds,
            user_agent=settings.user_agent,
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def get(self, path: str, *, params: Mapping[str, str]) -> RawResponse:
        return self._send("GET", path, params=dict(params))

    def delete(self, path: str, *, params: Mapping[str, str]) -> RawResponse:
        return self._send("DELETE", path, params=dict(params))

    def post_form(self, path: str, *, data: Mapping[str, str]) -> RawResponse:
        return self._send("POST", path, data=dict(data))

    def post_multipart(
        self,
        path: str,
        *,
        data: Mapping[str, str],
        files: Mapping[str, Path],
    ) -> RawResponse:
        return self._send("POST", path, data=dict(data), files=self._read_files(files))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _read_files(files: Mapping[str, Path]) -> dict[str, tuple[str, bytes, str]]:
        """Read every upload once, up front."""
        encoded: dict[str, tuple[str, bytes, str]] = {}
        for field_name, path in files.items():
            try:
                content = path.read_bytes()
            except OSError as exc:
                raise ImageReadError(
                    f"Cannot read {path}: {exc.strerror or exc}",
                    hint="Check that the path exists and is readable.",
                ) from exc
            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
            encoded[field_name] = (path.name, content, content_type)
        return encoded

    def _send(self, method: str, path: str, **kwargs: Any) -> RawResponse:
        logger.debug("request", method=method, path=path)
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("request timed out", method=method, path=path)
            raise TransportError(
                f"Request to {self._base_url}{path} timed out.",
                hint="The server may be overloaded or unreachable.",
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("request failed", method=method, path=path, error=str(exc))
            raise TransportError(
                f"Server {self._base_url} unreachable.",
                hint="Check base_url in your configuration.",
            ) from exc

        logger.debug("response", method=method, path=path, status_code=response.status_code)
        return RawResponse(status_code=response.status_code, text=response.text)
