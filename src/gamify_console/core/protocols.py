"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols, never on concrete
implementations.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from gamify_console.core.models import RawResponse


class Transport(Protocol):
    """Contract for the authenticated HTTP session.

    One call is one request/response cycle against ``base_url + path``.
    The session cookie obtained at login is attached implicitly to every
    later call.  Implementations must map all backend-specific exceptions
    to :class:`~gamify_console.exceptions.GamifyError` subclasses.
    """

    @property
    def base_url(self) -> str:
        """Base URL all paths are resolved against."""
        ...  # pragma: no cover

    def get(self, path: str, *, params: Mapping[str, str]) -> RawResponse:
        """Send a GET with *params* as the query string."""
        ...  # pragma: no cover

    def delete(self, path: str, *, params: Mapping[str, str]) -> RawResponse:
        """Send a DELETE with *params* as the query string."""
        ...  # pragma: no cover

    def post_form(self, path: str, *, data: Mapping[str, str]) -> RawResponse:
        """Send an url-encoded form POST."""
        ...  # pragma: no cover

    def post_multipart(
        self,
        path: str,
        *,
        data: Mapping[str, str],
        files: Mapping[str, Path],
    ) -> RawResponse:
        """Send a multipart POST; each file in *files* is read once, synchronously.

        Raises
        ------
        TransportError
            When the backend is unreachable or the request times out.
        ImageReadError
            When one of *files* cannot be read.
        """
        ...  # pragma: no cover
