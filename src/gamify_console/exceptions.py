"""Custom exception hierarchy for gamify-console.

All exceptions that cross layer boundaries must inherit from
:class:`GamifyError`.  Raw third-party exceptions (httpx, json decoding,
pydantic validation) must NEVER propagate beyond the layer that caught
them — they are re-raised as a typed subclass defined here.

Hierarchy
---------
GamifyError
├── ConfigurationError
├── InvalidInputError
│   └── QuestionLimitError
├── TransportError
├── ImageReadError
├── AuthenticationError
├── RequestRejectedError
└── PayloadError
"""

from __future__ import annotations


class GamifyError(Exception):
    """Base exception for all gamify-console errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the console can render a clean message without
    leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Configuration ---------------------------------------------------------

class ConfigurationError(GamifyError):
    """Raised when settings are missing or invalid."""


# --- Operator input ----------------------------------------------------------

class InvalidInputError(GamifyError):
    """Raised when operator input is rejected before any request is sent."""


class QuestionLimitError(InvalidInputError):
    """Raised when a questionnaire is given more questions than the wire format allows."""


# --- Network -----------------------------------------------------------------

class TransportError(GamifyError):
    """Raised when the backend cannot be reached or the request times out."""


class ImageReadError(GamifyError):
    """Raised when the image to upload cannot be read from disk."""


class AuthenticationError(GamifyError):
    """Raised when the backend refuses the supplied credentials."""


class RequestRejectedError(GamifyError):
    """Raised when the backend answers with a non-success status code."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code: int = status_code


class PayloadError(GamifyError):
    """Raised when a response body does not match the expected shape."""
