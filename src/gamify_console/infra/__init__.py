"""Infrastructure layer — external system integration.

This layer wraps all interaction with the Gamify backend over HTTP.
Every raw third-party exception must be caught here and re-raised as a
:class:`~gamify_console.exceptions.GamifyError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from gamify_console.infra.http_transport import HttpTransport

__all__: list[str] = ["HttpTransport"]
