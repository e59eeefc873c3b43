"""Process exit codes returned by :func:`gamify_console.cli.app.main`.

The console engine and the ``cli()`` boundary return these names, never
bare integers.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Operator left the console with ``exit`` or end-of-input."""

GENERAL_ERROR: int = 1
"""A known GamifyError was caught, or login was refused."""

UNEXPECTED_ERROR: int = 2
"""Any other exception reached ``cli()``."""

KEYBOARD_INTERRUPT: int = 130
"""Ctrl+C (128 + SIGINT)."""
