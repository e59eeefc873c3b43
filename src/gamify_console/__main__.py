"""Allow ``python -m gamify_console`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m gamify_console`` behaves identically to the
``gamify-console`` console script.
"""

from __future__ import annotations

from gamify_console.cli.app import cli

if __name__ == "__main__":
    cli()
