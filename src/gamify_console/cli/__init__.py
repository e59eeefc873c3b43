"""CLI layer — the console engine, rendering, prompts and error boundary.

This package is the outermost layer of the application.  It may import
from ``core``, ``infra`` and the top-level modules, but no other layer
may import from ``cli``.
"""
