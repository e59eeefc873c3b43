"""gamify-console — interactive administrative console for Gamify.

An operator logs in once, then manages questionnaires through scoped
commands translated into authenticated HTTP calls.
"""

from gamify_console.version import __version__

__all__: list[str] = ["__version__"]
