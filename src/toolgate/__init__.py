"""
toolgate - sandboxed tool execution core for a local chat assistant.

Lets a conversational agent call a fixed catalog of capabilities (files,
note vault, web search, URL fetch, shell, browser) while keeping every call
inside user-enabled, user-configured boundaries.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("toolgate")
except PackageNotFoundError:
    __version__ = "0.4.0"

__all__ = [
    "__version__",
]
