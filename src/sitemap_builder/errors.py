"""
Exception types raised by sitemap-builder.
"""
from __future__ import annotations

from typing import Any


class SitemapError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(SitemapError, ValueError):
    """A field rejected the value it was given."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"'{value}' is not a valid value for {field}: {reason}")


class UnsupportedInputError(SitemapError, TypeError):
    """`SitemapDocument.add()` got something it can't turn into an entry."""

    def __init__(self, value: Any, detail: str = ""):
        self.value = value
        shape = type(value).__name__ if not isinstance(value, str) else repr(value)
        message = f"Can't turn {shape} into a URLEntry"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class MissingDestinationError(SitemapError, ValueError):
    """read()/write() called without a path and no default path configured."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"No filename specified for SitemapDocument.{operation}")


class SitemapFormatError(SitemapError, ValueError):
    """The XML parsed fine but is not a urlset document."""
