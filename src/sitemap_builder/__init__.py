"""
Sitemap Builder

Create, read and edit sitemap.xml files.
"""

__version__ = "0.1.0"

from .document import DEFAULT_XMLNS, SitemapDocument
from .errors import (
    MissingDestinationError,
    SitemapError,
    SitemapFormatError,
    UnsupportedInputError,
    ValidationError,
)
from .url_entry import URLEntry

__all__ = [
    "__version__",
    "DEFAULT_XMLNS",
    "SitemapDocument",
    "URLEntry",
    "SitemapError",
    "ValidationError",
    "UnsupportedInputError",
    "MissingDestinationError",
    "SitemapFormatError",
]
