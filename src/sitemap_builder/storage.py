"""
Byte source / sink for sitemap files.

Locations ending in ``.gz`` are gzip compressed. ``http://`` and ``https://``
locations can be read (fetched with requests) but not written.
"""
from __future__ import annotations

import gzip
from pathlib import Path
from typing import Optional, Union

import requests

from . import __version__
from .errors import SitemapError
from .logger import get_logger

logger = get_logger(__name__)

Location = Union[str, Path]

_GZIP_MAGIC = b"\x1f\x8b"


def is_remote(location: Location) -> bool:
    return str(location).lower().startswith(("http://", "https://"))


def is_gzip_location(location: Location) -> bool:
    return str(location).lower().endswith(".gz")


def _prepare_session(session: Optional[requests.Session]) -> requests.Session:
    session = session or requests.Session()
    session.headers.setdefault(
        "User-Agent",
        f"sitemap-builder/{__version__}",
    )
    session.headers.setdefault("Accept", "application/xml,text/xml;q=0.9,*/*;q=0.8")
    return session


def _fetch(url: str, session: Optional[requests.Session]) -> bytes:
    resp = _prepare_session(session).get(url, timeout=15)
    resp.raise_for_status()
    return resp.content


def read_bytes(location: Location, session: Optional[requests.Session] = None) -> bytes:
    """
    Read a whole sitemap file.

    Args:
        location: Local path or http(s) URL
        session: Optional requests session used for remote locations

    Returns:
        The uncompressed document bytes
    """
    if is_remote(location):
        data = _fetch(str(location), session)
        # servers often undo the compression already (Content-Encoding: gzip)
        if is_gzip_location(location) and data[:2] == _GZIP_MAGIC:
            data = gzip.decompress(data)
        logger.info(f"Fetched sitemap from {location} ({len(data)} bytes)")
        return data

    path = Path(location)
    if is_gzip_location(path):
        with gzip.open(path, "rb") as fh:
            data = fh.read()
    else:
        with open(path, "rb") as fh:
            data = fh.read()
    logger.info(f"Read sitemap from {path}")
    return data


def write_bytes(location: Location, data: bytes) -> Path:
    """Write a whole sitemap file, gzip-compressed when the name ends in .gz."""
    if is_remote(location):
        raise SitemapError(f"Can't write a sitemap to a remote location: {location}")

    path = Path(location)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)

    if is_gzip_location(path):
        with gzip.open(path, "wb", compresslevel=9) as fh:
            fh.write(data)
    else:
        with open(path, "wb") as fh:
            fh.write(data)
    logger.info(f"Wrote sitemap to {path}")
    return path
