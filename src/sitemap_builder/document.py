from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

import requests

from .errors import MissingDestinationError, SitemapFormatError, ValidationError
from .ingest import (
    EntryMappings,
    FieldList,
    SingleEntry,
    URLStringList,
    classify_add_args,
)
from .logger import get_logger
from .storage import Location, is_remote, read_bytes, write_bytes
from .url_entry import URLEntry

logger = get_logger(__name__)

DEFAULT_XMLNS = "http://www.google.com/schemas/sitemap/0.84"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

_XML_NAME_RE = re.compile(r"^(\{[^}]+\})?[A-Za-z_][\w.\-]*$")


def _split_tag(tag: str) -> Tuple[Optional[str], str]:
    """'{ns}local' -> ('ns', 'local'); 'local' -> (None, 'local')"""
    if tag.startswith("{"):
        ns, _, local = tag[1:].partition("}")
        return ns, local
    return None, tag


def _format_priority(value: float) -> str:
    # shortest repr digits, positional form (no exponent)
    text = format(Decimal(repr(float(value) + 0.0)), "f")
    if "." not in text:
        text += ".0"
    return text


def _element_text(key: str, value: Any) -> str:
    if key == "priority":
        return _format_priority(value)
    return str(value)


class SitemapDocument:
    """
    A sitemap ``urlset``: an ordered list of :class:`URLEntry` plus the
    namespace it is written with.

        doc = SitemapDocument("sitemap.xml.gz", pretty=True)
        doc.add("https://example.com/", "https://example.com/about/")
        doc.add(loc="https://example.com/blog/", changefreq="daily")
        doc.write()

    If ``path`` names an existing local file it is read right away.
    """

    def __init__(
        self,
        path: Optional[Location] = None,
        *,
        xmlns: Optional[str] = None,
        pretty: bool = False,
        session: Optional[requests.Session] = None,
    ):
        self.path = path
        self.pretty = pretty
        self.session = session
        self._xmlns: Optional[str] = xmlns
        self._entries: List[URLEntry] = []
        # lenient problems found by the last from_xml()
        self.issues: List[ValidationError] = []

        if path and not is_remote(path) and Path(path).exists():
            self.read()

    # -- namespace -----------------------------------------------------

    @property
    def xmlns(self) -> str:
        return self._xmlns or DEFAULT_XMLNS

    @xmlns.setter
    def xmlns(self, value: Optional[str]) -> None:
        self._xmlns = value

    # -- entries -------------------------------------------------------

    @property
    def entries(self) -> List[URLEntry]:
        """Entries that can be written out, i.e. the ones that have a loc."""
        return [e for e in self._entries if isinstance(e, URLEntry) and e.is_valid]

    @entries.setter
    def entries(self, entries: Iterable[URLEntry]) -> None:
        self._entries = list(entries)

    def __iter__(self) -> Iterator[URLEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def add(self, *args: Any, **fields: Any) -> List[URLEntry]:
        """
        Add entries to the sitemap. All of these work:

            doc.add(URLEntry(loc="https://example.com/"))
            doc.add({"loc": "https://example.com/"}, {"loc": "https://example.com/a"})
            doc.add("loc", "https://example.com/", "priority", 1.0)
            doc.add(loc="https://example.com/", priority=1.0)
            doc.add("https://example.com/", "https://example.com/a")

        Every entry is built before any is added, so a ValidationError leaves
        the document as it was.

        Returns:
            The entries that were appended
        """
        request = classify_add_args(args, fields)
        new_entries = request.build()
        self._entries.extend(new_entries)
        logger.debug(f"Added {len(new_entries)} entries ({type(request).__name__})")
        return new_entries

    def add_entries(self, *entries: URLEntry) -> List[URLEntry]:
        return self._append(SingleEntry(list(entries)).build())

    def add_mappings(self, *mappings: Mapping[str, Any]) -> List[URLEntry]:
        return self._append(EntryMappings(list(mappings)).build())

    def add_fields(self, **fields: Any) -> List[URLEntry]:
        return self._append(FieldList(fields).build())

    def add_urls(self, *urls: str) -> List[URLEntry]:
        return self._append(URLStringList(list(urls)).build())

    def _append(self, new_entries: List[URLEntry]) -> List[URLEntry]:
        self._entries.extend(new_entries)
        return new_entries

    def remove(self, loc: str) -> int:
        """Clear every entry whose loc is ``loc``. Returns how many were cleared."""
        count = 0
        for entry in self.entries:
            if entry.loc == loc:
                entry.clear()
                count += 1
        return count

    # -- XML -----------------------------------------------------------

    def to_xml(self) -> str:
        """Return the sitemap as an XML document string."""
        urlset = ET.Element("urlset", attrib={"xmlns": self.xmlns})

        for entry in self.entries:
            url_el = ET.SubElement(urlset, "url")
            for key, value in entry.to_mapping().items():
                if not _XML_NAME_RE.match(key):
                    logger.warning(f"Skipping field '{key}' of {entry.loc}: not an XML name")
                    continue
                field_el = ET.SubElement(url_el, key)
                field_el.text = _element_text(key, value)

        if self.pretty:
            ET.indent(urlset, space="  ")
        body = ET.tostring(urlset, encoding="unicode")
        return f"{XML_DECLARATION}\n{body}\n" if self.pretty else XML_DECLARATION + body

    def from_xml(self, text: Union[str, bytes]) -> "SitemapDocument":
        """
        Replace the entries (and namespace) with those of an XML document.

        Entries are built in lenient mode: values that don't validate are
        logged and skipped, collected in :attr:`issues`, and never raise.

        Raises:
            xml.etree.ElementTree.ParseError: the text is not well-formed XML
            SitemapFormatError: the root element is not ``urlset``
        """
        root = ET.fromstring(text)
        ns, local = _split_tag(root.tag)
        if local != "urlset":
            raise SitemapFormatError(f"Expected a <urlset> root element, got <{local}>")

        entries: List[URLEntry] = []
        issues: List[ValidationError] = []
        for url_el in root:
            if not isinstance(url_el.tag, str):
                continue  # comments, processing instructions
            if _split_tag(url_el.tag)[1] != "url":
                logger.warning(f"Ignoring unexpected <{url_el.tag}> element in urlset")
                continue
            entry = URLEntry(self._url_fields(url_el, ns), lenient=True)
            issues.extend(entry.issues)
            entries.append(entry)

        if ns:
            self.xmlns = ns
        self._entries = entries
        self.issues = issues
        if issues:
            logger.warning(f"Parsed {len(entries)} urls with {len(issues)} invalid values")
        else:
            logger.debug(f"Parsed {len(entries)} urls")
        return self

    @staticmethod
    def _url_fields(url_el: ET.Element, ns: Optional[str]) -> Dict[str, str]:
        fields: Dict[str, str] = {}

        # older compact files carry fields as attributes of <url>
        for name, value in url_el.attrib.items():
            if value.strip() and not name.startswith("{"):
                fields[name] = value.strip()

        for child in url_el:
            if not isinstance(child.tag, str):
                continue
            child_ns, child_local = _split_tag(child.tag)
            key = child_local if child_ns == ns else child.tag
            if len(child):
                logger.warning(f"Dropping nested <{key}> element; only flat fields are kept")
                continue
            value = (child.text or "").strip()
            if not value:
                continue
            if key in fields:
                logger.warning(f"Duplicate <{key}> in <url>; keeping the last one")
            fields[key] = value

        # reserved for the entry mode flag
        if fields.pop("lenient", None) is not None:
            logger.warning("Dropping <lenient> element; the name is reserved")
        return fields

    # -- files ---------------------------------------------------------

    def read(self, path: Optional[Location] = None) -> "SitemapDocument":
        """
        Read a sitemap into this document, from ``path`` or the document's
        default path. Files ending in .gz are decompressed.
        """
        location = path or self.path
        if not location:
            raise MissingDestinationError("read")
        return self.from_xml(read_bytes(location, session=self.session))

    def write(self, path: Optional[Location] = None) -> Path:
        """
        Write the sitemap to ``path`` or the document's default path.
        Files ending in .gz are compressed.
        """
        location = path or self.path
        if not location:
            raise MissingDestinationError("write")
        return write_bytes(location, self.to_xml().encode("utf-8"))
