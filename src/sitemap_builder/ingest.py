"""
Input shapes accepted by ``SitemapDocument.add()``.

``classify_add_args`` looks at the first positional argument and picks one of
four variants:

- a ``URLEntry``                     -> SingleEntry (all args appended as-is)
- a mapping                          -> EntryMappings (one entry per mapping)
- a bare word such as ``"loc"``      -> FieldList (args are key, value, ...)
- something like ``"https://..."``   -> URLStringList (one entry per URL)
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

from .errors import UnsupportedInputError
from .url_entry import URLEntry

_FIELD_NAME_RE = re.compile(r"^\w+$")
_URL_RE = re.compile(r"^\w+://")


@dataclass
class SingleEntry:
    entries: List[URLEntry] = field(default_factory=list)

    def build(self) -> List[URLEntry]:
        return list(self.entries)


@dataclass
class EntryMappings:
    mappings: List[Mapping[str, Any]] = field(default_factory=list)

    def build(self) -> List[URLEntry]:
        return [URLEntry(m) for m in self.mappings]


@dataclass
class FieldList:
    fields: Dict[str, Any] = field(default_factory=dict)

    def build(self) -> List[URLEntry]:
        return [URLEntry(self.fields)]


@dataclass
class URLStringList:
    urls: List[str] = field(default_factory=list)

    def build(self) -> List[URLEntry]:
        return [URLEntry(loc=u) for u in self.urls]


AddRequest = Union[SingleEntry, EntryMappings, FieldList, URLStringList]


def _flatten(args: Sequence[Any]) -> Tuple[Any, ...]:
    # add([a, b]) behaves like add(a, b)
    if len(args) == 1 and isinstance(args[0], (list, tuple)):
        return tuple(args[0])
    return tuple(args)


def _pairs(args: Sequence[Any]) -> Dict[str, Any]:
    if len(args) % 2:
        raise UnsupportedInputError(
            args[0], "field list needs an even number of key/value arguments"
        )
    fields: Dict[str, Any] = {}
    for key, value in zip(args[0::2], args[1::2]):
        if not isinstance(key, str):
            raise UnsupportedInputError(key, "field names must be strings")
        fields[key] = value
    return fields


def classify_add_args(args: Sequence[Any], kwargs: Mapping[str, Any] | None = None) -> AddRequest:
    """Decide how the arguments of ``add()`` should be turned into entries."""
    kwargs = dict(kwargs or {})
    args = _flatten(args)

    if not args:
        if kwargs:
            return FieldList(kwargs)
        raise UnsupportedInputError(None, "nothing to add")

    first = args[0]
    if kwargs and not (isinstance(first, str) and _FIELD_NAME_RE.match(first)):
        raise UnsupportedInputError(first, "keyword fields only combine with a field list")

    if isinstance(first, URLEntry):
        for item in args:
            if not isinstance(item, URLEntry):
                raise UnsupportedInputError(item, "mixed URLEntry and other values")
        return SingleEntry(list(args))

    if isinstance(first, Mapping):
        for item in args:
            if not isinstance(item, Mapping):
                raise UnsupportedInputError(item, "mixed mappings and other values")
        return EntryMappings(list(args))

    if isinstance(first, str):
        if _FIELD_NAME_RE.match(first):
            fields = _pairs(args)
            fields.update(kwargs)
            return FieldList(fields)
        if _URL_RE.match(first):
            for item in args:
                if not isinstance(item, str):
                    raise UnsupportedInputError(item, "expected a URL string")
            return URLStringList(list(args))

    raise UnsupportedInputError(first)
