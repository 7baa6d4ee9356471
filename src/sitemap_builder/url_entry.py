"""
One ``<url>`` entry of a sitemap.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from .errors import ValidationError
from .logger import get_logger
from .validators import FIELD_NAMES, FIELD_RULES

logger = get_logger(__name__)


class URLEntry:
    """
    A URL plus its optional crawl metadata.

    Field values are validated on assignment. In strict mode (the default) a
    bad value raises :class:`ValidationError`; in lenient mode it is logged,
    recorded in :attr:`issues` and the field keeps its previous value.

        entry = URLEntry(loc="https://example.com/", priority=0.8)
        entry.changefreq = "daily"
    """

    def __init__(
        self,
        fields: Optional[Mapping[str, Any]] = None,
        *,
        lenient: bool = False,
        **kwargs: Any,
    ):
        self._values: Dict[str, Any] = {}
        self.extra: Dict[str, str] = {}
        self.issues: List[ValidationError] = []

        opts: Dict[str, Any] = dict(fields or {})
        opts.update(kwargs)
        # mode first, so it governs every field below
        self.lenient = bool(opts.pop("lenient", lenient))

        for key, value in opts.items():
            if key in FIELD_RULES:
                self.set(key, value)
            elif self.lenient:
                logger.debug(f"Keeping unrecognized field '{key}' on {opts.get('loc')}")
                self.extra[key] = value
            else:
                raise ValidationError(key, value, "is not a recognized sitemap field")

    def get(self, name: str) -> Any:
        if name not in FIELD_RULES:
            raise AttributeError(f"URLEntry has no field '{name}'")
        return self._values.get(name)

    def set(self, name: str, value: Any) -> Any:
        """
        Validate and store one field.

        ``None`` always clears the field. Returns the value now stored, which
        is the old value when a lenient entry rejects the new one.
        """
        if name not in FIELD_RULES:
            raise AttributeError(f"URLEntry has no field '{name}'")

        if value is None:
            self._values.pop(name, None)
            return None

        validator, normalise = FIELD_RULES[name]
        is_valid, reason = validator(value)
        if not is_valid:
            error = ValidationError(name, value, reason)
            if not self.lenient:
                raise error
            logger.warning(str(error))
            self.issues.append(error)
            return self._values.get(name)

        self._values[name] = normalise(value)
        return self._values[name]

    @property
    def loc(self) -> Optional[str]:
        return self.get("loc")

    @loc.setter
    def loc(self, value: Optional[str]) -> None:
        self.set("loc", value)

    @property
    def lastmod(self) -> Optional[str]:
        return self.get("lastmod")

    @lastmod.setter
    def lastmod(self, value: Any) -> None:
        self.set("lastmod", value)

    @property
    def changefreq(self) -> Optional[str]:
        return self.get("changefreq")

    @changefreq.setter
    def changefreq(self, value: Optional[str]) -> None:
        self.set("changefreq", value)

    @property
    def priority(self) -> Optional[float]:
        return self.get("priority")

    @priority.setter
    def priority(self, value: Any) -> None:
        self.set("priority", value)

    @property
    def is_valid(self) -> bool:
        """True when the entry can be written to a sitemap (it has a loc)."""
        return bool(self._values.get("loc"))

    def clear(self) -> None:
        """Drop every field so the entry no longer shows up in its sitemap."""
        self._values.clear()
        self.extra.clear()

    def to_mapping(self) -> Dict[str, Any]:
        """
        Return the fields that are set, in ``<url>`` child order.

        Unset fields are left out; a priority of ``0.0`` counts as set.
        Opaque fields kept from a parsed document follow the known ones.
        """
        out: Dict[str, Any] = {}
        for name in FIELD_NAMES:
            value = self._values.get(name)
            if value is None or value == "":
                continue
            out[name] = value
        for key, value in self.extra.items():
            if value is None or value == "":
                continue
            out[key] = value
        return out

    to_dict = to_mapping

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, URLEntry):
            return NotImplemented
        return self.to_mapping() == other.to_mapping()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"URLEntry({self.to_mapping()!r})"
