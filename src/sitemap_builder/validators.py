"""
字段与配置验证工具
Field validators for sitemap entries, plus basic checks for build config files.

Every ``validate_*`` function returns ``(is_valid, reason)``; ``reason`` is an
empty string when the value is acceptable.
"""
from __future__ import annotations

import math
import numbers
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Tuple

MAX_LOC_LENGTH = 2048

CHANGEFREQ_VALUES = (
    "always",
    "hourly",
    "daily",
    "weekly",
    "monthly",
    "yearly",
    "never",
)

_LOC_RE = re.compile(r"https?://")
_LASTMOD_RE = re.compile(r"\d{4}-\d{2}-\d{2}(T\d{2}:\d{2}:\d{2}[+-]\d{2}:\d{2})?")
_PRIORITY_RE = re.compile(r"\d+(\.\d*)?|\.\d+")


def validate_loc(value: Any) -> Tuple[bool, str]:
    if not isinstance(value, str):
        return False, "must be a fully qualified url"
    if len(value) >= MAX_LOC_LENGTH:
        return False, f"must be less than {MAX_LOC_LENGTH} characters long"
    if value != value.strip():
        return False, "must not start or end with whitespace"
    if not _LOC_RE.match(value):
        return False, "must be a fully qualified url"
    return True, ""


def validate_changefreq(value: Any) -> Tuple[bool, str]:
    if not isinstance(value, str) or value not in CHANGEFREQ_VALUES:
        return False, "must be one of " + ", ".join(CHANGEFREQ_VALUES)
    return True, ""


def lastmod_text(value: Any) -> str:
    """
    Render a lastmod value as text.

    ``date`` becomes ``YYYY-MM-DD``; an aware ``datetime`` becomes
    ``YYYY-MM-DDTHH:MM:SS+HH:MM``. Strings are returned unchanged and anything
    else (including naive datetimes) gives an empty string.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None or value.utcoffset() is None:
            return ""
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return value
    return ""


def validate_lastmod(value: Any) -> Tuple[bool, str]:
    if isinstance(value, datetime) and (value.tzinfo is None or value.utcoffset() is None):
        return False, "must include a UTC offset"
    text = lastmod_text(value)
    if not _LASTMOD_RE.fullmatch(text):
        return False, "must be an ISO-8601 formatted date string"
    return True, ""


def priority_number(value: Any) -> float:
    """Convert an already validated priority to ``float``."""
    if isinstance(value, str):
        number = float(value.strip())
    else:
        number = float(value)
    # -0.0 -> 0.0
    return number + 0.0


def validate_priority(value: Any) -> Tuple[bool, str]:
    if isinstance(value, bool):
        return False, "must be a number"
    if isinstance(value, str):
        if not _PRIORITY_RE.fullmatch(value.strip()):
            return False, "must be a number"
        number = float(value.strip())
    elif isinstance(value, Decimal):
        if not value.is_finite():
            return False, "must be a number"
        number = float(value)
    elif isinstance(value, numbers.Real):
        number = float(value)
        if math.isnan(number):
            return False, "must be a number"
    else:
        return False, "must be a number"

    if number < 0.0:
        return False, "must be greater than or equal to 0.0"
    if number > 1.0:
        return False, "must be less than or equal to 1.0"
    return True, ""


# field name -> (validator, normaliser); order is the <url> child order
FIELD_RULES: Dict[str, Tuple[Callable[[Any], Tuple[bool, str]], Callable[[Any], Any]]] = {
    "loc": (validate_loc, str),
    "lastmod": (validate_lastmod, lastmod_text),
    "changefreq": (validate_changefreq, str),
    "priority": (validate_priority, priority_number),
}

FIELD_NAMES = tuple(FIELD_RULES)


def validate_field(name: str, value: Any) -> Tuple[bool, str]:
    """Validate ``value`` for the sitemap field ``name``."""
    rule = FIELD_RULES.get(name)
    if rule is None:
        return False, "is not a recognized sitemap field"
    return rule[0](value)


def validate_config_basic(config_dict: dict) -> List[str]:
    """
    验证配置的基本结构

    Returns:
        List of error messages (empty list means no errors)
    """
    errors: List[str] = []

    if not isinstance(config_dict, dict):
        errors.append("Config root must be a YAML mapping")
        return errors

    sitemap = config_dict.get("sitemap", {}) or {}
    if not isinstance(sitemap, dict):
        errors.append("'sitemap' must be a mapping")
    else:
        xmlns = sitemap.get("xmlns")
        if xmlns is not None and not isinstance(xmlns, str):
            errors.append("'sitemap.xmlns' must be a string")
        file_name = sitemap.get("file")
        if file_name is not None and not isinstance(file_name, str):
            errors.append("'sitemap.file' must be a string")

    defaults = config_dict.get("defaults", {}) or {}
    if not isinstance(defaults, dict):
        errors.append("'defaults' must be a mapping")
    else:
        for key, value in defaults.items():
            if key == "loc":
                errors.append("'defaults.loc' is not allowed; every url sets its own loc")
                continue
            is_valid, msg = validate_field(key, value)
            if not is_valid:
                errors.append(f"'defaults.{key}' {msg}")

    if "urls" not in config_dict:
        errors.append("Config is missing the 'urls' section")
        return errors

    urls = config_dict.get("urls") or []
    if not isinstance(urls, list):
        errors.append("'urls' must be a list")
        return errors

    if len(urls) == 0:
        errors.append("'urls' must contain at least one url")
        return errors

    for i, item in enumerate(urls):
        if isinstance(item, str):
            item = {"loc": item}
        if not isinstance(item, dict):
            errors.append(f"'urls[{i}]' must be a url string or a mapping")
            continue
        if not item.get("loc"):
            errors.append(f"'urls[{i}].loc' is required")
        for key, value in item.items():
            is_valid, msg = validate_field(key, value)
            if not is_valid:
                errors.append(f"'urls[{i}].{key}' {msg}")

    return errors
