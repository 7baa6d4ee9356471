from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .document import SitemapDocument
from .logger import get_logger
from .validators import validate_config_basic

logger = get_logger(__name__)


@dataclass
class OutputConfig:
    file: str = "sitemap.xml"
    # None means the default Google 0.84 namespace
    xmlns: Optional[str] = None
    pretty: bool = True


@dataclass
class BuildConfig:
    output: OutputConfig
    # field values applied to every url that doesn't set them itself
    defaults: Dict[str, Any] = field(default_factory=dict)
    urls: List[Dict[str, Any]] = field(default_factory=list)


def _load_raw_config(path: Path) -> Dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError("Config root must be a mapping")
    return data


def load_config(path: Path, validate: bool = True) -> BuildConfig:
    raw = _load_raw_config(path)

    if validate:
        errors = validate_config_basic(raw)
        if errors:
            raise ValueError("Invalid config:\n" + "\n".join(f"  - {e}" for e in errors))

    sitemap_raw = raw.get("sitemap") or {}
    output = OutputConfig(
        file=str(sitemap_raw.get("file", "sitemap.xml")),
        xmlns=str(sitemap_raw["xmlns"]) if sitemap_raw.get("xmlns") else None,
        pretty=bool(sitemap_raw.get("pretty", True)),
    )

    urls: List[Dict[str, Any]] = []
    for item in raw.get("urls") or []:
        if isinstance(item, str):
            urls.append({"loc": item})
        elif isinstance(item, dict):
            urls.append(dict(item))
    if not urls:
        raise ValueError("Config `urls` must contain at least one url")

    return BuildConfig(
        output=output,
        defaults=dict(raw.get("defaults") or {}),
        urls=urls,
    )


def build_document(config: BuildConfig, path: Optional[str] = None) -> SitemapDocument:
    """Create a sitemap document holding every url listed in ``config``."""
    doc = SitemapDocument(xmlns=config.output.xmlns, pretty=config.output.pretty)
    doc.path = path or config.output.file
    mappings = [{**config.defaults, **u} for u in config.urls]
    doc.add_mappings(*mappings)
    logger.info(f"Built sitemap with {len(doc)} urls")
    return doc
