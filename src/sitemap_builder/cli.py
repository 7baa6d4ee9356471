import argparse
import sys
import xml.etree.ElementTree as ET
from pathlib import Path

import requests

from .config import build_document, load_config
from .document import SitemapDocument
from .errors import SitemapError
from .logger import set_log_level
from .storage import is_remote
from .validators import CHANGEFREQ_VALUES


DEFAULT_CONFIG_NAME = "sitemap.config.yml"

# errors reported as "[ERROR] ..." instead of a traceback
_HANDLED_ERRORS = (SitemapError, OSError, ValueError, ET.ParseError, requests.RequestException)


def cmd_init(args):
    """Create a starter config file in the current directory."""
    target = Path(args.path or DEFAULT_CONFIG_NAME)
    if target.exists() and not args.force:
        print(f"[WARN] Config file already exists: {target}", file=sys.stderr)
        return 1

    template = """# sitemap-builder config
#
# Usually you only need to change:
# 1) sitemap.file  -- where the sitemap is written (.gz compresses it)
# 2) urls          -- the pages to list

sitemap:
  file: "sitemap.xml"
  # xmlns: "http://www.sitemaps.org/schemas/sitemap/0.9"
  pretty: true

# Applied to every url that doesn't set the field itself
defaults:
  changefreq: "weekly"
  priority: 0.5

urls:
  # Home page changes a lot and matters most
  - loc: "https://example.com/"
    changefreq: "daily"
    priority: 1.0

  # Plain strings only set loc (plus the defaults above)
  - "https://example.com/about/"
  - loc: "https://example.com/docs/"
    lastmod: "2005-06-03"
"""
    target.write_text(template, encoding="utf-8")
    print(f"[OK] Created config file: {target}")
    return 0


def cmd_build(args):
    """Build a sitemap from a config file."""
    config_path = Path(args.config or DEFAULT_CONFIG_NAME)
    if not config_path.exists():
        print(
            f"[ERROR] Config file not found: {config_path}. "
            f"Run `sitemap-builder init` first.",
            file=sys.stderr,
        )
        return 1

    try:
        config = load_config(config_path, validate=not args.no_validate)
        doc = build_document(config, path=args.output)
    except _HANDLED_ERRORS as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    if args.dry_run:
        print(doc.to_xml())
        return 0

    try:
        written = doc.write()
    except _HANDLED_ERRORS as e:
        print(f"[ERROR] Failed to write sitemap: {e}", file=sys.stderr)
        return 1
    print(f"[OK] Wrote {len(doc)} urls to {written}")
    return 0


def cmd_add(args):
    """Append urls to a sitemap file, creating it if needed."""
    try:
        doc = SitemapDocument(args.file, pretty=args.pretty)
        fields = {
            "lastmod": args.lastmod,
            "changefreq": args.changefreq,
            "priority": args.priority,
        }
        fields = {k: v for k, v in fields.items() if v is not None}
        added = doc.add_mappings(*({"loc": u, **fields} for u in args.urls))
        written = doc.write()
    except _HANDLED_ERRORS as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    print(f"[OK] Added {len(added)} urls to {written} ({len(doc)} total)")
    return 0


def cmd_remove(args):
    """Remove urls from a sitemap file."""
    if not Path(args.file).exists():
        print(f"[ERROR] Sitemap not found: {args.file}", file=sys.stderr)
        return 1
    try:
        doc = SitemapDocument(args.file)
        removed = sum(doc.remove(u) for u in args.urls)
        if removed == 0:
            print("[WARN] None of the given urls are in the sitemap", file=sys.stderr)
            return 1
        written = doc.write()
    except _HANDLED_ERRORS as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    print(f"[OK] Removed {removed} urls from {written} ({len(doc)} left)")
    return 0


def _load_existing(location):
    if not is_remote(location) and not Path(location).exists():
        raise SitemapError(f"Sitemap not found: {location}")
    return SitemapDocument().read(location)


def cmd_show(args):
    """Print the entries of a sitemap, one per line."""
    try:
        doc = _load_existing(args.file)
    except _HANDLED_ERRORS as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    print(f"# xmlns: {doc.xmlns}")
    for entry in doc:
        data = entry.to_mapping()
        loc = data.pop("loc")
        extras = "  ".join(f"{k}={v}" for k, v in data.items())
        print(f"{loc}  {extras}".rstrip())
    print(f"# {len(doc)} urls")
    return 0


def cmd_validate(args):
    """Check every value in a sitemap; exit status 1 when anything is invalid."""
    try:
        doc = _load_existing(args.file)
    except _HANDLED_ERRORS as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    for entry in doc.entries:
        if entry.extra:
            print(
                f"[WARN] {entry.loc}: unrecognized fields {', '.join(entry.extra)}",
                file=sys.stderr,
            )
    if doc.issues:
        for issue in doc.issues:
            print(f"[ERROR] {issue}", file=sys.stderr)
        print(f"[ERROR] {len(doc.issues)} invalid values in {args.file}", file=sys.stderr)
        return 1
    print(f"[OK] {args.file}: {len(doc)} valid urls")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="sitemap-builder",
        description="Create and maintain sitemap.xml files.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # init
    p_init = subparsers.add_parser(
        "init", help=f"Create a starter {DEFAULT_CONFIG_NAME} in current directory."
    )
    p_init.add_argument(
        "-p",
        "--path",
        help=f"Config file path (default: {DEFAULT_CONFIG_NAME})",
    )
    p_init.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite existing config file.",
    )
    p_init.set_defaults(func=cmd_init)

    # build
    p_build = subparsers.add_parser("build", help="Build a sitemap from a config file.")
    p_build.add_argument(
        "-c",
        "--config",
        help=f"Config file path (default: {DEFAULT_CONFIG_NAME})",
    )
    p_build.add_argument(
        "-o",
        "--output",
        help="Output file (overrides sitemap.file from the config).",
    )
    p_build.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the XML instead of writing it.",
    )
    p_build.add_argument(
        "--no-validate",
        action="store_true",
        help="Skip configuration validation (not recommended).",
    )
    p_build.set_defaults(func=cmd_build)

    # add
    p_add = subparsers.add_parser("add", help="Add urls to a sitemap file.")
    p_add.add_argument("file", help="Sitemap file (.gz is compressed)")
    p_add.add_argument("urls", nargs="+", help="Fully qualified http(s) urls")
    p_add.add_argument("--lastmod", help="YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS+HH:MM")
    p_add.add_argument("--changefreq", choices=CHANGEFREQ_VALUES)
    p_add.add_argument("--priority", type=float, help="0.0 to 1.0")
    p_add.add_argument(
        "--pretty",
        action="store_true",
        help="Indent the written XML.",
    )
    p_add.set_defaults(func=cmd_add)

    # remove
    p_remove = subparsers.add_parser("remove", help="Remove urls from a sitemap file.")
    p_remove.add_argument("file", help="Sitemap file")
    p_remove.add_argument("urls", nargs="+", help="Urls to remove")
    p_remove.set_defaults(func=cmd_remove)

    # show
    p_show = subparsers.add_parser("show", help="List the urls in a sitemap.")
    p_show.add_argument("file", help="Sitemap file or http(s) url")
    p_show.set_defaults(func=cmd_show)

    # validate
    p_validate = subparsers.add_parser(
        "validate", help="Check that every value in a sitemap is valid."
    )
    p_validate.add_argument("file", help="Sitemap file or http(s) url")
    p_validate.set_defaults(func=cmd_validate)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level("DEBUG")

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 1

    return int(func(args)) or 0


if __name__ == "__main__":
    raise SystemExit(main())
