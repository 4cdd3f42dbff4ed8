#!/usr/bin/env python
"""
Render the math of every page in a MediaWiki XML export.

Usage:
    .venv/bin/python scripts/render_export.py <export.xml> [options]

Options:
    --out DIR            Write one <Title>.html file per page into DIR
    --lang CODE          Page language passed to the engine (default: content language)
    --skip-namespaces    Comma-separated MW namespace numbers to skip
    --dry-run            Only report which pages contain math
    --limit N            Only render the first N pages (useful for testing)

Pages in negative namespaces and in the MediaWiki namespace (8) are never
rendered: they are copied through unchanged.

Example:
    .venv/bin/python scripts/render_export.py ~/export.xml --dry-run --limit 10
    .venv/bin/python scripts/render_export.py ~/export.xml --out /tmp/rendered
"""

from __future__ import annotations

import argparse
import sys
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Ensure wikimath package is importable when run from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from wikimath.core.config import get_settings
from wikimath.core.logger import configure_logging
from wikimath.services.namespaces import Page
from wikimath.services.pipeline import MathPipeline
from wikimath.services.titles import Title

# ── MediaWiki XML namespace URI ───────────────────────────────────────────────
MW_NS = "http://www.mediawiki.org/xml/export-0.11/"


# ── Data classes ──────────────────────────────────────────────────────────────

@dataclass
class MWPage:
    title: str          # Full MW title (may include "Namespace:Title" prefix)
    mw_ns: int          # MediaWiki namespace number
    content: str        # Wikitext content of the latest revision


# ── XML parsing ───────────────────────────────────────────────────────────────

def _tag(name: str) -> str:
    return f"{{{MW_NS}}}{name}"


def parse_export(xml_path: Path) -> list[MWPage]:
    """Parse a MediaWiki XML export and return all pages with their latest revision."""
    pages: list[MWPage] = []

    # Use iterparse to handle large exports without loading the whole file into memory
    context = ET.iterparse(str(xml_path), events=("end",))
    for event, elem in context:
        if elem.tag != _tag("page"):
            continue

        title_el = elem.find(_tag("title"))
        ns_el    = elem.find(_tag("ns"))
        revisions = elem.findall(_tag("revision"))
        if title_el is None or ns_el is None or not revisions:
            elem.clear()
            continue

        text_el = revisions[-1].find(_tag("text"))
        pages.append(MWPage(
            title=(title_el.text or "").strip(),
            mw_ns=int(ns_el.text or "0"),
            content=(text_el.text or "") if text_el is not None else "",
        ))
        elem.clear()

    return pages


# ── Rendering ─────────────────────────────────────────────────────────────────

def render_pages(
    pipeline: MathPipeline,
    pages: list[MWPage],
    out_dir: Optional[Path],
    lang: Optional[str],
    dry_run: bool,
) -> int:
    """Render *pages*; return how many of them contain math."""
    with_math = 0
    for i, mw_page in enumerate(pages):
        out = pipeline.render_page(Page(mw_page.title, mw_page.mw_ns), mw_page.content, lang)
        if out.math_needed:
            with_math += 1
            print(f"  [∑] {mw_page.title!r}")
        if dry_run or out_dir is None:
            continue
        title = Title.new_from_text(mw_page.title)
        name = title.db_key if title is not None else f"page-{i}"
        (out_dir / f"{name.replace('/', '%2F')}.html").write_text(out.body, encoding="utf-8")
    return with_math


def main() -> None:
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("xml_file", help="Path to the MediaWiki XML export file")
    parser.add_argument("--out", default=None, metavar="DIR",
                        help="Directory for the rendered pages")
    parser.add_argument("--lang", default=None, metavar="CODE",
                        help="Page language passed to the engine")
    parser.add_argument("--skip-namespaces", default="", metavar="N,N,...",
                        help="Comma-separated MW namespace numbers to skip")
    parser.add_argument("--dry-run", action="store_true",
                        help="Only report which pages contain math")
    parser.add_argument("--limit", type=int, default=None, metavar="N",
                        help="Only render the first N pages")
    args = parser.parse_args()

    xml_path = Path(args.xml_file).expanduser().resolve()
    if not xml_path.exists():
        print(f"Error: file not found: {xml_path}", file=sys.stderr)
        sys.exit(1)

    skip_ns: set[int] = set()
    for n in args.skip_namespaces.split(","):
        n = n.strip()
        if n.lstrip("-").isdigit():
            skip_ns.add(int(n))

    out_dir = None
    if args.out and not args.dry_run:
        out_dir = Path(args.out).expanduser().resolve()
        out_dir.mkdir(parents=True, exist_ok=True)

    settings = get_settings()
    configure_logging(settings.log_level)

    print(f"Parsing {xml_path} …")
    pages = [p for p in parse_export(xml_path) if p.mw_ns not in skip_ns]
    if args.limit is not None:
        pages = pages[:args.limit]
    print(f"Rendering {len(pages)} pages.")

    with_math = render_pages(MathPipeline(settings), pages, out_dir, args.lang, args.dry_run)
    print(f"\nDone: {with_math} of {len(pages)} pages contain math.")


if __name__ == "__main__":
    main()
