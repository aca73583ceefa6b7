"""
Report Generator - summarize generated pages for humans.

Produces console output and CSV export of the page routes a run produced.
"""

import csv
import io
from typing import Optional, TextIO

from .cache import CacheStats
from .models import FilterPage, Redirect


def summarize_pages(pages: list[FilterPage]) -> dict:
    """Generate summary statistics for pages."""
    by_sort: dict[str, int] = {}
    for page in pages:
        by_sort[page.sort_key] = by_sort.get(page.sort_key, 0) + 1

    filtered = [p for p in pages if p.filters]
    return {
        "total": len(pages),
        "filtered": len(filtered),
        "sort_only": len(pages) - len(filtered),
        "empty": sum(1 for p in pages if p.count == 0),
        "by_sort": by_sort,
        "max_filters": max((len(p.filters) for p in pages), default=0),
    }


def format_console(
    pages: list[FilterPage],
    snapshot_id: Optional[str] = None,
    stats: Optional[CacheStats] = None,
    limit: int = 20,
) -> str:
    """
    Format a page listing for console display.

    Args:
        pages: Pages produced by FacetEngine.build_pages
        snapshot_id: Snapshot label for the header
        stats: Result cache stats to include in the summary
        limit: Max number of paths to list

    Returns:
        Formatted string for console output
    """
    if not pages:
        return "No pages generated.\n"

    lines = []
    lines.append(f"\nSNAPSHOT: {snapshot_id}" if snapshot_id else "\nPAGES")
    lines.append("=" * 70)
    lines.append(f"{'PATH':<45} {'SORT':<12} {'ITEMS':>8}")
    lines.append("-" * 70)

    for page in pages[:limit]:
        path = page.path or "(listing)"
        lines.append(f"{path[:45]:<45} {page.sort_key:<12} {page.count:>8}")
    if len(pages) > limit:
        lines.append(f"... {len(pages) - limit} more")

    summary = summarize_pages(pages)
    lines.append("\n" + "=" * 70)
    lines.append("SUMMARY")
    lines.append(f"  Total pages:     {summary['total']}")
    lines.append(f"  Filtered pages:  {summary['filtered']}")
    lines.append(f"  Sort-only pages: {summary['sort_only']}")
    lines.append(f"  Deepest filter:  {summary['max_filters']} attribute(s)")
    for sort_key, count in sorted(summary["by_sort"].items()):
        lines.append(f"    {sort_key:<14} {count}")
    if stats is not None:
        lines.append(f"  Matcher passes:  {stats.misses}")
        lines.append(f"  Cache hits:      {stats.hits} ({stats.hit_rate:.0%})")
    lines.append("=" * 70)

    return "\n".join(lines)


def export_csv(
    pages: list[FilterPage],
    output: TextIO | None = None,
    base_url: str = "",
    header: bool = True,
) -> str:
    """
    Export page routes to CSV format.

    Args:
        pages: Pages to export
        output: Optional file handle to write to
        base_url: Prefix for the url column, e.g. "/products/search"
        header: Whether to write the header row (off when appending)

    Returns:
        CSV string (also writes to output if provided)
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    if header:
        writer.writerow(["path", "url", "sort", "count", "description", "items"])

    for page in pages:
        url = f"{base_url}/{page.path}/" if page.path else f"{base_url}/"
        writer.writerow([
            page.path,
            url,
            page.sort_key,
            page.count,
            page.description,
            "|".join(item.title for item in page.items),
        ])

    csv_content = buffer.getvalue()

    if output:
        output.write(csv_content)

    return csv_content


def export_redirects(redirects: list[Redirect], output: TextIO | None = None) -> str:
    """Write redirects as "source target" lines (Netlify _redirects style)."""
    content = "".join(f"{r.source} {r.target}\n" for r in redirects)
    if output:
        output.write(content)
    return content
