"""
CLI entry point for facet page generation.

Usage:
    python -m nebula.facet_index --items products.json
    python -m nebula.facet_index --items products.yaml --per-category --output-csv pages.csv
"""

import argparse
import logging
import sys
from pathlib import Path

from .adapters import FileItemAdapter
from .config import DEFAULT_CONFIG_PATH, load_config
from .engine import FacetEngine
from .errors import FacetIndexError
from .report import export_csv, export_redirects, format_console


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="facet_index",
        description="Facet Index - Generate filter page routes for a catalog",
    )

    parser.add_argument(
        "--items",
        required=True,
        metavar="FILE",
        help="Catalog items file (JSON, YAML or CSV)",
    )

    parser.add_argument(
        "--config",
        default=None,
        metavar="FILE",
        help="Facet config file (default: module's facet_config.json)",
    )

    parser.add_argument(
        "--per-category",
        action="store_true",
        help="Also generate pages for each item category",
    )

    parser.add_argument(
        "--output-csv",
        metavar="FILE",
        help="Output CSV file path",
    )

    parser.add_argument(
        "--redirects",
        metavar="FILE",
        help="Write bare-key redirects to this file",
    )

    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress console output",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log cache hits and misses",
    )

    args = parser.parse_args(argv)

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level)

    config_path = Path(args.config) if args.config else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        print(f"Error: Config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    items_path = Path(args.items)
    if not items_path.exists():
        print(f"Error: Items file not found: {items_path}", file=sys.stderr)
        sys.exit(1)

    try:
        config = load_config(config_path)
        adapter = FileItemAdapter(items_path)

        snapshots = [(config.search_url, adapter.get_snapshot())]
        if args.per_category:
            for category, snapshot in adapter.get_category_snapshots().items():
                snapshots.append((f"/categories/{category}/{config.search_segment}", snapshot))

        all_pages = []
        all_redirects = []
        with FacetEngine(config) as engine:
            for search_url, snapshot in snapshots:
                pages = engine.build_pages(snapshot)
                all_pages.append((search_url, pages))
                all_redirects.extend(engine.redirects(snapshot, search_url))

                if not args.quiet:
                    print(format_console(pages, snapshot_id=snapshot.snapshot_id, stats=engine.stats))

        if args.output_csv:
            output_path = Path(args.output_csv)
            with open(output_path, "w", newline="") as f:
                for i, (search_url, pages) in enumerate(all_pages):
                    export_csv(pages, output=f, base_url=search_url, header=(i == 0))
            if not args.quiet:
                print(f"\nCSV exported to: {output_path}")

        if args.redirects:
            redirects_path = Path(args.redirects)
            with open(redirects_path, "w") as f:
                export_redirects(all_redirects, output=f)
            if not args.quiet:
                print(f"Redirects written to: {redirects_path}")

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except FacetIndexError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
