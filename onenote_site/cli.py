"""CLI entry point for the OneNote site generator."""

import argparse
import logging
import sys
from pathlib import Path

from onenote_site.config import SiteConfig
from onenote_site.errors import HostUnavailable, LayoutFailure, MalformedInput
from onenote_site.generator.site import GenerationResult, SiteGenerator
from onenote_site.host import OneNoteHost
from onenote_site.model.notebook import Notebook
from onenote_site.parser.hierarchy import HierarchyParser
from onenote_site.utils import read_markup


def main(argv: list[str] | None = None, host: OneNoteHost | None = None) -> int:
    """Main entry point for the onenote-site CLI."""
    parser = argparse.ArgumentParser(
        prog="onenote-site",
        description="Generate a Jekyll collection from a OneNote notebook hierarchy",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "-i",
        "--input",
        help="Hierarchy XML file (GetHierarchy output, scope hsPages)",
    )
    source.add_argument(
        "--from-onenote",
        action="store_true",
        help="Read the hierarchy of the current notebook from OneNote",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Site root directory (default: $ONENOTE_SITE_ROOT or ./site)",
    )
    parser.add_argument(
        "-c",
        "--collection",
        help="Jekyll collection name (default: $ONENOTE_SITE_COLLECTION or notes)",
    )
    parser.add_argument(
        "--bodies",
        action="store_true",
        help="Fetch page content from OneNote and write it next to each page",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Generate every notebook in the hierarchy, not only the first",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (very verbose)",
    )

    args = parser.parse_args(argv)

    # Configure logging
    if args.debug:
        log_level = logging.DEBUG
    elif args.verbose:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING

    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
    )

    config = SiteConfig.from_env(
        output_root=Path(args.output).resolve() if args.output else None,
        collection=args.collection,
    )
    if host is None and (args.from_onenote or args.bodies):
        host = OneNoteHost()

    # Read and parse the hierarchy
    try:
        if args.from_onenote:
            markup = host.get_hierarchy(host.current_notebook_id())
        else:
            input_file = Path(args.input).resolve()
            if not input_file.is_file():
                print(f"Error: Input file does not exist: {input_file}", file=sys.stderr)
                return 1
            markup = read_markup(input_file)

        hierarchy = HierarchyParser()
        notebooks = hierarchy.parse_all(markup)
        if not notebooks:
            raise MalformedInput("No Notebook element found in hierarchy")
        if not args.all:
            notebooks = notebooks[:1]
    except (HostUnavailable, MalformedInput, OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    total_pages = 0
    result = GenerationResult()

    for notebook in notebooks:
        print(f"\nProcessing notebook: {notebook.display_name}")
        print(f"  {len(notebook.sections)} section(s), {len(notebook.pages)} page(s)")
        total_pages += len(notebook.pages)

        try:
            if args.bodies:
                notebook = _attach_bodies(notebook, host)
            result.extend(SiteGenerator(notebook, config).generate())
        except (HostUnavailable, LayoutFailure) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    # Summary
    print(f"\n{'=' * 50}")
    print("Generation complete:")
    print(f"  Pages found:     {total_pages}")
    print(f"  Pages written:   {result.pages_written}")
    print(f"  Output:          {config.collection_dir}")

    if result.errors:
        print(f"\n  Errors ({len(result.errors)}):", file=sys.stderr)
        for err in result.errors:
            print(f"    {err}", file=sys.stderr)
        return 2 if total_pages and result.pages_written == 0 else 0

    return 0


def _attach_bodies(notebook: Notebook, host: OneNoteHost) -> Notebook:
    """Fetch every page's content before anything is written."""
    print(f"  Fetching content of {len(notebook.pages)} page(s) from OneNote")
    return notebook.with_bodies(host.fetch_body)


if __name__ == "__main__":
    sys.exit(main())
