"""Site generator for a parsed notebook hierarchy.

Materializes a Notebook as a Jekyll collection: one directory per
section and one front-matter file per page.
"""

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from onenote_site.config import SiteConfig
from onenote_site.errors import (
    GenerationError,
    LayoutFailure,
    WriteFailure,
)
from onenote_site.model.notebook import Notebook
from onenote_site.model.page import Page

logger = logging.getLogger(__name__)

FRONT_MATTER_DELIMITER = "---"
BODY_EXTENSION = "xml"
# Characters YAML treats as line breaks
_LINE_BREAKS = "\r\n\x85\u2028\u2029"


@dataclass
class GenerationResult:
    """Outcome of a generation run."""

    written: list[Path] = field(default_factory=list)
    errors: list[GenerationError] = field(default_factory=list)
    cancelled: bool = False
    pages_written: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors and not self.cancelled

    def extend(self, other: "GenerationResult") -> None:
        self.written.extend(other.written)
        self.errors.extend(other.errors)
        self.cancelled = self.cancelled or other.cancelled
        self.pages_written += other.pages_written


class SiteGenerator:
    """Writes a notebook's sections and pages below the output root."""

    def __init__(self, notebook: Notebook, config: SiteConfig) -> None:
        self.notebook = notebook
        self.config = config

    @property
    def notebook_dir(self) -> Path:
        return self.config.collection_dir / self.notebook.slug

    def generate(self, cancel: threading.Event | None = None) -> GenerationResult:
        """Create the layout, write the raw hierarchy and all pages.

        Raises LayoutFailure if the directories cannot be created.
        """
        self.ensure_layout()
        result = GenerationResult()
        try:
            result.written.append(self.write_raw_hierarchy())
        except WriteFailure as e:
            logger.warning("%s", e)
            result.errors.append(e)
        result.extend(self.write_pages(cancel))
        return result

    def ensure_layout(self) -> list[Path]:
        """Create the notebook directory and one directory per section.

        Safe to call repeatedly. Returns the section directories.
        """
        created: list[Path] = []
        try:
            self.notebook_dir.mkdir(parents=True, exist_ok=True)
            for section in self.notebook.sections:
                section_dir = self.notebook_dir / section.slug
                section_dir.mkdir(exist_ok=True)
                created.append(section_dir)
        except OSError as e:
            raise LayoutFailure(
                f"Cannot create output layout in {self.notebook_dir}: {e}"
            ) from e

        logger.info(
            "Layout ready: %s (%d section(s))", self.notebook_dir, len(created)
        )
        return created

    def write_raw_hierarchy(self) -> Path:
        """Store the hierarchy markup verbatim next to the sections."""
        path = self.notebook_dir / self.config.raw_filename
        return _write(path, self.notebook.xml)

    def write_pages(self, cancel: threading.Event | None = None) -> GenerationResult:
        """Write one front-matter file per page.

        A failing page is recorded in the result and the remaining pages
        are still written. ``cancel`` is checked between pages.
        """
        result = GenerationResult()
        seen: dict[Path, Page] = {}

        for index, page in enumerate(self.notebook.pages):
            if cancel is not None and cancel.is_set():
                logger.warning(
                    "Cancelled, %d page(s) not written",
                    len(self.notebook.pages) - index,
                )
                result.cancelled = True
                break

            try:
                result.written.extend(self._write_page(page, seen))
                result.pages_written += 1
            except GenerationError as e:
                logger.warning("%s", e)
                result.errors.append(e)

        logger.info(
            "Wrote %d of %d page(s) for notebook %r",
            result.pages_written,
            len(self.notebook.pages),
            self.notebook.display_name,
        )
        return result

    def page_path(self, page: Page) -> Path:
        """Output path of a page's front-matter file.

        Raises OrphanPage if the page's section cannot be resolved.
        """
        section = self.notebook.resolve_owning_section(page)
        filename = f"{page.slug}.{self.config.extension}"
        return self.notebook_dir / section.slug / filename

    def _write_page(self, page: Page, seen: dict[Path, Page]) -> list[Path]:
        path = self.page_path(page)

        if path in seen:
            logger.warning(
                "Pages %s and %s share %s, keeping the latter",
                seen[path].id,
                page.id,
                path,
            )
        seen[path] = page

        created = [_write(path, render_front_matter(page), page)]
        if page.body is not None:
            body_path = path.with_suffix(f".{BODY_EXTENSION}")
            created.append(_write(body_path, page.body, page))
        return created


def render_front_matter(page: Page) -> str:
    """Render the front-matter block for a page."""
    lines = [FRONT_MATTER_DELIMITER]
    lines.extend(f"{key}: {_front_matter_value(value)}" for key, value in page.header())
    lines.append(FRONT_MATTER_DELIMITER)
    return "\n".join(lines) + "\n"


def _front_matter_value(value: str) -> str:
    """Write values with line breaks as escaped double-quoted scalars."""
    if any(c in value for c in _LINE_BREAKS):
        return json.dumps(value)
    return value


def _write(path: Path, content: str, page: Page | None = None) -> Path:
    try:
        # newline="" keeps the bytes identical across platforms
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        raise WriteFailure(f"Cannot write {path}: {e}", page=page, path=path) from e
    logger.info("Wrote %s", path)
    return path


def generate_site(notebook: Notebook, config: SiteConfig) -> GenerationResult:
    """Generate the full site for ``notebook``."""
    return SiteGenerator(notebook, config).generate()
