"""Notebook model, the root of a parsed hierarchy."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace

from onenote_site.errors import OrphanPage
from onenote_site.model.page import Page
from onenote_site.model.section import Section
from onenote_site.utils import slugify

# OneNote ids look like '{GUID}{1}{B0}' for sections and start with the
# owning section's GUID for pages. This slice of the GUID is compared.
SECTION_KEY_OFFSET = 2
SECTION_KEY_LENGTH = 16


def section_key(node_id: str) -> str:
    """Return the part of an id that identifies the owning section."""
    return node_id[SECTION_KEY_OFFSET:SECTION_KEY_OFFSET + SECTION_KEY_LENGTH]


@dataclass(frozen=True)
class Notebook:
    """A notebook with its sections and the pages of all sections.

    ``pages`` is the concatenation of each section's pages in section
    order. ``xml`` is the markup the notebook was parsed from.
    """

    display_name: str = ""
    sections: tuple[Section, ...] = ()
    pages: tuple[Page, ...] = ()
    xml: str = field(default="", repr=False)
    key: Callable[[str], str] = field(
        default=section_key, repr=False, compare=False
    )
    slug: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "slug", slugify(self.display_name))

    def resolve_owning_section(self, page: Page) -> Section:
        """Find the one section a page belongs to.

        Raises OrphanPage when no section, or more than one, matches.
        """
        page_key = self.key(page.id)
        matches = [
            s for s in self.sections if page_key and self.key(s.id) == page_key
        ]
        if not matches:
            raise OrphanPage(
                f"No section found for page {page.name!r} ({page.id})",
                page=page,
            )
        if len(matches) > 1:
            raise OrphanPage(
                f"Page {page.name!r} ({page.id}) matches "
                f"{len(matches)} sections",
                page=page,
            )
        return matches[0]

    def pages_in(self, section: Section) -> list[Page]:
        """Pages belonging to ``section``, in notebook order."""
        page_key = self.key(section.id)
        return [p for p in self.pages if page_key and self.key(p.id) == page_key]

    def with_bodies(self, fetch: Callable[[str], str | None]) -> "Notebook":
        """Return a copy whose pages carry ``fetch(page.id)`` as body."""
        pages = tuple(replace(p, body=fetch(p.id)) for p in self.pages)
        return replace(self, pages=pages)
