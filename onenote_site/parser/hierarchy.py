"""Streaming parser for OneNote hierarchy XML.

Reads the output of ``GetHierarchy`` (scope ``hsPages``) in a single
forward pass and builds the Notebook/Section/Page model. Elements are
matched by local name, so OneNote 2010 and 2013 namespaces both work.
"""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterator

from onenote_site.errors import MalformedInput
from onenote_site.model.notebook import Notebook, section_key
from onenote_site.model.page import Page
from onenote_site.model.section import Section

logger = logging.getLogger(__name__)

_NOTEBOOK = "Notebook"
_SECTION = "Section"
_PAGE = "Page"

_CHUNK_SIZE = 64 * 1024


def _local_name(tag: str) -> str:
    """Strip the '{namespace}' prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def _required_id(elem: ET.Element, kind: str) -> str:
    node_id = elem.get("ID")
    if not node_id:
        raise MalformedInput(f"{kind} element without ID attribute")
    return node_id


class _NotebookBuilder:
    """Collects the sections and pages of one open Notebook element."""

    def __init__(self, display_name: str) -> None:
        self.display_name = display_name
        self.sections: list[Section] = []
        self.pages: list[Page] = []
        self.section_ids: set[str] = set()
        self.open_section: ET.Element | None = None
        self.section_pages: list[Page] = []

    def start_section(self, elem: ET.Element) -> None:
        if self.open_section is not None:
            raise MalformedInput("Section element nested inside a section")
        self.open_section = elem
        self.section_pages = []

    def add_page(self, elem: ET.Element) -> None:
        if self.open_section is None:
            raise MalformedInput("Page element outside of a section")
        page = Page(id=_required_id(elem, _PAGE), name=elem.get("name", ""))
        self.section_pages.append(page)

    def end_section(self, elem: ET.Element) -> None:
        if self.open_section is not elem:
            raise MalformedInput("Section end does not match its start")

        # The section's own attributes are taken once its subtree is done
        section = Section(
            id=_required_id(elem, _SECTION), name=elem.get("name", "")
        )
        if section.id in self.section_ids:
            raise MalformedInput(f"Duplicate section id {section.id}")
        self.section_ids.add(section.id)

        self.sections.append(section)
        self.pages.extend(self.section_pages)
        logger.debug(
            "Section %r: %d page(s)", section.name, len(self.section_pages)
        )
        self.open_section = None
        self.section_pages = []

    def build(self, markup: str, key: Callable[[str], str]) -> Notebook:
        if self.open_section is not None:
            raise MalformedInput("Notebook closed while a section is open")
        return Notebook(
            display_name=self.display_name,
            sections=tuple(self.sections),
            pages=tuple(self.pages),
            xml=markup,
            key=key,
        )


class _Walker:
    """Traversal state for one parse call."""

    def __init__(self, markup: str, key: Callable[[str], str]) -> None:
        self.markup = markup
        self.key = key
        self.pull = ET.XMLPullParser(events=("start", "end"))
        self.builder: _NotebookBuilder | None = None

    def walk(self) -> Iterator[Notebook]:
        try:
            for offset in range(0, len(self.markup), _CHUNK_SIZE):
                self.pull.feed(self.markup[offset:offset + _CHUNK_SIZE])
                yield from self._drain()
            self.pull.close()
            yield from self._drain()
        except ET.ParseError as e:
            raise MalformedInput(f"Invalid hierarchy XML: {e}") from e

    def _current(self, kind: str) -> _NotebookBuilder:
        if self.builder is None:
            raise MalformedInput(f"{kind} element outside of a notebook")
        return self.builder

    def _drain(self) -> Iterator[Notebook]:
        for event, elem in self.pull.read_events():
            name = _local_name(elem.tag)

            if event == "start":
                if name == _NOTEBOOK:
                    if self.builder is not None:
                        raise MalformedInput("Notebook element nested in a notebook")
                    display_name = elem.get("nickname") or elem.get("name", "")
                    logger.debug("Parsing notebook %r", display_name)
                    self.builder = _NotebookBuilder(display_name)
                elif name == _SECTION:
                    self._current(_SECTION).start_section(elem)
                elif name == _PAGE:
                    self._current(_PAGE).add_page(elem)
                continue

            if name == _SECTION:
                self._current(_SECTION).end_section(elem)
                elem.clear()
            elif name == _PAGE:
                elem.clear()
            elif name == _NOTEBOOK:
                notebook = self._current(_NOTEBOOK).build(self.markup, self.key)
                self.builder = None
                elem.clear()
                logger.debug(
                    "Parsed notebook %r: %d section(s), %d page(s)",
                    notebook.display_name,
                    len(notebook.sections),
                    len(notebook.pages),
                )
                yield notebook


class HierarchyParser:
    """Turns hierarchy markup into Notebook models.

    ``key`` maps a node id to the part that links pages to sections and
    is handed to every Notebook produced.
    """

    def __init__(self, key: Callable[[str], str] = section_key) -> None:
        self.key = key

    def parse(self, markup: str) -> Notebook:
        """Parse the first notebook in ``markup``.

        The whole document is read, so trailing garbage still fails.
        Raises MalformedInput if the markup is not well-formed or holds
        no Notebook element.
        """
        notebooks = self.parse_all(markup)
        if not notebooks:
            raise MalformedInput("No Notebook element found in hierarchy")
        return notebooks[0]

    def parse_all(self, markup: str) -> list[Notebook]:
        return list(self.iter_notebooks(markup))

    def iter_notebooks(self, markup: str) -> Iterator[Notebook]:
        """Yield every notebook in ``markup`` in document order.

        A whole-scope hierarchy wraps several notebooks in a
        ``Notebooks`` element; a single-notebook hierarchy has the
        Notebook as root.
        """
        return _Walker(markup, self.key).walk()


def parse_hierarchy(markup: str) -> Notebook:
    """Parse the first notebook of a hierarchy document."""
    return HierarchyParser().parse(markup)


def parse_notebooks(markup: str) -> list[Notebook]:
    """Parse every notebook of a hierarchy document."""
    return HierarchyParser().parse_all(markup)
