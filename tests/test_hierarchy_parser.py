"""Tests for onenote_site.parser.hierarchy module."""

import re

import pytest

from onenote_site.errors import MalformedInput
from onenote_site.parser.hierarchy import (
    HierarchyParser,
    parse_hierarchy,
    parse_notebooks,
)

NS = 'xmlns:one="http://schemas.microsoft.com/office/onenote/2013/onenote"'

SECTION_A = "{5A2A3C1F-7C55-4B6B-A2C4-1B2A1F3E5C71}{1}{B0}"
SECTION_B = "{9F8E7D6C-5B4A-4392-8170-FEDCBA987654}{1}{B0}"
PAGE_A1 = "{5A2A3C1F-7C55-4B6B-A2C4-1B2A1F3E5C71}{1}{E101}"
PAGE_A2 = "{5A2A3C1F-7C55-4B6B-A2C4-1B2A1F3E5C71}{1}{E102}"
PAGE_B1 = "{9F8E7D6C-5B4A-4392-8170-FEDCBA987654}{1}{E201}"


def _hierarchy(body: str, nickname: str = "Research Notes") -> str:
    return (
        f'<?xml version="1.0"?>\n'
        f'<one:Notebook {NS} name="Research" nickname="{nickname}" ID="{{NB}}{{1}}{{B0}}">'
        f"{body}</one:Notebook>"
    )


TWO_SECTIONS = _hierarchy(
    f'<one:Section name="Meetings" ID="{SECTION_A}">'
    f'<one:Page ID="{PAGE_A1}" name="Kick-off"/>'
    f'<one:Page ID="{PAGE_A2}" name="Follow up!! 2024"/>'
    f"</one:Section>"
    f'<one:Section name="Empty" ID="{SECTION_B}"/>'
)


class TestParseNotebook:
    """Tests for the notebook root."""

    def test_display_name_from_nickname(self):
        nb = parse_hierarchy(TWO_SECTIONS)
        assert nb.display_name == "Research Notes"
        assert nb.slug == "research-notes"

    def test_display_name_falls_back_to_name(self):
        markup = f'<one:Notebook {NS} name="Research" ID="x"/>'
        assert parse_hierarchy(markup).display_name == "Research"

    def test_empty_notebook(self):
        nb = parse_hierarchy(_hierarchy(""))
        assert nb.display_name == "Research Notes"
        assert nb.sections == ()
        assert nb.pages == ()

    def test_keeps_raw_markup(self):
        nb = parse_hierarchy(TWO_SECTIONS)
        assert nb.xml == TWO_SECTIONS

    def test_without_namespace(self):
        markup = (
            '<Notebook nickname="Plain">'
            f'<Section ID="{SECTION_A}" name="S"><Page ID="{PAGE_A1}" name="P"/></Section>'
            "</Notebook>"
        )
        nb = parse_hierarchy(markup)
        assert nb.display_name == "Plain"
        assert len(nb.pages) == 1

    def test_onenote_2010_namespace(self):
        markup = TWO_SECTIONS.replace("/2013/", "/2010/")
        assert len(parse_hierarchy(markup).sections) == 2


class TestParseSections:
    """Tests for sections and their pages."""

    def test_counts_and_attribution(self):
        nb = parse_hierarchy(TWO_SECTIONS)
        assert len(nb.sections) == 2
        assert len(nb.pages) == 2
        for page in nb.pages:
            assert nb.resolve_owning_section(page).id == SECTION_A
        assert nb.pages_in(nb.sections[1]) == []

    def test_section_attributes(self):
        nb = parse_hierarchy(TWO_SECTIONS)
        meetings = nb.sections[0]
        assert meetings.id == SECTION_A
        assert meetings.name == "Meetings"
        assert meetings.slug == "meetings"

    def test_page_attributes(self):
        nb = parse_hierarchy(TWO_SECTIONS)
        page = nb.pages[1]
        assert page.id == PAGE_A2
        assert page.name == "Follow up!! 2024"
        assert page.slug == "follow-up-2024"
        assert page.body is None

    def test_document_order(self):
        markup = _hierarchy(
            f'<one:Section name="B" ID="{SECTION_B}">'
            f'<one:Page ID="{PAGE_B1}" name="b1"/>'
            "</one:Section>"
            f'<one:Section name="A" ID="{SECTION_A}">'
            f'<one:Page ID="{PAGE_A2}" name="a2"/>'
            f'<one:Page ID="{PAGE_A1}" name="a1"/>'
            "</one:Section>"
        )
        nb = parse_hierarchy(markup)
        assert [s.name for s in nb.sections] == ["B", "A"]
        assert [p.name for p in nb.pages] == ["b1", "a2", "a1"]

    def test_sections_inside_section_groups(self):
        markup = _hierarchy(
            f'<one:SectionGroup name="Archive" ID="{{G}}{{1}}{{B0}}">'
            f'<one:Section name="Old" ID="{SECTION_B}">'
            f'<one:Page ID="{PAGE_B1}" name="b1"/>'
            "</one:Section>"
            "</one:SectionGroup>"
            f'<one:Section name="New" ID="{SECTION_A}"/>'
        )
        nb = parse_hierarchy(markup)
        assert [s.name for s in nb.sections] == ["Old", "New"]
        assert [p.id for p in nb.pages] == [PAGE_B1]

    def test_pages_at_any_depth(self):
        markup = _hierarchy(
            f'<one:Section name="A" ID="{SECTION_A}">'
            f'<one:Wrapper><one:Page ID="{PAGE_A1}" name="deep"/></one:Wrapper>'
            f'<one:Page ID="{PAGE_A2}" name="shallow"/>'
            "</one:Section>"
        )
        nb = parse_hierarchy(markup)
        assert [p.name for p in nb.pages] == ["deep", "shallow"]

    def test_missing_name_is_empty(self):
        markup = _hierarchy(
            f'<one:Section ID="{SECTION_A}"><one:Page ID="{PAGE_A1}"/></one:Section>'
        )
        nb = parse_hierarchy(markup)
        assert nb.sections[0].name == ""
        assert nb.pages[0].slug == "untitled"

    def test_ids_preserved(self):
        nb = parse_hierarchy(TWO_SECTIONS)
        parsed = {s.id for s in nb.sections} | {p.id for p in nb.pages}
        in_markup = set(re.findall(r'<one:(?:Section|Page) [^>]*ID="([^"]+)"', TWO_SECTIONS))
        assert parsed == in_markup
        assert len(nb.sections) + len(nb.pages) == len(in_markup)

    def test_large_document_is_streamed_in_chunks(self):
        pages = "".join(
            f'<one:Page ID="{SECTION_A[:-4]}{{E{i:06d}}}" name="Page {i}"/>'
            for i in range(2000)
        )
        markup = _hierarchy(f'<one:Section name="Big" ID="{SECTION_A}">{pages}</one:Section>')
        assert len(markup) > 64 * 1024
        nb = parse_hierarchy(markup)
        assert len(nb.pages) == 2000
        assert nb.pages[-1].name == "Page 1999"


class TestParseErrors:
    """Tests for MalformedInput conditions."""

    def test_not_well_formed(self):
        with pytest.raises(MalformedInput):
            parse_hierarchy(TWO_SECTIONS[:-10])

    def test_empty_string(self):
        with pytest.raises(MalformedInput):
            parse_hierarchy("")

    def test_no_notebook_element(self):
        with pytest.raises(MalformedInput, match="No Notebook"):
            parse_hierarchy(f"<one:Notebooks {NS}/>")

    def test_trailing_garbage(self):
        with pytest.raises(MalformedInput):
            parse_hierarchy(TWO_SECTIONS + "<oops>")

    def test_section_without_id(self):
        with pytest.raises(MalformedInput, match="without ID"):
            parse_hierarchy(_hierarchy('<one:Section name="S"/>'))

    def test_page_without_id(self):
        markup = _hierarchy(
            f'<one:Section name="S" ID="{SECTION_A}"><one:Page name="P"/></one:Section>'
        )
        with pytest.raises(MalformedInput, match="without ID"):
            parse_hierarchy(markup)

    def test_page_outside_section(self):
        markup = _hierarchy(f'<one:Page ID="{PAGE_A1}" name="stray"/>')
        with pytest.raises(MalformedInput, match="outside of a section"):
            parse_hierarchy(markup)

    def test_nested_sections(self):
        markup = _hierarchy(
            f'<one:Section name="A" ID="{SECTION_A}">'
            f'<one:Section name="B" ID="{SECTION_B}"/>'
            "</one:Section>"
        )
        with pytest.raises(MalformedInput, match="nested"):
            parse_hierarchy(markup)

    def test_section_outside_notebook(self):
        markup = f'<one:Section {NS} name="A" ID="{SECTION_A}"/>'
        with pytest.raises(MalformedInput, match="outside of a notebook"):
            parse_hierarchy(markup)

    def test_duplicate_section_id(self):
        markup = _hierarchy(
            f'<one:Section name="A" ID="{SECTION_A}"/>'
            f'<one:Section name="A again" ID="{SECTION_A}"/>'
        )
        with pytest.raises(MalformedInput, match="Duplicate"):
            parse_hierarchy(markup)

    def test_parser_reusable_after_error(self):
        parser = HierarchyParser()
        with pytest.raises(MalformedInput):
            parser.parse(TWO_SECTIONS[:-10])
        assert len(parser.parse(TWO_SECTIONS).sections) == 2


class TestParseNotebooks:
    """Tests for whole-scope hierarchies with several notebooks."""

    MARKUP = (
        f"<one:Notebooks {NS}>"
        f'<one:Notebook nickname="First" ID="n1">'
        f'<one:Section name="A" ID="{SECTION_A}"><one:Page ID="{PAGE_A1}" name="a1"/></one:Section>'
        "</one:Notebook>"
        f'<one:Notebook nickname="Second" ID="n2">'
        f'<one:Section name="B" ID="{SECTION_B}"><one:Page ID="{PAGE_B1}" name="b1"/></one:Section>'
        "</one:Notebook>"
        "</one:Notebooks>"
    )

    def test_all_notebooks(self):
        notebooks = parse_notebooks(self.MARKUP)
        assert [nb.display_name for nb in notebooks] == ["First", "Second"]
        assert [p.id for p in notebooks[1].pages] == [PAGE_B1]

    def test_parse_returns_first(self):
        nb = parse_hierarchy(self.MARKUP)
        assert nb.display_name == "First"
        assert [s.id for s in nb.sections] == [SECTION_A]

    def test_sections_are_not_shared(self):
        first, second = parse_notebooks(self.MARKUP)
        assert [s.id for s in first.sections] == [SECTION_A]
        assert [s.id for s in second.sections] == [SECTION_B]

    def test_custom_key_passed_to_notebooks(self):
        parser = HierarchyParser(key=lambda node_id: node_id[:5])
        nb = parser.parse(self.MARKUP)
        assert nb.key("abcdefgh") == "abcde"
