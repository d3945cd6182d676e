"""Section model representing a OneNote section node."""

from dataclasses import dataclass

from onenote_site.model.node import Node


@dataclass(frozen=True)
class Section(Node):
    """A section of a notebook.

    Pages are not stored on the section. They are matched to it through
    their id, see ``Notebook.resolve_owning_section``.
    """
