"""Page model representing a single OneNote page."""

from dataclasses import dataclass, field

from onenote_site.model.node import Node


@dataclass(frozen=True)
class Page(Node):
    """A single page in a OneNote section."""

    body: str | None = field(default=None, repr=False)
