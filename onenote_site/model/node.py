"""Common shape of the entities in a notebook hierarchy."""

from dataclasses import dataclass, field

from onenote_site.utils import slugify

# Front-matter keys, in the order they are written.
HEADER_KEYS = ("ID", "name", "slug")


@dataclass(frozen=True)
class Node:
    """A section or page: an opaque id, a display name and its slug."""

    id: str
    name: str = ""
    slug: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "slug", slugify(self.name))

    def header(self) -> list[tuple[str, str]]:
        """Front-matter key/value pairs in declared order."""
        return list(zip(HEADER_KEYS, (self.id, self.name, self.slug)))
