"""Utility functions for the OneNote site generator."""

import codecs
import re
import unicodedata
from pathlib import Path

from onenote_site.errors import MalformedInput

_NON_SLUG = re.compile(r"[^a-z0-9]+")
_XML_ENCODING = re.compile(
    rb"(?:\xef\xbb\xbf)?<\?xml[^>]*?encoding=[\"']([A-Za-z0-9._-]+)[\"']"
)


def slugify(text: str, max_length: int = 200) -> str:
    """Convert display text into a filesystem and URL safe identifier.

    Examples:
        'My Page!! 2024' -> 'my-page-2024'
        'Café Notes' -> 'cafe-notes'
        '!!!' -> 'untitled'
    """
    normalized = unicodedata.normalize("NFKD", text or "")
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii")

    slug = _NON_SLUG.sub("-", ascii_text.lower()).strip("-")

    # Limit length
    if len(slug) > max_length:
        slug = slug[:max_length].rstrip("-")

    return slug or "untitled"


def read_markup(path: Path) -> str:
    """Read a hierarchy XML file exported from OneNote.

    OneNote writes UTF-16 (with BOM) when saving hierarchy XML to disk.
    Other files are decoded with the encoding named in their XML
    declaration, UTF-8 when there is none.
    """
    data = path.read_bytes()
    if data.startswith((b"\xff\xfe", b"\xfe\xff")):
        return data.decode("utf-16")

    match = _XML_ENCODING.match(data)
    encoding = match.group(1).decode("ascii") if match else "utf-8"
    try:
        codec = codecs.lookup(encoding)
    except LookupError as e:
        raise MalformedInput(f"Unknown XML encoding {encoding!r} in {path}") from e

    if codec.name == "utf-8":
        return data.decode("utf-8-sig")
    return data.decode(codec.name)
