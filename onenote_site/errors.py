"""Custom exceptions for onenote-site."""

from pathlib import Path


class OneNoteSiteError(Exception):
    """Base exception for onenote-site operations."""


class MalformedInput(OneNoteSiteError):
    """Hierarchy markup cannot be traversed as a notebook tree."""


class LayoutFailure(OneNoteSiteError):
    """Required output directories could not be created."""


class HostUnavailable(OneNoteSiteError):
    """The OneNote application cannot be reached."""


class GenerationError(OneNoteSiteError):
    """Error while generating output for a single item.

    These are collected by the generator instead of aborting the run.
    """

    def __init__(self, message: str, page=None, path: Path | None = None) -> None:
        super().__init__(message)
        self.page = page
        self.path = path


class OrphanPage(GenerationError):
    """A page's owning section cannot be resolved."""


class WriteFailure(GenerationError):
    """A single output file could not be written."""
