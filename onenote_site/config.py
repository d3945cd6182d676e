"""Output configuration for the site generator."""

import os
from dataclasses import dataclass, replace
from pathlib import Path

DEFAULT_OUTPUT_ROOT = "site"
DEFAULT_COLLECTION = "notes"
DEFAULT_EXTENSION = "yaml"
DEFAULT_RAW_FILENAME = "notebook.xml"


@dataclass(frozen=True)
class SiteConfig:
    """Where and how a notebook is materialized on disk."""

    output_root: Path
    collection: str = DEFAULT_COLLECTION
    extension: str = DEFAULT_EXTENSION
    raw_filename: str = DEFAULT_RAW_FILENAME

    def __post_init__(self) -> None:
        object.__setattr__(self, "output_root", Path(self.output_root))
        if not self.collection:
            raise ValueError("collection name must not be empty")

    @property
    def collection_dir(self) -> Path:
        """Jekyll collection directory, ``<root>/_<collection>``."""
        return self.output_root / f"_{self.collection}"

    @classmethod
    def from_env(cls, **overrides) -> "SiteConfig":
        """Build a config from ONENOTE_SITE_* variables.

        Keyword arguments that are not None take precedence.
        """
        config = cls(
            output_root=Path(
                os.getenv("ONENOTE_SITE_ROOT", DEFAULT_OUTPUT_ROOT)
            ).expanduser(),
            collection=os.getenv("ONENOTE_SITE_COLLECTION", DEFAULT_COLLECTION),
        )
        given = {k: v for k, v in overrides.items() if v is not None}
        return replace(config, **given) if given else config
