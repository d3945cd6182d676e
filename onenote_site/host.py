"""Thin adapter around the OneNote desktop application.

Talks to OneNote through its COM interface (``pywin32``, Windows only).
Only reads: the hierarchy markup and per-page content markup.
"""

import logging

from onenote_site.errors import HostUnavailable

logger = logging.getLogger(__name__)

PROG_ID = "OneNote.Application"

# Microsoft.Office.Interop.OneNote.HierarchyScope.hsPages
HS_PAGES = 4


def _dispatch_onenote():
    try:
        import win32com.client
    except ImportError as e:
        raise HostUnavailable(
            "pywin32 not installed (pip install 'onenote-site[host]')"
        ) from e

    try:
        return win32com.client.Dispatch(PROG_ID)
    except Exception as e:
        raise HostUnavailable(
            f"Cannot access OneNote COM interface: {e}"
        ) from e


class OneNoteHost:
    """Supplies hierarchy and page markup from a running OneNote.

    ``application`` is the COM object; it is dispatched on first use
    when not given.
    """

    def __init__(self, application=None) -> None:
        self._app = application

    @property
    def app(self):
        if self._app is None:
            self._app = _dispatch_onenote()
            logger.debug("Connected to %s", PROG_ID)
        return self._app

    def current_notebook_id(self) -> str:
        """Id of the notebook shown in the active OneNote window."""
        try:
            window = self.app.Windows.CurrentWindow
        except HostUnavailable:
            raise
        except Exception as e:
            raise HostUnavailable(f"Cannot read current OneNote window: {e}") from e
        if window is None:
            raise HostUnavailable("OneNote has no open window")
        return window.CurrentNotebookId

    def get_hierarchy(self, node_id: str = "", scope: int = HS_PAGES) -> str:
        """Hierarchy XML below ``node_id``; all notebooks when empty."""
        logger.info("Fetching hierarchy for %s", node_id or "all notebooks")
        return self._call("GetHierarchy", node_id, scope)

    def get_page_content(self, page_id: str) -> str:
        """Page content XML for one page."""
        logger.debug("Fetching page content %s", page_id)
        return self._call("GetPageContent", page_id)

    # Signature expected by Notebook.with_bodies
    fetch_body = get_page_content

    def _call(self, method: str, *args):
        try:
            return getattr(self.app, method)(*args)
        except HostUnavailable:
            raise
        except Exception as e:
            raise HostUnavailable(f"OneNote {method} failed: {e}") from e
