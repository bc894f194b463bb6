"""
Command handlers for the page-injector CLI.
"""

from .inject import discover_sources, handle_inject
from .scan import handle_scan

__all__ = [
  "discover_sources",
  "handle_inject",
  "handle_scan",
]
