"""
Entry point for module execution (``python -m page_injector``).

This module delegates execution to the CLI handler in ``page_injector.cli.__main__``.
"""

import sys
from page_injector.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
