"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Shared configuration and engine fixtures.
- A ``parse`` helper fixture for tests working on raw trees.
"""

import sys
from pathlib import Path

import pytest

# Add src to path so we can import 'page_injector' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from page_injector.config import InjectorConfig  # noqa: E402
from page_injector.core.engine import InjectionEngine  # noqa: E402
from page_injector.core.syntax import parse_source  # noqa: E402

PAGE_ID = "src/pages/home/index.jsx"
IMPORT_PATH = "@/components/Debug"


@pytest.fixture
def config():
  """Configuration injecting `X` from `@/components/Debug`."""
  return InjectorConfig(import_path=IMPORT_PATH, component_name="X")


@pytest.fixture
def engine(config):
  return InjectionEngine(config)


@pytest.fixture
def parse():
  """Parses a snippet as a page-like TSX file."""

  def _parse(code: str, file_id: str = PAGE_ID):
    return parse_source(code, file_id)

  return _parse
