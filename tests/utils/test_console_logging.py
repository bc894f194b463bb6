"""
Tests for the console proxy and logging helpers.
"""

import logging

import pytest
from rich.console import Console

from page_injector.core.injection_result import InjectionResult
from page_injector.enums import ExportShape, InjectionStage
from page_injector.utils.console import (
  SUCCESS_LEVEL_NUM,
  THEME,
  console,
  log_error,
  log_info,
  log_injection,
  log_success,
  log_warning,
  path_markup,
  set_console,
  stage_markup,
)


@pytest.fixture(autouse=True)
def recording_console():
  recorder = Console(record=True, width=200, theme=THEME)
  set_console(recorder)
  yield recorder
  set_console(Console(theme=THEME))


def test_success_level_registered():
  assert logging.getLevelName(SUCCESS_LEVEL_NUM) == "SUCCESS"


def test_log_helpers_route_to_backend(recording_console):
  log_info("parsing [bold]a.jsx[/bold]")
  log_success("Wired: b.jsx")
  log_warning("no import path")
  log_error("broken")

  text = recording_console.export_text()
  assert "parsing a.jsx" in text
  assert "Wired: b.jsx" in text
  assert "no import path" in text
  assert "broken" in text


def test_proxy_print_follows_backend(recording_console):
  console.print("hello")
  assert "hello" in recording_console.export_text()


def test_path_markup_escapes_brackets(recording_console):
  """
  Scenario: A Next-style dynamic route directory such as ``[id]``.
  Expect: The path is printed literally, not swallowed as a markup tag.
  """
  assert path_markup("pages/home/index.jsx") == "[path]pages/home/index.jsx[/path]"
  log_info(f"Processing {path_markup('pages/[id]/index.jsx')}")
  assert "pages/[id]/index.jsx" in recording_console.export_text()


def test_stage_markup_renders_stage_name(recording_console):
  console.print(stage_markup(InjectionStage.PAGE_ALREADY_WIRED))
  assert "page_already_wired" in recording_console.export_text()


@pytest.mark.parametrize(
  "result, expected",
  [
    (InjectionResult(stage=InjectionStage.WIRED, component_inserted=True, import_inserted=True), "Wired: a.jsx"),
    (
      InjectionResult(stage=InjectionStage.WIRED, export_shape=ExportShape.CLASS_DECL),
      "No render site in a.jsx (default export: class)",
    ),
    (
      InjectionResult(stage=InjectionStage.PAGE_NEEDS_WIRING, success=False, errors=["Parse Error: a.jsx:1:5: [x]"]),
      "Failed to inject a.jsx: Parse Error: a.jsx:1:5: [x]",
    ),
  ],
)
def test_log_injection_outcomes(recording_console, result, expected):
  log_injection(result, "a.jsx")
  assert expected in recording_console.export_text()


def test_log_injection_is_silent_for_untouched_files(recording_console):
  log_injection(InjectionResult(stage=InjectionStage.NOT_A_PAGE, file_id="b.jsx"))
  log_injection(InjectionResult(stage=InjectionStage.PAGE_ALREADY_WIRED, file_id="b.jsx"))
  assert "b.jsx" not in recording_console.export_text()


def test_swapping_backend_keeps_a_single_handler():
  set_console(Console(record=True))
  set_console(Console(record=True))
  handlers = [h for h in logging.getLogger().handlers if type(h).__name__ == "RichHandler"]
  assert len(handlers) == 1
