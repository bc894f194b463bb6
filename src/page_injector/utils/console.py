"""
Console and Logging for page-injector.

User-facing output goes through the standard `logging` library, rendered by a
`rich` handler, with a ``SUCCESS`` level between INFO and WARNING. Per-file
outcomes are reported with `log_injection`, which picks the level from the
`InjectionResult`; paths and stages are styled through `path_markup` and
`stage_markup` so that file names containing ``[`` never break rich markup.
"""

import logging
from pathlib import Path
from typing import Any, Union

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

from page_injector.core.injection_result import InjectionResult
from page_injector.enums import InjectionStage

SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

THEME = Theme(
  {
    "logging.level.success": "green",
    "error": "bold red",
    "path": "bold blue",
    "stage.not_a_page": "dim",
    "stage.page_already_wired": "cyan",
    "stage.page_needs_wiring": "yellow",
    "stage.wired": "green",
  }
)


class _ConsoleProxy:
  """
  Stable handle on the active `rich.console.Console`.

  Handlers import ``console`` once; `set_console` swaps what it writes to and
  re-points the root logger's `RichHandler` at the same console.
  """

  def __init__(self) -> None:
    self._backend = _attach_logging(Console(theme=THEME))

  def use(self, backend: Console) -> None:
    self._backend = _attach_logging(backend)

  def print(self, *args: Any, **kwargs: Any) -> None:
    self._backend.print(*args, **kwargs)


def _attach_logging(backend: Console) -> Console:
  root_logger = logging.getLogger()
  for handler in list(root_logger.handlers):
    if isinstance(handler, RichHandler):
      root_logger.removeHandler(handler)

  root_logger.addHandler(RichHandler(console=backend, show_time=False, show_path=False, markup=True))
  root_logger.setLevel(logging.INFO)
  return backend


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Replaces the active console for both `console.print` and `logging`.

  Args:
      new_console (Console): The rich console to write to, e.g. a recording
        console in tests.
  """
  console.use(new_console)


def path_markup(path: Union[str, Path]) -> str:
  """Styles a file path, escaping any rich markup it contains."""
  return f"[path]{escape(str(path))}[/path]"


def stage_markup(stage: InjectionStage) -> str:
  """Styles an orchestrator stage by name."""
  return f"[stage.{stage.value}]{stage.value}[/stage.{stage.value}]"


def log_info(msg: str) -> None:
  logging.info(f"ℹ️  {msg}", extra={"markup": True})


def log_success(msg: str) -> None:
  logging.log(SUCCESS_LEVEL_NUM, f"✅ {msg}", extra={"markup": True})


def log_warning(msg: str) -> None:
  logging.warning(f"⚠️  {msg}", extra={"markup": True})


def log_error(msg: str) -> None:
  logging.error(f"❌ {msg}", extra={"markup": True})


def log_injection(result: InjectionResult, path: Union[str, Path, None] = None) -> None:
  """
  Reports the outcome of injecting one file.

  Failures are errors, pages left without the component are warnings and
  wired pages are successes. Untouched files (not a page, already wired) are
  not reported.

  Args:
      result (InjectionResult): The engine's result.
      path: Path to show; defaults to ``result.file_id``.
  """
  where = path_markup(path if path is not None else result.file_id)

  if not result.success:
    log_error(f"Failed to inject {where}: {escape('; '.join(result.errors))}")
  elif result.missed:
    shape = result.export_shape.value if result.export_shape else "unknown"
    log_warning(f"No render site in {where} (default export: {shape})")
  elif result.component_inserted:
    log_success(f"Wired: {where}")
