"""
Scan Command Handler.

Reports, for every component source under a path, which stage the injector
would reach and which render site it would extend. Nothing is written.
"""

from pathlib import Path
from typing import Optional

from rich.markup import escape
from rich.table import Table

from page_injector.cli.handlers.inject import discover_sources, load_cli_config
from page_injector.core.engine import InjectionEngine
from page_injector.utils.console import console, log_error, log_warning, path_markup, stage_markup


def handle_scan(
  input_path: Path,
  import_path: Optional[str],
  component_name: Optional[str],
  page_pattern: Optional[str],
  show_all: bool = False,
) -> int:
  """
  Handles the 'scan' command execution.

  Args:
      input_path: Source file or directory.
      import_path: Override for the module to import the component from.
      component_name: Override for the injected component name.
      page_pattern: Override for the page path regex.
      show_all: If True, non-page files are listed as well.

  Returns:
      int: Exit code (0 for success, 1 if any page failed to parse).
  """
  if not input_path.exists():
    log_error(f"Input not found: {path_markup(input_path)}")
    return 1

  config = load_cli_config(input_path, import_path, component_name, page_pattern, None)
  if config is None:
    return 1

  sources = [input_path] if input_path.is_file() else discover_sources(input_path)
  if not sources:
    log_warning(f"No component sources found in {path_markup(input_path)}")
    return 0

  engine = InjectionEngine(config)
  table = Table(title="Page Scan")
  table.add_column("File", style="cyan")
  table.add_column("Stage")
  table.add_column("Export")
  table.add_column("Render Site")

  exit_code = 0
  for src_file in sources:
    name = escape(str(src_file.relative_to(input_path)) if input_path.is_dir() else src_file.name)
    if not show_all and not config.matches(str(src_file)):
      continue

    result = engine.run(src_file.read_text(encoding="utf-8"), str(src_file))
    if not result.success:
      exit_code = 1
      table.add_row(name, "[error]parse error[/error]", "", escape("; ".join(result.errors)))
      continue

    table.add_row(
      name,
      stage_markup(result.stage),
      result.export_shape.value if result.export_shape else "",
      result.render_site.value if result.render_site else "",
    )

  console.print(table)
  return exit_code
