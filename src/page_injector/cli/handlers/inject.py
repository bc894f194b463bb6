"""
Inject Command Handler.

This module implements the logic for the `page-injector inject` command.
It orchestrates:
1. Configuration loading (pyproject.toml + CLI overrides).
2. Source discovery (single file or directory tree).
3. Injection via the Engine.
4. Output writing, trace dumping and the batch summary.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table

from page_injector.config import InjectorConfig
from page_injector.core.engine import InjectionEngine
from page_injector.core.injection_result import InjectionResult
from page_injector.enums import InjectionStage
from page_injector.utils.console import (
  console,
  log_error,
  log_info,
  log_injection,
  log_success,
  log_warning,
  path_markup,
)

SOURCE_SUFFIXES = (".js", ".jsx", ".ts", ".tsx")
IGNORED_DIRS = {"node_modules", ".git", "dist", "build"}


def discover_sources(root: Path) -> List[Path]:
  """
  Lists component sources under ``root``, skipping vendored and build folders.

  Args:
      root: Directory to scan.

  Returns:
      List[Path]: Sorted source file paths.
  """
  found = []
  for path in root.rglob("*"):
    if path.suffix not in SOURCE_SUFFIXES or not path.is_file():
      continue
    if any(part in IGNORED_DIRS for part in path.relative_to(root).parts):
      continue
    found.append(path)
  return sorted(found)


def load_cli_config(
  input_path: Path,
  import_path: Optional[str],
  component_name: Optional[str],
  page_pattern: Optional[str],
  import_on_miss: Optional[bool],
) -> Optional[InjectorConfig]:
  """
  Resolves configuration, logging validation failures instead of raising.

  Returns:
      Optional[InjectorConfig]: The config, or None if it is invalid.
  """
  try:
    return InjectorConfig.load(
      import_path=import_path,
      component_name=component_name,
      page_pattern=page_pattern,
      import_on_miss=import_on_miss,
      search_path=input_path if input_path.is_dir() else input_path.parent,
    )
  except ValidationError as e:
    log_error(f"Invalid configuration: {e}")
    return None


def handle_inject(
  input_path: Path,
  output_path: Optional[Path],
  import_path: Optional[str],
  component_name: Optional[str],
  page_pattern: Optional[str],
  import_on_miss: Optional[bool],
  dry_run: bool = False,
  json_trace_path: Optional[Path] = None,
) -> int:
  """
  Handles the 'inject' command execution.

  Args:
      input_path: Source file or directory.
      output_path: Destination file or directory. Files are rewritten in place if None.
      import_path: Override for the module to import the component from.
      component_name: Override for the injected component name.
      page_pattern: Override for the page path regex.
      import_on_miss: Override for inserting the import without a render site.
      dry_run: If True, nothing is written. A single file's output is printed.
      json_trace_path: Optional path to dump the execution trace JSON (single file only).

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  if not input_path.exists():
    log_error(f"Input not found: {path_markup(input_path)}")
    return 1

  config = load_cli_config(input_path, import_path, component_name, page_pattern, import_on_miss)
  if config is None:
    return 1
  if not config.import_path:
    log_warning("No import path configured; the injected import will be empty.")

  engine = InjectionEngine(config)
  batch_results: Dict[str, InjectionResult] = {}

  if input_path.is_file():
    result = _inject_single_file(engine, input_path, output_path, dry_run, json_trace_path)
    batch_results[input_path.name] = result
    if dry_run and result.success:
      print(result.code, end="")
  else:
    sources = discover_sources(input_path)
    if not sources:
      log_warning(f"No component sources found in {path_markup(input_path)}")
      return 0

    log_info(f"Processing {len(sources)} files from {path_markup(input_path)}...")
    for src_file in sources:
      rel_path = src_file.relative_to(input_path)
      dest_file = output_path / rel_path if output_path else None
      batch_results[str(rel_path)] = _inject_single_file(engine, src_file, dest_file, dry_run)

  _print_batch_summary(batch_results)
  return 0 if all(r.success for r in batch_results.values()) else 1


def _inject_single_file(
  engine: InjectionEngine,
  input_path: Path,
  output_path: Optional[Path],
  dry_run: bool,
  json_trace_path: Optional[Path] = None,
) -> InjectionResult:
  """
  Runs the engine on one file and writes the output.

  The file is rewritten in place only when its content changed; an explicit
  ``output_path`` always receives the output.

  Args:
      engine: Configured injection engine.
      input_path: Source file path.
      output_path: Destination file path, or None for in-place.
      dry_run: If True, nothing is written.
      json_trace_path: Path to save trace event logs.

  Returns:
      InjectionResult: Result object containing stage and code.
  """
  try:
    code = input_path.read_text(encoding="utf-8")
  except (OSError, UnicodeDecodeError) as e:
    log_error(f"Failed to read {path_markup(input_path)}: {escape(str(e))}")
    return InjectionResult(file_id=str(input_path), success=False, errors=[str(e)])

  result = engine.run(code, str(input_path))

  if json_trace_path:
    try:
      json_trace_path.parent.mkdir(parents=True, exist_ok=True)
      with open(json_trace_path, "wt", encoding="utf-8") as f:
        json.dump(result.trace_events, f, indent=2)
      log_info(f"Trace saved to {path_markup(json_trace_path)}")
    except OSError as e:
      log_error(f"Failed to write trace: {e}")

  log_injection(result, input_path)
  if not result.success or dry_run:
    return result

  if output_path is not None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(result.code, encoding="utf-8")
  elif result.code != code:
    input_path.write_text(result.code, encoding="utf-8")

  return result


def _print_batch_summary(results: Dict[str, InjectionResult]) -> None:
  """
  Renders a summary table of injection results to the console.

  Args:
      results: Dictionary mapping filenames to injection results.
  """
  total = len(results)
  wired = sum(1 for r in results.values() if r.stage == InjectionStage.WIRED and r.component_inserted)
  issues = {name: r for name, r in results.items() if not r.success or r.missed}

  if not issues:
    log_success(f"Batch Complete: {wired} page(s) wired, {total} file(s) inspected.")
    return

  table = Table(title="Injection Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Issues", style="red")

  for filename, res in issues.items():
    if not res.success:
      table.add_row(escape(filename), "❌ Failed", escape("; ".join(res.errors)) or "Unknown Error")
    else:
      shape = res.export_shape.value if res.export_shape else "unknown"
      table.add_row(escape(filename), "⚠️ No render site", f"default export: {shape}")

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {wired} Wired, {len(issues)} with Issues.")
