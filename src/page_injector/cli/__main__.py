"""
Main Entry Point for page-injector CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `page_injector.cli.handlers`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from page_injector import __version__
from page_injector.cli import handlers


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="page-injector: wire a component into page modules")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  def add_config_args(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--import-path", default=None, help="Module to import the component from (default: from toml)")
    cmd.add_argument("--component-name", default=None, help="Injected component name (default: WebpackInjected)")
    cmd.add_argument("--page-pattern", default=None, help="Regex identifying page files (default: pages/*/index.[jt]sx)")

  # --- Command: INJECT ---
  cmd_inject = subparsers.add_parser("inject", help="Wire the component into page files")
  cmd_inject.add_argument("path", type=Path, help="Input source file or directory")
  cmd_inject.add_argument("--out", type=Path, help="Output destination (file or dir). Default: in place")
  add_config_args(cmd_inject)
  cmd_inject.add_argument(
    "--import-on-miss",
    action="store_true",
    default=None,
    help="Insert the import even when no render site was found (Overrides config)",
  )
  cmd_inject.add_argument("--dry-run", action="store_true", help="Do not write files")
  cmd_inject.add_argument(
    "--json-trace", type=Path, default=None, help="Dump the execution trace of a single file to JSON."
  )

  # --- Command: SCAN ---
  cmd_scan = subparsers.add_parser("scan", help="Report what inject would do, without writing")
  cmd_scan.add_argument("path", type=Path, help="Input source file or directory")
  add_config_args(cmd_scan)
  cmd_scan.add_argument("--all", action="store_true", help="List non-page files too")

  args = parser.parse_args(argv)

  if args.command == "inject":
    return handlers.handle_inject(
      args.path,
      args.out,
      args.import_path,
      args.component_name,
      args.page_pattern,
      args.import_on_miss,
      args.dry_run,
      args.json_trace,
    )

  elif args.command == "scan":
    return handlers.handle_scan(args.path, args.import_path, args.component_name, args.page_pattern, args.all)

  return 0


if __name__ == "__main__":
  sys.exit(main())
