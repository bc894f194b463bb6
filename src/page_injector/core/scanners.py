"""
Import Scanners.

Read-only queries over a module's import statements. ``has_import`` is the
idempotence guard of the pipeline: a page that already imports the injected
module (by hand, or from a previous run) is left untouched.
"""

from typing import Iterator, Optional

from tree_sitter import Node

from page_injector.core.syntax import SourceTree


def string_value(tree: SourceTree, node: Node) -> str:
  """
  Returns the contents of a string literal without its quotes.

  Args:
      tree (SourceTree): The parsed file.
      node (Node): A ``string`` node.

  Returns:
      str: The literal's raw contents.
  """
  raw = tree.text(node)
  if len(raw) >= 2 and raw[0] in "'\"" and raw[-1] == raw[0]:
    return raw[1:-1]
  return raw


def iter_imports(tree: SourceTree) -> Iterator[Node]:
  """Yields the top-level ``import`` statements in source order."""
  for stmt in tree.statements:
    if stmt.type == "import_statement":
      yield stmt


def import_source(tree: SourceTree, stmt: Node) -> Optional[str]:
  """
  Extracts the module specifier of an import statement.

  ``import x = require("y")`` (TypeScript) has no ``source`` field and yields None.
  """
  source = stmt.child_by_field_name("source")
  if source is None or source.type != "string":
    return None
  return string_value(tree, source)


def has_import(tree: SourceTree, import_path: str) -> bool:
  """
  Checks whether any import statement loads ``import_path``.

  Args:
      tree (SourceTree): The parsed file.
      import_path (str): The module specifier to look for.

  Returns:
      bool: True if the file already imports the module.
  """
  return any(import_source(tree, stmt) == import_path for stmt in iter_imports(tree))
