"""
Syntax Tree Adapter.

Converts component source text into a tree-sitter tree and back. tree-sitter
trees are read-only, so "mutation" is expressed as a list of ``TextEdit``
objects collected while the tree is inspected and applied in a single pass
afterwards (collect-then-apply). Bytes outside the edited ranges are emitted
unchanged, which makes an edit-free round trip the identity.

Dialects:
    - ``tsx``: JavaScript, JSX and TSX sources (the default).
    - ``typescript``: ``.ts`` sources, where ``<T>value`` casts conflict with JSX.
"""

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Dict, Iterable, List

import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Node, Parser, Tree

from page_injector.core.errors import SourceParseError
from page_injector.utils.node_utils import COMMENT_TYPES, walk

TSX = "tsx"
TYPESCRIPT = "typescript"

# Language objects are immutable and safe to share; parsers are created per call.
LANGUAGES: Dict[str, Language] = {
  TSX: Language(ts_typescript.language_tsx()),
  TYPESCRIPT: Language(ts_typescript.language_typescript()),
}

_TYPESCRIPT_SUFFIXES = {".ts", ".mts", ".cts"}


def dialect_for(file_id: str) -> str:
  """
  Picks the grammar for a file identifier.

  Args:
      file_id (str): Path-like identifier of the source file.

  Returns:
      str: ``"typescript"`` for plain TypeScript files, ``"tsx"`` otherwise.
  """
  suffix = PurePath(file_id.replace("\\", "/")).suffix.lower()
  if suffix in _TYPESCRIPT_SUFFIXES:
    return TYPESCRIPT
  return TSX


@dataclass
class SourceTree:
  """
  A parsed source file.

  Attributes:
      source (bytes): UTF-8 encoded source text the tree was built from.
      tree (Tree): The tree-sitter tree.
      file_id (str): Identifier used in error messages.
  """

  source: bytes
  tree: Tree
  file_id: str = "<string>"

  @property
  def root(self) -> Node:
    return self.tree.root_node

  @property
  def statements(self) -> List[Node]:
    """Top-level statements of the program, comments excluded."""
    return [child for child in self.root.named_children if child.type not in COMMENT_TYPES]

  def text(self, node: Node) -> str:
    """Returns the source text spanned by ``node``."""
    return self.source[node.start_byte : node.end_byte].decode("utf-8")


@dataclass(order=True)
class TextEdit:
  """
  Replacement of the byte range ``[start, end)`` with ``text``.

  An insertion is an edit with ``start == end``.
  """

  start: int
  end: int
  text: str = field(compare=False)
  label: str = field(default="", compare=False)

  @classmethod
  def insert(cls, offset: int, text: str, label: str = "") -> "TextEdit":
    return cls(offset, offset, text, label)


def parse_source(code: str, file_id: str = "<string>") -> SourceTree:
  """
  Parses component source into a tree.

  Args:
      code (str): The source text.
      file_id (str): Identifier of the file (selects the dialect).

  Returns:
      SourceTree: The parsed file.

  Raises:
      SourceParseError: If the text contains a syntax error.
  """
  source = code.encode("utf-8")
  parser = Parser(LANGUAGES[dialect_for(file_id)])
  tree = parser.parse(source)

  if tree.root_node.has_error:
    raise _syntax_error(source, tree.root_node, file_id)

  return SourceTree(source=source, tree=tree, file_id=file_id)


def apply_edits(source: bytes, edits: Iterable[TextEdit]) -> str:
  """
  Renders ``source`` with ``edits`` applied.

  Edits are applied from the end of the file backwards so earlier offsets stay
  valid. Insertions at the same offset keep their collection order.

  Args:
      source (bytes): Original UTF-8 source.
      edits: Non-overlapping edits against ``source``.

  Returns:
      str: The rewritten source text.

  Raises:
      ValueError: If two edits overlap.
  """
  ordered = sorted(edits)
  for before, after in zip(ordered, ordered[1:]):
    if after.start < before.end:
      raise ValueError(f"Overlapping edits: {before.label or before} / {after.label or after}")

  buffer = bytearray(source)
  for edit in reversed(ordered):
    buffer[edit.start : edit.end] = edit.text.encode("utf-8")
  return buffer.decode("utf-8")


def _syntax_error(source: bytes, root: Node, file_id: str) -> SourceParseError:
  """Builds a SourceParseError pointing at the first ERROR or MISSING node."""
  culprit = root
  for node in walk(root):
    if node.type == "ERROR" or node.is_missing:
      culprit = node
      break

  # start_point counts bytes; report the column in characters
  row = culprit.start_point[0]
  line_start = culprit.start_byte - culprit.start_point[1]
  column = len(source[line_start : culprit.start_byte].decode("utf-8", errors="replace"))
  if culprit.is_missing:
    detail = f"missing '{culprit.type}'"
  else:
    snippet = source[culprit.start_byte : culprit.end_byte].decode("utf-8", errors="replace")
    snippet = snippet.strip().splitlines()[0][:40] if snippet.strip() else ""
    detail = f"unexpected '{snippet}'" if snippet else "syntax error"

  return SourceParseError(file_id, row + 1, column + 1, detail)
