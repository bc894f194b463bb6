"""
Declaration Catalog.

A single pass over the program's top-level statements recording which names
are bound to components-in-waiting (functions, arrow functions, classes).
The catalog stores shapes only; the locator performs a second, name-keyed
lookup when it needs the declaring node.

Nested declarations are ignored: shadowing is not modelled.
"""

from typing import Dict, Iterator, Optional, Tuple

from tree_sitter import Node

from page_injector.core.syntax import SourceTree
from page_injector.enums import DeclKind
from page_injector.utils.node_utils import (
  FUNCTION_EXPRESSION_TYPES,
  has_token,
  significant_children,
  unwrap_parens,
)

ANONYMOUS_FUNCTION = "anonymous-function"
ANONYMOUS_CLASS = "anonymous-class"

_FUNCTION_DECLARATIONS = {"function_declaration", "generator_function_declaration"}
_CLASS_DECLARATIONS = {"class_declaration", "abstract_class_declaration"}
_VARIABLE_DECLARATIONS = {"lexical_declaration", "variable_declaration"}

_INITIALIZER_KINDS = {
  "arrow_function": DeclKind.ARROW_FN,
  "function_expression": DeclKind.FUNCTION_EXPR,
  "function": DeclKind.FUNCTION_EXPR,
  "class": DeclKind.CLASS_EXPR,
}


class DeclarationCatalog:
  """
  Mapping of top-level names to declaration shapes.

  The last top-level declaration of a given name wins.
  """

  def __init__(self) -> None:
    self._entries: Dict[str, DeclKind] = {}

  def record(self, name: str, kind: DeclKind) -> None:
    self._entries[name] = kind

  def get(self, name: str) -> Optional[DeclKind]:
    """
    Looks up a name bound by an identifier reference.

    Anonymous sentinels are never returned, since an export by identifier
    always refers to a named binding.

    Args:
        name (str): The referenced identifier.

    Returns:
        Optional[DeclKind]: The declaration shape, or None.
    """
    if name in (ANONYMOUS_FUNCTION, ANONYMOUS_CLASS):
      return None
    return self._entries.get(name)

  def __contains__(self, name: object) -> bool:
    return name in self._entries

  def __len__(self) -> int:
    return len(self._entries)


def iter_top_level_declarations(tree: SourceTree) -> Iterator[Tuple[str, DeclKind, Node]]:
  """
  Yields ``(name, kind, node)`` for each catalogable top-level declaration.

  ``node`` is the function or class node itself: the declaration for
  statements, the initializer for variable declarators. Declarations wrapped in
  a named ``export`` statement are still top-level; ``export default`` is not
  a binding and is skipped.

  Args:
      tree (SourceTree): The parsed file.

  Returns:
      Iterator[Tuple[str, DeclKind, Node]]: Declarations in source order.
  """
  for stmt in tree.statements:
    if stmt.type == "export_statement":
      if has_token(stmt, "default"):
        continue
      stmt = stmt.child_by_field_name("declaration")
      if stmt is None:
        continue

    if stmt.type in _FUNCTION_DECLARATIONS:
      yield _binding_name(tree, stmt, ANONYMOUS_FUNCTION), DeclKind.FUNCTION_DECL, stmt

    elif stmt.type in _CLASS_DECLARATIONS:
      yield _binding_name(tree, stmt, ANONYMOUS_CLASS), DeclKind.CLASS_DECL, stmt

    elif stmt.type in _VARIABLE_DECLARATIONS:
      for declarator in stmt.named_children:
        if declarator.type != "variable_declarator":
          continue
        name_node = declarator.child_by_field_name("name")
        value = declarator.child_by_field_name("value")
        # Destructuring patterns and bare `let a;` bind nothing renderable
        if name_node is None or name_node.type != "identifier" or value is None:
          continue
        kind = _INITIALIZER_KINDS.get(value.type)
        if kind is not None:
          yield tree.text(name_node), kind, value

    elif stmt.type == "expression_statement":
      # Anonymous top-level `(function () {})` / `(class {})`
      exprs = significant_children(stmt)
      expr = unwrap_parens(exprs[0]) if exprs else None
      if expr is not None and expr.type in FUNCTION_EXPRESSION_TYPES and expr.child_by_field_name("name") is None:
        yield ANONYMOUS_FUNCTION, DeclKind.FUNCTION_EXPR, expr
      elif expr is not None and expr.type == "class" and expr.child_by_field_name("name") is None:
        yield ANONYMOUS_CLASS, DeclKind.CLASS_EXPR, expr


def build_catalog(tree: SourceTree) -> DeclarationCatalog:
  """
  Builds the Declaration Catalog for a parsed file.

  Args:
      tree (SourceTree): The parsed file.

  Returns:
      DeclarationCatalog: Names mapped to declaration shapes.
  """
  catalog = DeclarationCatalog()
  for name, kind, _ in iter_top_level_declarations(tree):
    catalog.record(name, kind)
  return catalog


def find_declaration(tree: SourceTree, name: str, kind: DeclKind) -> Optional[Node]:
  """
  Finds the node of the last top-level declaration matching ``name`` and ``kind``.

  Args:
      tree (SourceTree): The parsed file.
      name (str): The bound identifier.
      kind (DeclKind): The shape recorded in the catalog.

  Returns:
      Optional[Node]: The function/class node, or None.
  """
  found = None
  for decl_name, decl_kind, node in iter_top_level_declarations(tree):
    if decl_name == name and decl_kind == kind:
      found = node
  return found


def _binding_name(tree: SourceTree, node: Node, sentinel: str) -> str:
  name_node = node.child_by_field_name("name")
  return tree.text(name_node) if name_node is not None else sentinel
