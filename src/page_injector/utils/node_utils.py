"""
Helpers for inspecting tree-sitter nodes.

tree-sitter keeps comments in the tree as ordinary named nodes ("extras"),
so every structural question asked by the catalog and the locator goes
through these helpers, which skip them.
"""

from typing import Iterator, List, Optional

from tree_sitter import Node

COMMENT_TYPES = {"comment", "html_comment"}

FUNCTION_EXPRESSION_TYPES = {"function_expression", "function"}
MARKUP_TYPES = {"jsx_element", "jsx_self_closing_element"}


def walk(node: Node) -> Iterator[Node]:
  """
  Yields ``node`` and all of its descendants in document order.

  Args:
      node: The subtree root.

  Returns:
      Iterator[Node]: Pre-order traversal.
  """
  stack = [node]
  while stack:
    current = stack.pop()
    yield current
    stack.extend(reversed(current.children))


def significant_children(node: Node) -> List[Node]:
  """Named children of ``node`` with comments filtered out."""
  return [child for child in node.named_children if child.type not in COMMENT_TYPES]


def unwrap_parens(node: Optional[Node]) -> Optional[Node]:
  """
  Strips any number of enclosing parentheses.

  ``return (<View />)`` and ``export default (Page)`` are the same construct as
  their unparenthesized forms.

  Args:
      node: An expression node, possibly ``parenthesized_expression``.

  Returns:
      Optional[Node]: The inner expression, or None if the parentheses are empty.
  """
  while node is not None and node.type == "parenthesized_expression":
    inner = significant_children(node)
    node = inner[0] if inner else None
  return node


def last_statement(block: Optional[Node]) -> Optional[Node]:
  """
  Returns the final statement of a ``statement_block``.

  Args:
      block: The body block of a function or method.

  Returns:
      Optional[Node]: The last non-comment statement, or None for empty bodies.
  """
  if block is None or block.type != "statement_block":
    return None
  statements = significant_children(block)
  return statements[-1] if statements else None


def has_token(node: Node, token: str) -> bool:
  """Checks whether an anonymous token (e.g. ``default``) is a direct child."""
  return any(not child.is_named and child.type == token for child in node.children)


def is_markup(node: Optional[Node]) -> bool:
  """True for JSX elements (fragments included) and self-closing elements."""
  return node is not None and node.type in MARKUP_TYPES


def is_factory_call(node: Optional[Node]) -> bool:
  """
  True for a call through a member-access callee.

  Example: ``React.createElement(View, null)``.
  """
  if node is None or node.type != "call_expression":
    return False
  callee = node.child_by_field_name("function")
  return callee is not None and callee.type == "member_expression"
