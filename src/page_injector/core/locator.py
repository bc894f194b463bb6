"""
Render-Site Locator.

Finds the point in a page module where the rendered output is produced,
starting from the module's default export. Supported export shapes:

1.  ``export default function Page() { ...; return <View /> }``
2.  ``export default () => <View />`` (expression or block body)
3.  ``export default class Page extends Component { render() { ... } }``
4.  ``export default Page`` (resolved through the Declaration Catalog)
5.  ``export default connect(mapState)(Page)`` (decorator-call pattern; the
    wrapped identifier is resolved like case 4)

Resolution performs at most one hop through the catalog. Anything else
resolves to an explicit miss carrying the reason; the locator never raises.
"""

from dataclasses import dataclass
from typing import Optional

from tree_sitter import Node

from page_injector.core.catalog import DeclarationCatalog, find_declaration
from page_injector.core.syntax import SourceTree
from page_injector.core.tracer import TraceLogger
from page_injector.enums import DeclKind, ExportShape, RenderSiteKind
from page_injector.utils.node_utils import (
  FUNCTION_EXPRESSION_TYPES,
  has_token,
  is_factory_call,
  is_markup,
  last_statement,
  significant_children,
  unwrap_parens,
)

_FUNCTION_DECLARATIONS = {"function_declaration", "generator_function_declaration"}
_CLASS_NODES = {"class_declaration", "abstract_class_declaration", "class"}

RENDER_METHOD = "render"


@dataclass(frozen=True)
class RenderSite:
  """
  A located render output.

  Attributes:
      kind (RenderSiteKind): Which variant was found.
      node (Node): The markup element or factory call to extend.
  """

  kind: RenderSiteKind
  node: Node


@dataclass(frozen=True)
class Resolution:
  """
  Outcome of locating the render site of a default export.

  Attributes:
      shape (ExportShape): Shape of the default export.
      site (Optional[RenderSite]): The render site, or None on a miss.
      reason (str): Why no site was found (empty on success).
      component (Optional[str]): Name of the resolved component, if named.
  """

  shape: ExportShape
  site: Optional[RenderSite] = None
  reason: str = ""
  component: Optional[str] = None

  @property
  def found(self) -> bool:
    return self.site is not None


def find_default_export(tree: SourceTree) -> Optional[Node]:
  """
  Returns the exported node of the module's ``export default`` statement.

  Args:
      tree (SourceTree): The parsed file.

  Returns:
      Optional[Node]: The declaration or value node, or None if absent.
  """
  for stmt in tree.statements:
    if stmt.type != "export_statement" or not has_token(stmt, "default"):
      continue
    exported = stmt.child_by_field_name("declaration") or stmt.child_by_field_name("value")
    return unwrap_parens(exported)
  return None


def classify_export(node: Optional[Node]) -> ExportShape:
  """
  Maps a default-export node onto its Export Shape.

  Args:
      node: The node returned by ``find_default_export``.

  Returns:
      ExportShape: The shape tag; ``UNRECOGNIZED`` for anything unsupported.
  """
  if node is None:
    return ExportShape.UNRECOGNIZED
  if node.type in _FUNCTION_DECLARATIONS or node.type in FUNCTION_EXPRESSION_TYPES:
    return ExportShape.FUNCTION_DECL
  if node.type == "arrow_function":
    return ExportShape.ARROW_FN
  if node.type in _CLASS_NODES:
    return ExportShape.CLASS_DECL
  if node.type == "identifier":
    return ExportShape.IDENTIFIER
  if node.type == "call_expression":
    callee = unwrap_parens(node.child_by_field_name("function"))
    if callee is not None and callee.type == "call_expression":
      return ExportShape.DECORATOR_CALL
  return ExportShape.UNRECOGNIZED


def locate_render_site(
  tree: SourceTree,
  catalog: DeclarationCatalog,
  tracer: Optional[TraceLogger] = None,
) -> Resolution:
  """
  Locates the render site of the module's default export.

  Args:
      tree (SourceTree): The parsed file.
      catalog (DeclarationCatalog): Top-level declarations of the file.
      tracer (TraceLogger, optional): Receives an inspection event on a miss.

  Returns:
      Resolution: The export shape and the render site (or the miss reason).
  """
  exported = find_default_export(tree)
  shape = classify_export(exported)

  if shape == ExportShape.UNRECOGNIZED:
    reason = "no default export" if exported is None else f"unsupported default export '{exported.type}'"
    resolution = Resolution(shape=shape, reason=reason)
  elif shape == ExportShape.IDENTIFIER:
    resolution = _resolve_identifier(tree, catalog, tree.text(exported), shape)
  elif shape == ExportShape.DECORATOR_CALL:
    resolution = _resolve_decorator_call(tree, catalog, exported)
  else:
    resolution = _resolve_component(tree, exported, shape)

  if tracer is not None and not resolution.found:
    tracer.log_inspection("default export", "miss", resolution.reason)
  return resolution


def site_from_candidate(candidate: Optional[Node]) -> Optional[RenderSite]:
  """
  Classifies a candidate statement or bare-tail expression.

  Args:
      candidate: The last statement of a component body, or the expression body
        of an arrow function.

  Returns:
      Optional[RenderSite]: The render site, or None if the candidate is neither
      markup nor a factory call.
  """
  if candidate is None:
    return None

  if candidate.type == "return_statement":
    returned = significant_children(candidate)
    argument = unwrap_parens(returned[0]) if returned else None
    if is_factory_call(argument):
      return RenderSite(RenderSiteKind.RETURN_FACTORY, argument)
    if is_markup(argument):
      return RenderSite(RenderSiteKind.RETURN_MARKUP, argument)
    return None

  expression = unwrap_parens(candidate)
  if is_markup(expression):
    return RenderSite(RenderSiteKind.TAIL_MARKUP, expression)
  return None


def _resolve_identifier(tree: SourceTree, catalog: DeclarationCatalog, name: str, shape: ExportShape) -> Resolution:
  """Resolves ``export default Name`` through the catalog (one hop)."""
  kind = catalog.get(name)
  if kind is None:
    return Resolution(shape=shape, reason=f"'{name}' is not a top-level component declaration", component=name)

  node = find_declaration(tree, name, kind)
  if node is None:
    return Resolution(shape=shape, reason=f"declaration of '{name}' not found", component=name)

  target_shape = {
    DeclKind.FUNCTION_DECL: ExportShape.FUNCTION_DECL,
    DeclKind.FUNCTION_EXPR: ExportShape.FUNCTION_DECL,
    DeclKind.ARROW_FN: ExportShape.ARROW_FN,
    DeclKind.CLASS_DECL: ExportShape.CLASS_DECL,
    DeclKind.CLASS_EXPR: ExportShape.CLASS_DECL,
  }[kind]
  resolved = _resolve_component(tree, node, target_shape)
  return Resolution(shape=shape, site=resolved.site, reason=resolved.reason, component=name)


def _resolve_decorator_call(tree: SourceTree, catalog: DeclarationCatalog, call: Node) -> Resolution:
  """Resolves ``wrapper(args)(Name)`` by resolving ``Name``."""
  arguments = call.child_by_field_name("arguments")
  args = significant_children(arguments) if arguments is not None else []
  wrapped = unwrap_parens(args[0]) if args else None

  if wrapped is None or wrapped.type != "identifier":
    return Resolution(shape=ExportShape.DECORATOR_CALL, reason="wrapped component is not an identifier")

  resolved = _resolve_identifier(tree, catalog, tree.text(wrapped), ExportShape.DECORATOR_CALL)
  return resolved


def _resolve_component(tree: SourceTree, node: Node, shape: ExportShape) -> Resolution:
  """Finds the render site inside a function, arrow function or class node."""
  name_node = node.child_by_field_name("name")
  name = tree.text(name_node) if name_node is not None else None

  if shape == ExportShape.CLASS_DECL:
    method = _find_render_method(tree, node)
    if method is None:
      return Resolution(shape=shape, reason="class has no render method", component=name)
    candidate = last_statement(method.child_by_field_name("body"))
  elif shape == ExportShape.ARROW_FN:
    body = node.child_by_field_name("body")
    candidate = last_statement(body) if body is not None and body.type == "statement_block" else body
  else:
    candidate = last_statement(node.child_by_field_name("body"))

  site = site_from_candidate(candidate)
  if site is None:
    what = candidate.type if candidate is not None else "empty body"
    return Resolution(shape=shape, reason=f"render output is not markup or a factory call ({what})", component=name)
  return Resolution(shape=shape, site=site, component=name)


def _find_render_method(tree: SourceTree, class_node: Node) -> Optional[Node]:
  body = class_node.child_by_field_name("body")
  if body is None:
    return None
  for member in body.named_children:
    if member.type != "method_definition":
      continue
    key = member.child_by_field_name("name")
    if key is not None and tree.text(key) == RENDER_METHOD:
      return member
  return None
