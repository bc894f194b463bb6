"""
Injection Mutator.

Produces the text edits that wire the injected component into a page:
1.  **Component**: appends ``<X />`` to a markup render site, or an extra
    ``callee(X)`` argument to a factory-call render site.
2.  **Import**: inserts ``import X from "<path>"`` before the first import
    statement (or before the first statement when there are none).

Both insertions are guarded by a ``MutationGuard`` shared by reference, so each
happens at most once per file however many times the injector is invoked.
"""

from dataclasses import dataclass
from typing import Optional

from tree_sitter import Node

from page_injector.core.locator import RenderSite
from page_injector.core.scanners import iter_imports
from page_injector.core.syntax import SourceTree, TextEdit
from page_injector.core.tracer import TraceLogger
from page_injector.enums import RenderSiteKind
from page_injector.utils.node_utils import COMMENT_TYPES, significant_children


@dataclass
class MutationGuard:
  """
  Per-file insertion state. Flags only ever flip from False to True.
  """

  import_inserted: bool = False
  component_inserted: bool = False

  def claim_import(self) -> bool:
    """Returns True exactly once: the first time an import may be inserted."""
    if self.import_inserted:
      return False
    self.import_inserted = True
    return True

  def claim_component(self) -> bool:
    """Returns True exactly once: the first time a component may be inserted."""
    if self.component_inserted:
      return False
    self.component_inserted = True
    return True


class Injector:
  """
  Builds the edits for one file.

  Attributes:
      tree (SourceTree): The parsed page.
      component_name (str): Binding name and tag of the injected component.
      import_path (str): Module specifier the component is imported from.
      guard (MutationGuard): At-most-once state for this file.
  """

  def __init__(
    self,
    tree: SourceTree,
    component_name: str,
    import_path: str,
    guard: Optional[MutationGuard] = None,
    tracer: Optional[TraceLogger] = None,
  ):
    self.tree = tree
    self.component_name = component_name
    self.import_path = import_path
    self.guard = guard if guard is not None else MutationGuard()
    self.tracer = tracer

  def inject_component(self, site: RenderSite) -> Optional[TextEdit]:
    """
    Appends the component to a render site.

    Args:
        site (RenderSite): The located render output.

    Returns:
        Optional[TextEdit]: The edit, or None if the component was already
        inserted or the site cannot take a child.
    """
    if self.guard.component_inserted:
      return None

    if site.kind == RenderSiteKind.RETURN_FACTORY:
      edit = self._append_factory_argument(site.node)
    elif site.kind in (RenderSiteKind.RETURN_MARKUP, RenderSiteKind.TAIL_MARKUP):
      edit = self._append_markup_child(site.node)
    else:
      edit = None

    if edit is None:
      self._trace_miss(f"cannot extend {site.node.type}")
      return None

    self.guard.claim_component()
    if self.tracer is not None:
      # Edit offsets are byte offsets
      src = self.tree.source
      after = src[site.node.start_byte : edit.start] + edit.text.encode("utf-8") + src[edit.end : site.node.end_byte]
      self.tracer.log_mutation(site.kind.value, self.tree.text(site.node), after.decode("utf-8"))
    return edit

  def inject_import(self) -> Optional[TextEdit]:
    """
    Inserts the import statement for the component.

    The quote style and trailing semicolon mirror the file's first import.

    Returns:
        Optional[TextEdit]: The edit, or None if the import was already inserted.
    """
    if not self.guard.claim_import():
      return None

    first_import = next(iter_imports(self.tree), None)
    quote, semicolon = '"', ";"
    if first_import is not None:
      anchor = first_import
      source = first_import.child_by_field_name("source")
      if source is not None and self.tree.text(source)[:1] in ("'", '"'):
        quote = self.tree.text(source)[0]
      semicolon = ";" if self.tree.text(first_import).rstrip().endswith(";") else ""
    else:
      anchor = self._first_code_statement()

    path = self.import_path.replace("\\", "\\\\").replace(quote, "\\" + quote)
    statement = f"import {self.component_name} from {quote}{path}{quote}{semicolon}"

    if anchor is None:
      # Nothing but comments and directives: append at the end of the file
      prefix = "" if not self.tree.source or self.tree.source.endswith(b"\n") else "\n"
      edit = TextEdit.insert(len(self.tree.source), f"{prefix}{statement}\n", label="import")
    else:
      edit = TextEdit.insert(anchor.start_byte, f"{statement}\n", label="import")

    if self.tracer is not None:
      self.tracer.log_import(statement)
    return edit

  def _append_markup_child(self, element: Node) -> Optional[TextEdit]:
    child = f"<{self.component_name} />"

    if element.type == "jsx_self_closing_element":
      # <View a="1" /> -> <View a="1"><X /></View>
      name = element.child_by_field_name("name")
      text = self.tree.text(element)
      slash = text.rfind("/")
      if slash < 0:
        return None
      opening = text[:slash].rstrip()
      closing = f"</{self.tree.text(name)}>" if name is not None else "</>"
      return TextEdit(element.start_byte, element.end_byte, f"{opening}>{child}{closing}", label="markup")

    if element.type == "jsx_element":
      close_tag = element.child_by_field_name("close_tag")
      if close_tag is None:
        closers = [c for c in element.named_children if c.type == "jsx_closing_element"]
        close_tag = closers[-1] if closers else None
      if close_tag is None:
        return None
      return TextEdit.insert(close_tag.start_byte, child, label="markup")

    return None

  def _append_factory_argument(self, call: Node) -> Optional[TextEdit]:
    callee = call.child_by_field_name("function")
    arguments = call.child_by_field_name("arguments")
    if callee is None or arguments is None or not arguments.children:
      return None

    closing = arguments.children[-1]
    if closing.type != ")":
      return None

    argument = f"{self.tree.text(callee)}({self.component_name})"
    tokens = [c for c in arguments.children[:-1] if c.type not in COMMENT_TYPES]
    if not significant_children(arguments):
      text = argument
    elif tokens and tokens[-1].type == ",":
      text = f" {argument}"
    else:
      text = f", {argument}"
    return TextEdit.insert(closing.start_byte, text, label="factory")

  def _first_code_statement(self) -> Optional[Node]:
    """First top-level statement that is not a directive prologue (``"use client"``)."""
    for stmt in self.tree.statements:
      if stmt.type == "hash_bang_line":
        continue
      if stmt.type == "expression_statement":
        exprs = significant_children(stmt)
        if len(exprs) == 1 and exprs[0].type == "string":
          continue
      return stmt
    return None

  def _trace_miss(self, detail: str) -> None:
    if self.tracer is not None:
      self.tracer.log_inspection("render site", "miss", detail)
