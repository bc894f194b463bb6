"""
Enumerations for page-injector.

This module defines the closed variant tags used by the injection pipeline:
declaration shapes collected by the catalog, export shapes dispatched on by the
locator, render site kinds consumed by the injector, and the terminal stages of
a single file transform.
"""

from enum import Enum


class DeclKind(str, Enum):
  """
  Shape of a top-level declaration recorded in the Declaration Catalog.
  """

  FUNCTION_DECL = "function_declaration"  # function Page() {}
  ARROW_FN = "arrow_function"  # const Page = () => {}
  FUNCTION_EXPR = "function_expression"  # const Page = function () {}
  CLASS_DECL = "class_declaration"  # class Page {}
  CLASS_EXPR = "class_expression"  # const Page = class {}


class ExportShape(str, Enum):
  """
  Shape of the node found as the module's default export.
  """

  FUNCTION_DECL = "function"
  ARROW_FN = "arrow"
  CLASS_DECL = "class"
  IDENTIFIER = "identifier"  # export default Page
  DECORATOR_CALL = "decorator_call"  # export default connect(mapState)(Page)
  UNRECOGNIZED = "unrecognized"


class RenderSiteKind(str, Enum):
  """
  Variant of a located render site.
  """

  RETURN_MARKUP = "return_markup"  # return <View />
  RETURN_FACTORY = "return_factory"  # return React.createElement(View)
  TAIL_MARKUP = "tail_markup"  # () => <View />


class InjectionStage(str, Enum):
  """
  States of the per-file orchestrator.

  ``NOT_A_PAGE``, ``PAGE_ALREADY_WIRED`` and ``WIRED`` are terminal.
  """

  NOT_A_PAGE = "not_a_page"
  PAGE_ALREADY_WIRED = "page_already_wired"
  PAGE_NEEDS_WIRING = "page_needs_wiring"
  WIRED = "wired"
