"""
Orchestration Engine for Page Injection.

This module provides the `InjectionEngine`, the driver that decides whether a
file is a page and, if so, wires the configured component into it.

The pipeline is a small state machine per file:

1.  **NOT_A_PAGE**: the page predicate rejects the file identifier. The source
    is returned unchanged and is never parsed.
2.  **PAGE_ALREADY_WIRED**: the file is parsed, its Declaration Catalog is
    built, and an import of the configured path is already present. The source
    is returned unchanged.
3.  **PAGE_NEEDS_WIRING**: the Render-Site Locator resolves the default export
    and the Injection Mutator collects the component and import edits.
4.  **WIRED**: the edits are applied and the result returned, whether or not a
    render site was actually found.

Only a parse failure is fatal. `inject` propagates it; `run` reports it in the
result for batch callers.
"""

from typing import List, Optional

from page_injector.config import InjectorConfig
from page_injector.core.catalog import build_catalog
from page_injector.core.errors import SourceParseError
from page_injector.core.injection_result import InjectionResult
from page_injector.core.injector import Injector, MutationGuard
from page_injector.core.locator import locate_render_site
from page_injector.core.scanners import has_import
from page_injector.core.syntax import SourceTree, TextEdit, apply_edits, parse_source
from page_injector.core.tracer import TraceLogger
from page_injector.enums import InjectionStage


class InjectionEngine:
  """
  The per-file transformation unit.

  The engine holds configuration only; every call builds its own tree,
  catalog, guard and tracer, so one engine may serve many files.
  """

  def __init__(self, config: Optional[InjectorConfig] = None):
    """
    Initializes the Engine.

    Args:
        config (InjectorConfig, optional): Injection options. Defaults are used if None.
    """
    self.config = config or InjectorConfig()

  def parse(self, code: str, file_id: str) -> SourceTree:
    """
    Parses source text into a tree.

    Raises:
        SourceParseError: If the input is not valid component source.
    """
    return parse_source(code, file_id)

  def inject(self, code: str, file_id: str) -> InjectionResult:
    """
    Executes the injection pipeline on one file.

    Args:
        code (str): The input source string.
        file_id (str): Identifier (path) of the file, tested by the page predicate.

    Returns:
        InjectionResult: The output code and the terminal stage.

    Raises:
        SourceParseError: If the file is a page and cannot be parsed.
    """
    tracer = TraceLogger()
    tracer.start_phase("Page Injection", file_id)

    if not self.config.matches(file_id):
      tracer.log_inspection("page predicate", "skip", file_id)
      tracer.end_phase()
      return self._result(code, file_id, InjectionStage.NOT_A_PAGE, tracer)

    tracer.start_phase("Preprocessing", "Parsing & Cataloguing")
    tree = self.parse(code, file_id)
    catalog = build_catalog(tree)
    already_wired = has_import(tree, self.config.import_path)
    tracer.end_phase()

    if already_wired:
      tracer.log_inspection("imports", "already wired", self.config.import_path)
      tracer.end_phase()
      return self._result(code, file_id, InjectionStage.PAGE_ALREADY_WIRED, tracer)

    # PAGE_NEEDS_WIRING
    tracer.start_phase("Locate", "Resolving default export")
    resolution = locate_render_site(tree, catalog, tracer)
    tracer.end_phase()

    tracer.start_phase("Inject", self.config.component_name)
    guard = MutationGuard()
    injector = Injector(tree, self.config.component_name, self.config.import_path, guard, tracer)
    edits: List[TextEdit] = []

    if resolution.site is not None:
      component_edit = injector.inject_component(resolution.site)
      if component_edit is not None:
        edits.append(component_edit)

    if guard.component_inserted or self.config.import_on_miss:
      import_edit = injector.inject_import()
      if import_edit is not None:
        edits.append(import_edit)
    tracer.end_phase()

    output = apply_edits(tree.source, edits) if edits else code
    tracer.end_phase()

    return self._result(
      output,
      file_id,
      InjectionStage.WIRED,
      tracer,
      export_shape=resolution.shape,
      render_site=resolution.site.kind if guard.component_inserted else None,
      guard=guard,
    )

  def run(self, code: str, file_id: str) -> InjectionResult:
    """
    Executes the pipeline, reporting parse failures in the result.

    Args:
        code (str): The input source string.
        file_id (str): Identifier (path) of the file.

    Returns:
        InjectionResult: The result; ``success`` is False on a parse error and
        ``code`` is then the unchanged input.
    """
    try:
      return self.inject(code, file_id)
    except SourceParseError as e:
      return InjectionResult(
        code=code,
        file_id=file_id,
        stage=InjectionStage.PAGE_NEEDS_WIRING,
        errors=[f"Parse Error: {e}"],
        success=False,
      )

  @staticmethod
  def _result(
    code: str,
    file_id: str,
    stage: InjectionStage,
    tracer: TraceLogger,
    export_shape=None,
    render_site=None,
    guard: Optional[MutationGuard] = None,
  ) -> InjectionResult:
    return InjectionResult(
      code=code,
      file_id=file_id,
      stage=stage,
      export_shape=export_shape,
      render_site=render_site,
      component_inserted=guard.component_inserted if guard else False,
      import_inserted=guard.import_inserted if guard else False,
      trace_events=tracer.export(),
    )
