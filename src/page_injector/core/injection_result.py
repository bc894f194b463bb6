"""
Data structures representing the output of the injection pipeline.

This module defines the `InjectionResult` Pydantic model, which encapsulates
the rewritten code, the terminal stage reached, and the execution trace.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from page_injector.enums import ExportShape, InjectionStage, RenderSiteKind


class InjectionResult(BaseModel):
  """
  Container for the result of transforming a single file.
  """

  code: str = Field(default="", description="The output source code.")
  file_id: str = Field(default="<string>", description="Identifier of the transformed file.")
  stage: InjectionStage = Field(default=InjectionStage.NOT_A_PAGE, description="Terminal orchestrator state.")
  export_shape: Optional[ExportShape] = Field(default=None, description="Shape of the default export, if inspected.")
  render_site: Optional[RenderSiteKind] = Field(default=None, description="Kind of render site that was extended.")
  component_inserted: bool = Field(default=False, description="True if the component was added to the render output.")
  import_inserted: bool = Field(default=False, description="True if the import statement was added.")
  errors: List[str] = Field(default_factory=list, description="List of error messages encountered.")
  success: bool = Field(default=True, description="False if the source could not be parsed.")
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Execution trace log data.")

  @property
  def changed(self) -> bool:
    """
    Check if the transform inserted anything.

    Returns:
        True if the output differs from the input.
    """
    return self.component_inserted or self.import_inserted

  @property
  def missed(self) -> bool:
    """
    Check if a page needed wiring but no render site received the component.

    Returns:
        True for a WIRED page without an injected component.
    """
    return self.stage == InjectionStage.WIRED and not self.component_inserted
