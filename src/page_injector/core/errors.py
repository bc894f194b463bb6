"""
Error types raised by the injection core.

Only malformed source is fatal. Every other condition (unrecognized export
shape, missing render method, ...) is a silent no-op recorded in the trace.
"""

from typing import Optional


class InjectorError(Exception):
  """Base class for page-injector failures."""


class SourceParseError(InjectorError, ValueError):
  """
  Raised when the source text cannot be parsed as a component module.

  Attributes:
      file_id (str): Identifier (usually a path) of the offending file.
      line (int): 1-based line of the first syntax error.
      column (int): 1-based column of the first syntax error.
      detail (str): Short description of the failing construct.
  """

  def __init__(self, file_id: str, line: int, column: int, detail: Optional[str] = None):
    self.file_id = file_id
    self.line = line
    self.column = column
    self.detail = detail or "syntax error"
    super().__init__(f"{file_id}:{line}:{column}: {self.detail}")
