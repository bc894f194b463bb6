"""
Runtime Configuration Store.

Options accepted by the injector, validated once at the boundary before the
core runs. Keys can be given in snake_case or in the camelCase spelling used by
bundler-loader configurations (``importPath``, ``componentName``, ``isPage``).
"""

import re
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  try:
    import tomli as tomllib
  except ImportError:
    tomllib = None  # type: ignore

DEFAULT_COMPONENT_NAME = "WebpackInjected"

# pages/<anything>/index.jsx|tsx, optionally under a package-<name>/ sub-package
DEFAULT_PAGE_PATTERN = r"(package-.+/)?pages/.+/index\.[tj]sx$"

TOML_SECTION = "page_injector"

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def default_is_page(file_id: str) -> bool:
  """
  Default page predicate.

  Normalizes Windows separators, then matches ``pages/<dir>/index.[jt]sx`` at
  the end of the path.

  Args:
      file_id (str): Path of the file being transformed.

  Returns:
      bool: True if the file is a page entry point.
  """
  normalized = file_id.replace("\\", "/")
  return re.search(DEFAULT_PAGE_PATTERN, normalized) is not None


class InjectorConfig(BaseModel):
  """
  Configuration for injecting a component into page files.
  """

  model_config = ConfigDict(extra="forbid", populate_by_name=True)

  import_path: str = Field(
    "",
    alias="importPath",
    description="Module specifier to import the component from, and to test for prior presence.",
  )
  component_name: str = Field(
    DEFAULT_COMPONENT_NAME,
    alias="componentName",
    description="Default-import binding and JSX tag of the injected component.",
  )
  is_page: Optional[Callable[[str], bool]] = Field(
    None,
    alias="isPage",
    exclude=True,
    description="Predicate over the file identifier. Overrides page_pattern.",
  )
  page_pattern: Optional[str] = Field(
    None,
    alias="pagePattern",
    description="Regular expression searched in the '/'-normalized file path.",
  )
  import_on_miss: bool = Field(
    False,
    alias="importOnMiss",
    description="Insert the import even when no render site received the component.",
  )

  @field_validator("component_name")
  @classmethod
  def validate_component_name(cls, v: str) -> str:
    """
    Ensures the component name is usable as both a binding and a JSX tag.

    Args:
        v (str): The configured name.

    Returns:
        str: The name, unchanged.

    Raises:
        ValueError: If the name is not a JavaScript identifier.
    """
    if not _IDENTIFIER.match(v):
      raise ValueError(f"componentName must be a JavaScript identifier, got '{v}'")
    return v

  @field_validator("page_pattern")
  @classmethod
  def validate_page_pattern(cls, v: Optional[str]) -> Optional[str]:
    if v is not None:
      try:
        re.compile(v)
      except re.error as e:
        raise ValueError(f"Invalid pagePattern '{v}': {e}")
    return v

  def matches(self, file_id: str) -> bool:
    """
    Applies the page predicate to a file identifier.

    Args:
        file_id (str): Path of the file being transformed.

    Returns:
        bool: True if the file should be wired.
    """
    if self.is_page is not None:
      return bool(self.is_page(file_id))
    if self.page_pattern is not None:
      return re.search(self.page_pattern, file_id.replace("\\", "/")) is not None
    return default_is_page(file_id)

  @classmethod
  def load(
    cls,
    import_path: Optional[str] = None,
    component_name: Optional[str] = None,
    page_pattern: Optional[str] = None,
    import_on_miss: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "InjectorConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        import_path (Optional[str]): Override for the import path.
        component_name (Optional[str]): Override for the component name.
        page_pattern (Optional[str]): Override for the page pattern.
        import_on_miss (Optional[bool]): Override for import-on-miss.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        InjectorConfig: The fully resolved configuration object.

    Raises:
        pydantic.ValidationError: If the merged settings are invalid.
    """
    toml_config, _ = _load_toml_settings(search_path or Path.cwd())

    overrides = {
      "import_path": import_path,
      "component_name": component_name,
      "page_pattern": page_pattern,
      "import_on_miss": import_on_miss,
    }
    merged: Dict[str, Any] = dict(toml_config)
    for key, value in overrides.items():
      if value is not None:
        # Drop any camelCase spelling of the same option from the TOML layer
        merged.pop(cls.model_fields[key].alias, None)
        merged[key] = value

    return cls.model_validate(merged)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches ``start_path`` and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  if not tomllib:
    return {}, None

  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get(TOML_SECTION, {}), parent

  return {}, None
