"""
page-injector Package.

A source-to-source rewriter for component-based front-end projects. Given the
text of a page module (JSX / TSX), it imports a designated component and
renders it as an extra child of the page's render output, exactly once.

Usage
-----

Simple String Transform
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import page_injector as pi
    code = "import React from 'react'\\nexport default () => <View />\\n"
    print(pi.transform(code, "src/pages/home/index.jsx", importPath="@/components/Debug"))
    # import WebpackInjected from '@/components/Debug'
    # import React from 'react'
    # export default () => <View><WebpackInjected /></View>

Advanced Usage (Engine)
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from page_injector import InjectionEngine, InjectorConfig

    config = InjectorConfig(import_path="@/components/Debug", component_name="Debug")
    res = InjectionEngine(config).run(code, "src/pages/home/index.jsx")
    print(res.stage, res.code)
"""

from typing import Any, Optional

from page_injector.config import InjectorConfig
from page_injector.core.engine import InjectionEngine
from page_injector.core.errors import SourceParseError
from page_injector.core.injection_result import InjectionResult

__version__ = "0.1.0"


def transform(source: str, file_id: str, config: Optional[InjectorConfig] = None, **options: Any) -> str:
  """
  Wires the configured component into a page's source text.

  Args:
      source (str): The module source.
      file_id (str): Identifier (path) of the module, tested by the page predicate.
      config (InjectorConfig, optional): Prepared configuration.
      **options: Configuration keys (``importPath``, ``componentName``,
        ``isPage``, ...) used to build a config when ``config`` is None.

  Returns:
      str: The rewritten source, or ``source`` itself when nothing applies.

  Raises:
      SourceParseError: If the file is a page and its source cannot be parsed.
      pydantic.ValidationError: If ``options`` are invalid.
  """
  if config is None:
    config = InjectorConfig.model_validate(options)
  return InjectionEngine(config).inject(source, file_id).code


__all__ = [
  "InjectionEngine",
  "InjectionResult",
  "InjectorConfig",
  "SourceParseError",
  "transform",
  "__version__",
]
