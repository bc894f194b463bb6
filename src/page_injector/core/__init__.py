"""
Core Package.

Contains the injection backend:
- Syntax Tree Adapter (tree-sitter parsing and text edits)
- Declaration Catalog and Import Scanners
- Render-Site Locator and Injection Mutator
- Injection Engine (orchestrator)
"""
