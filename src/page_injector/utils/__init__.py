"""
Utilities Package.

Console/logging helpers and tree-sitter node helpers.
"""
