"""Library App - Utilities

- Identifier and text validators
- CLI output helpers
"""
