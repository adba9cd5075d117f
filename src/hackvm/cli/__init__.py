"""
hackvm Command-Line Interface
=============================

This package provides the command-line tools for hackvm:

- **vmtrans**: VM-to-Hack translator

Each tool is implemented as a Click-based CLI application with
help text and uniform error reporting.
"""

__all__ = ["vmtrans"]
