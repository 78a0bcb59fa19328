"""Liquid template expressions, template scanning, syntax tree nodes and standard filters."""

__version__ = "0.1.0"