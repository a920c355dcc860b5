# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Translator package: Symbolic Forms → target AST.

Public API:
  - Translator: one instance per compile (owns names, registry, block cursor)
  - NameMapper / to_python_name: Eva → Python identifier mapping
  - FunctionRegistry: compile-time function table used by spawn
"""

from .names import NameMapper, to_python_name
from .registry import FunctionEntry, FunctionRegistry
from .translator import Translator, logical_operator, unary_operator, with_implicit_return

__all__ = [
	"Translator",
	"NameMapper",
	"to_python_name",
	"FunctionEntry",
	"FunctionRegistry",
	"logical_operator",
	"unary_operator",
	"with_implicit_return",
]
