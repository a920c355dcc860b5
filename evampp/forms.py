# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Symbolic Form helpers.

A Symbolic Form is what the parser hands to the translator:
  - `int` / `float` for numeric atoms,
  - `str` for symbols,
  - `str` wrapped in double quotes for string literals (`'"hello"'`),
  - `list` for everything in parentheses.

Nothing here knows about the target AST; these are pure predicates shared by the
translator and by diagnostics.
"""

from __future__ import annotations

import re
from typing import Any, List, Union

Atom = Union[int, float, str]
Form = Union[Atom, List[Any]]

_SYMBOL_RE = re.compile(r"^[+\-*/<>=a-zA-Z0-9_.]+$")


def is_number(form: Any) -> bool:
	# bool is an int subclass; the parser never produces one, but reject it anyway
	return isinstance(form, (int, float)) and not isinstance(form, bool)


def is_string(form: Any) -> bool:
	return isinstance(form, str) and len(form) >= 2 and form[0] == '"' and form[-1] == '"'


def is_symbol(form: Any) -> bool:
	"""Bare symbol usable as a variable/function name or operator token."""
	return isinstance(form, str) and _SYMBOL_RE.match(form) is not None


def is_list(form: Any) -> bool:
	return isinstance(form, list)


def head_of(form: Any) -> Any:
	"""First element of a non-empty list form, else None."""
	if isinstance(form, list) and form:
		return form[0]
	return None


def render_form(form: Any) -> str:
	"""Render a form back to S-expression text (for error messages)."""
	if isinstance(form, list):
		return "(" + " ".join(render_form(f) for f in form) + ")"
	return str(form)


__all__ = [
	"Atom",
	"Form",
	"is_number",
	"is_string",
	"is_symbol",
	"is_list",
	"head_of",
	"render_form",
]
