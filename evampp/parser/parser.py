# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Eva source text → Symbolic Forms.

The lark grammar lives next to this module (`grammar.lark`). Parse trees are
folded into plain Python values by `_FormBuilder` so later stages never see
lark types:
  - NUMBER → int or float
  - STRING → str including the surrounding quotes (the translator strips them)
  - SYMBOL → str
  - ( ... ) → list
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput

from ..core.errors import EvaSyntaxError
from ..core.span import Span
from ..forms import Form

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()


class _FormBuilder(Transformer):
	def start(self, items) -> List[Form]:
		return list(items)

	def sexp(self, items) -> List[Form]:
		return list(items)

	def number(self, items):
		tok: Token = items[0]
		text = str(tok)
		if any(c in text for c in ".eE"):
			return float(text)
		return int(text)

	def string(self, items) -> str:
		return str(items[0])

	def symbol(self, items) -> str:
		return str(items[0])


_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	start="start",
	propagate_positions=False,
	maybe_placeholders=False,
)


def _syntax_error(exc: UnexpectedInput, filename: Optional[str]) -> EvaSyntaxError:
	if isinstance(exc, UnexpectedEOF):
		message = "unexpected end of input (unbalanced parentheses?)"
	elif isinstance(exc, UnexpectedCharacters):
		message = f"unexpected character {exc.char!r}"
	else:
		token = getattr(exc, "token", None)
		if token is not None and getattr(token, "type", None) == "$END":
			message = "unexpected end of input (unbalanced parentheses?)"
		else:
			message = f"unexpected token {str(token)!r}"
	return EvaSyntaxError(message, span=Span.from_loc(exc, file=filename))


def parse_program(source: str, *, filename: Optional[str] = None) -> List[Form]:
	"""Parse a whole program into its top-level forms."""
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as exc:
		raise _syntax_error(exc, filename) from exc
	return _FormBuilder().transform(tree)


def parse_form(source: str) -> Form:
	"""Parse exactly one form (convenience for tests and the REPL-ish CLI paths)."""
	forms = parse_program(source)
	if len(forms) != 1:
		raise EvaSyntaxError(f"expected exactly one form, got {len(forms)}")
	return forms[0]


__all__ = ["parse_program", "parse_form"]
