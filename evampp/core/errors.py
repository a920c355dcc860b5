# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Error taxonomy for the Eva compiler and runtime.

All compile-time errors are synchronous: the failing stage raises, the whole
compile is abandoned, and the driver turns the exception into a Diagnostic.
`InternalError` marks a compiler bug (a gap between node kinds and the code
handling them) and is reported separately from user input errors.
"""

from __future__ import annotations

from typing import Any, List, Optional

from ..forms import render_form
from .diagnostics import Diagnostic
from .span import Span


class EvaError(ValueError):
	"""Base class for every error the toolchain raises on purpose."""

	code = "E-EVA"
	phase = "translate"

	def __init__(self, message: str, *, span: Optional[Span] = None) -> None:
		super().__init__(message)
		self.message = message
		self.span = span or Span()
		# Context added while the error propagates (e.g. which top-level form).
		self.notes: List[str] = []

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(
			message=self.message,
			code=self.code,
			phase=self.phase,
			span=self.span,
			notes=list(self.notes),
		)


class EvaSyntaxError(EvaError):
	"""Source text is not a well-formed sequence of S-expressions."""

	code = "E-SYNTAX"
	phase = "parser"


class UnsupportedForm(EvaError):
	"""
	A Symbolic Form matches no translation rule (wrong arity, unknown keyword,
	unknown operator, unresolvable name).

	The offending form is kept on `form` and rendered into the message.
	"""

	code = "E-UNSUPPORTED-FORM"

	def __init__(self, form: Any, reason: str = "unsupported form") -> None:
		super().__init__(f"{reason}: {render_form(form)}")
		self.form = form
		self.reason = reason


class UnknownOperator(UnsupportedForm):
	"""A form has the arity of an operator rule but an unrecognized operator token."""

	code = "E-UNKNOWN-OPERATOR"


class UnknownLogicalOperator(UnknownOperator):
	code = "E-UNKNOWN-LOGICAL-OPERATOR"


class UnknownFunction(UnsupportedForm):
	"""`spawn` names something that is not a declared function."""

	code = "E-UNKNOWN-FUNCTION"


class NameCollision(UnsupportedForm):
	"""Two distinct source names map to the same Python name in one compile."""

	code = "E-NAME-COLLISION"


class InternalError(EvaError):
	"""Translator bug: a node kind the statement normalizer does not know."""

	code = "E-INTERNAL"
	phase = "internal"


class CodegenError(EvaError):
	"""A target AST shape that has no Python rendering."""

	code = "E-CODEGEN"
	phase = "codegen"


class SchedulerError(EvaError):
	"""Runtime misuse of the scheduler ABI (e.g. sleep outside a process)."""

	code = "E-SCHEDULER"
	phase = "runtime"


__all__ = [
	"EvaError",
	"EvaSyntaxError",
	"UnsupportedForm",
	"UnknownOperator",
	"UnknownLogicalOperator",
	"UnknownFunction",
	"NameCollision",
	"InternalError",
	"CodegenError",
	"SchedulerError",
]
