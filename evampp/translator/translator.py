# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Symbolic Forms → target AST.

Dispatch order (first match wins):
  1. numeric atom, 2. string atom, 3. symbol,
  4. var/set, 5. unary (not, -), 6. ++/-- (prefix or postfix),
  7. binary arithmetic/comparison, 8. and/or,
  9–14. begin, if, while, def, return, list, idx, rec, prop,
  15. anything else is a call (with spawn specialization).

The translator owns the per-compile state: the name table, the function
registry, the stack of blocks under construction (so `def` knows where it will
land) and how many process bodies `spawn` has derived per function name.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

from ..core.errors import (
	EvaError,
	UnknownFunction,
	UnknownLogicalOperator,
	UnknownOperator,
	UnsupportedForm,
)
from ..forms import Form, head_of, is_number, is_string, is_symbol, render_form
from ..target import nodes as T
from ..transform.process import PROCESS_PREFIX, to_resumable
from .names import NameMapper
from .registry import FunctionEntry, FunctionRegistry

LOG = logging.getLogger("evampp.translator")

_UNARY_OPS = {
	"not": T.UnaryOp.NOT,
	"-": T.UnaryOp.NEG,
}

_UPDATE_OPS = {
	"++": T.UpdateOp.INC,
	"--": T.UpdateOp.DEC,
}

_BINARY_OPS = {
	"+": T.BinaryOp.ADD,
	"-": T.BinaryOp.SUB,
	"*": T.BinaryOp.MUL,
	"/": T.BinaryOp.DIV,
	"==": T.BinaryOp.STRICT_EQ,
	"!=": T.BinaryOp.STRICT_NE,
	">": T.BinaryOp.GT,
	">=": T.BinaryOp.GE,
	"<": T.BinaryOp.LT,
	"<=": T.BinaryOp.LE,
}

_LOGICAL_OPS = {
	"and": T.LogicalOp.AND,
	"or": T.LogicalOp.OR,
}

_OPERATOR_TOKENS = frozenset(_UNARY_OPS) | frozenset(_UPDATE_OPS) | frozenset(_BINARY_OPS) | frozenset(_LOGICAL_OPS)

# Last body forms that are never wrapped in an implicit `return`.
_NO_IMPLICIT_RETURN = frozenset({"begin", "if", "while", "var", "def", "return"})


def unary_operator(token: str, form: Form = None) -> T.UnaryOp:
	"""
	Operator kind for `token`. `translate` only calls the operator lookups once
	the token is known to be in their table, so the errors here reach callers
	that resolve tokens on their own.
	"""
	try:
		return _UNARY_OPS[token]
	except KeyError:
		raise UnknownOperator(form if form is not None else token, f"unknown unary operator {token!r}")


def logical_operator(token: str, form: Form = None) -> T.LogicalOp:
	"""Logical operator kind for `token`; see `unary_operator`."""
	try:
		return _LOGICAL_OPS[token]
	except KeyError:
		raise UnknownLogicalOperator(form if form is not None else token, f"unknown logical operator {token!r}")


def with_implicit_return(body: List[Form]) -> List[Form]:
	"""Wrap the last form in `(return ...)` unless it is a control form."""
	if not body:
		return body
	last = body[-1]
	if head_of(last) in _NO_IMPLICIT_RETURN:
		return body
	return [*body[:-1], ["return", last]]


class Translator:
	"""Eva → target AST translation for one compile."""

	def __init__(self, *, spawn_name: str = "spawn", sleep_name: str = "sleep") -> None:
		self.names = NameMapper()
		self.registry = FunctionRegistry()
		self.spawn_name = spawn_name
		self.sleep_name = sleep_name
		# Blocks under construction, innermost last.
		self._blocks: List[T.Block] = []
		# Function name → number of process bodies derived for it so far.
		self._process_counts: Dict[str, int] = {}
		self._special_forms: Dict[str, Callable[[List[Any]], T.TNode]] = {
			"var": self._form_var,
			"set": self._form_set,
			"begin": self._form_begin,
			"if": self._form_if,
			"while": self._form_while,
			"def": self._form_def,
			"return": self._form_return,
			"list": self._form_list,
			"idx": self._form_idx,
			"rec": self._form_rec,
			"prop": self._form_prop,
		}

	# --- entry points ---

	def translate_program(self, forms: List[Form]) -> T.Program:
		"""
		A program is an implicit `(begin ...)` over its top-level forms.

		Forms carry no source locations, so errors get a note naming the
		top-level form they came from.
		"""
		block = T.Block(statements=[])
		self._blocks.append(block)
		try:
			for pos, child in enumerate(forms, start=1):
				try:
					block.statements.append(T.to_statement(self.translate(child)))
				except EvaError as exc:
					exc.notes.append(f"in top-level form {pos}: {render_form(child)}")
					raise
		finally:
			self._blocks.pop()
		return T.Program(body=block)

	def translate(self, form: Form) -> T.TNode:
		if is_number(form):
			return T.NumericLiteral(value=form)
		if is_string(form):
			return T.StringLiteral(value=form[1:-1])
		if is_symbol(form):
			return T.Identifier(name=self.names.map(form))
		if not isinstance(form, list) or not form:
			raise UnsupportedForm(form)

		# non-string heads (nested lists, numbers) can only be calls
		op = form[0] if isinstance(form[0], str) else None
		if op in ("var", "set"):
			return self._special_forms[op](form)
		if len(form) == 2 and op in _UNARY_OPS:
			return T.Unary(op=unary_operator(op, form), operand=self.translate(form[1]))
		if len(form) == 2 and (op in _UPDATE_OPS or (isinstance(form[1], str) and form[1] in _UPDATE_OPS)):
			return self._update(form)
		if len(form) == 3 and op in _BINARY_OPS:
			return T.Binary(
				op=_BINARY_OPS[op],
				left=self.translate(form[1]),
				right=self.translate(form[2]),
			)
		if len(form) == 3 and op in _LOGICAL_OPS:
			return T.Logical(
				op=logical_operator(op, form),
				left=self.translate(form[1]),
				right=self.translate(form[2]),
			)
		if op in self._special_forms:
			return self._special_forms[op](form)
		if op in _OPERATOR_TOKENS:
			raise UnsupportedForm(form, f"wrong number of operands for {op!r}")
		return self._call(form)

	# --- helpers ---

	def _expect_arity(self, form: List[Any], *counts: int) -> None:
		if len(form) not in counts:
			expected = " or ".join(str(c - 1) for c in counts)
			raise UnsupportedForm(form, f"{form[0]!r} expects {expected} operand(s)")

	def _expect_min_arity(self, form: List[Any], count: int) -> None:
		if len(form) < count:
			raise UnsupportedForm(form, f"{form[0]!r} expects at least {count - 1} operand(s)")

	def _plain_name(self, symbol: Any, form: List[Any], what: str) -> str:
		"""Map a binding name; must be a symbol without dotted access."""
		if not is_symbol(symbol) or "." in symbol:
			raise UnsupportedForm(form, f"{what} must be a plain symbol")
		return self.names.map(symbol)

	def _translate_block(self, forms: List[Form]) -> T.Block:
		block = T.Block(statements=[])
		self._blocks.append(block)
		try:
			for child in forms:
				block.statements.append(T.to_statement(self.translate(child)))
		finally:
			self._blocks.pop()
		return block

	def _as_block(self, form: Form) -> T.Block:
		"""Branch/body normalization: `(begin ...)` stays a block, anything else becomes one."""
		if head_of(form) == "begin":
			return self._form_begin(form)
		return self._translate_block([form])

	def _update(self, form: List[Any]) -> T.TExpr:
		head, tail = form
		if head in _UPDATE_OPS:
			return T.PrefixUpdate(op=_UPDATE_OPS[head], operand=self.translate(tail))
		return T.PostfixUpdate(op=_UPDATE_OPS[tail], operand=self.translate(head))

	# --- special forms ---

	def _form_var(self, form: List[Any]) -> T.TNode:
		self._expect_arity(form, 3)
		name = self._plain_name(form[1], form, "variable name")
		return T.VariableDeclaration(name=name, init=self.translate(form[2]))

	def _form_set(self, form: List[Any]) -> T.TNode:
		self._expect_arity(form, 3)
		target = self.translate(form[1])
		if not isinstance(target, (T.Identifier, T.IndexAccess, T.FieldAccess)):
			raise UnsupportedForm(form, "assignment target must be a name, idx or prop")
		return T.Assignment(target=target, value=self.translate(form[2]))

	def _form_begin(self, form: List[Any]) -> T.Block:
		return self._translate_block(form[1:])

	def _form_if(self, form: List[Any]) -> T.TNode:
		self._expect_arity(form, 3, 4)
		test = self.translate(form[1])
		consequent = self._as_block(form[2])
		alternate = self._as_block(form[3]) if len(form) == 4 else None
		return T.If(test=test, consequent=consequent, alternate=alternate)

	def _form_while(self, form: List[Any]) -> T.TNode:
		self._expect_arity(form, 3)
		return T.While(test=self.translate(form[1]), body=self._as_block(form[2]))

	def _form_def(self, form: List[Any]) -> T.TNode:
		self._expect_arity(form, 4)
		_, name, params, body = form
		fn_name = self._plain_name(name, form, "function name")
		if not isinstance(params, list):
			raise UnsupportedForm(form, "function parameters must be a list")
		param_names = [self._plain_name(p, form, "parameter") for p in params]

		body_forms = body[1:] if head_of(body) == "begin" else [body]
		self.registry.push_scope()
		try:
			for param in param_names:
				self.registry.forget(param)
			fn_body = self._translate_block(with_implicit_return(body_forms))
		finally:
			self.registry.pop_scope()
		decl = T.FunctionDecl(name=fn_name, params=param_names, body=fn_body)
		self._register(fn_name, decl)
		return decl

	def _form_return(self, form: List[Any]) -> T.TNode:
		self._expect_arity(form, 1, 2)
		if len(form) == 1:
			return T.Return(value=None)
		return T.Return(value=self.translate(form[1]))

	def _form_list(self, form: List[Any]) -> T.TNode:
		return T.ListLiteral(elements=[self.translate(e) for e in form[1:]])

	def _form_idx(self, form: List[Any]) -> T.TNode:
		self._expect_arity(form, 3)
		return T.IndexAccess(subject=self.translate(form[1]), index=self.translate(form[2]))

	def _form_rec(self, form: List[Any]) -> T.TNode:
		fields: List[T.RecordField] = []
		for entry in form[1:]:
			if is_symbol(entry):
				# `(rec x)` is shorthand for `(rec (x x))`
				key = self._plain_name(entry, form, "record field")
				fields.append(T.RecordField(key=key, value=T.Identifier(name=key)))
			elif isinstance(entry, list) and len(entry) == 2:
				key = self._plain_name(entry[0], form, "record field")
				fields.append(T.RecordField(key=key, value=self.translate(entry[1])))
			else:
				raise UnsupportedForm(form, "record entries must be (key value) or a symbol")
		return T.RecordLiteral(fields=fields)

	def _form_prop(self, form: List[Any]) -> T.TNode:
		self._expect_arity(form, 3)
		field = self._plain_name(form[2], form, "property name")
		return T.FieldAccess(subject=self.translate(form[1]), field=field)

	# --- calls and spawn ---

	def _call(self, form: List[Any]) -> T.TNode:
		callee = self.translate(form[0])
		if isinstance(callee, (T.NumericLiteral, T.StringLiteral)):
			raise UnsupportedForm(form, "literal is not callable")
		args = [self.translate(arg) for arg in form[1:]]
		if isinstance(callee, T.Identifier) and callee.name == self.spawn_name:
			args = self._spawn_args(form, args)
		return T.Call(callee=callee, args=args)

	def _spawn_args(self, form: List[Any], args: List[T.TExpr]) -> List[T.TExpr]:
		"""Point spawn at the resumable declaration of its target function."""
		if not args:
			raise UnsupportedForm(form, "spawn needs a function to run")
		target = args[0]
		if not isinstance(target, T.Identifier):
			raise UnsupportedForm(form, "spawn target must be a function name")
		entry = self.registry.lookup(target.name)
		if entry is None:
			raise UnknownFunction(form, f"spawn of undeclared function {target.name!r}")
		resumable = self._materialize(target.name, entry, form)
		return [T.Identifier(name=resumable.name), *args[1:]]

	def _materialize(self, name: str, entry: FunctionEntry, form: List[Any]) -> T.ResumableFunctionDecl:
		if entry.process is not None:
			return entry.process
		if self.registry.position_of(entry) is None:
			raise UnsupportedForm(form, f"function {name!r} is not declared at statement level")

		# each declaration of `name` gets its own process body: _f, _f_2, ...
		count = self._process_counts.get(name, 0) + 1
		self._process_counts[name] = count
		proc_name = f"{PROCESS_PREFIX}{name}" if count == 1 else f"{PROCESS_PREFIX}{name}_{count}"
		self.names.reserve(proc_name, f"<process {name} #{count}>")
		resumable = to_resumable(entry.decl, name=proc_name, sleep_name=self.sleep_name)
		at = self.registry.insert_after(entry, resumable)
		self.registry.register(proc_name, resumable, entry.block, at)
		entry.process = resumable
		LOG.debug("materialized process %s from %s at index %d", proc_name, name, at)
		return resumable

	def _register(self, name: str, decl: T.FunctionDecl) -> None:
		block = self._blocks[-1] if self._blocks else None
		# The declaration is appended right after translation returns.
		index = len(block.statements) if block is not None else None
		self.registry.register(name, decl, block, index)
		LOG.debug("registered function %s at index %s", name, index)


__all__ = ["Translator", "unary_operator", "logical_operator", "with_implicit_return"]
