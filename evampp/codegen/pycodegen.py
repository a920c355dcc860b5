# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Target AST → Python source.

One `_stmt_<Node>` / `_expr_<Node>` method per node kind. Statements render to
lists of already indented lines; expressions render to a single string and are
parenthesized conservatively so operator precedence never needs tracking.

Python specifics handled here:
  - nested `Block` statements are flattened into the enclosing suite and empty
    suites print `pass`;
  - functions assigning to names they do not declare get `global`/`nonlocal`;
  - `++`/`--` print as `x += 1` in statement position and as assignment
    expressions elsewhere;
  - resumable functions print as generator functions (`yield`).
"""

from __future__ import annotations

import re
from dataclasses import fields, is_dataclass
from typing import Iterator, List, Optional, Set

from ..core.errors import CodegenError
from ..target import nodes as T

_UNESCAPED_QUOTE_RE = re.compile(r'(?<!\\)"')

_BINARY_OPS = {
	T.BinaryOp.ADD: "+",
	T.BinaryOp.SUB: "-",
	T.BinaryOp.MUL: "*",
	T.BinaryOp.DIV: "/",
	# Python equality never coerces between strings and numbers.
	T.BinaryOp.STRICT_EQ: "==",
	T.BinaryOp.STRICT_NE: "!=",
	T.BinaryOp.GT: ">",
	T.BinaryOp.GE: ">=",
	T.BinaryOp.LT: "<",
	T.BinaryOp.LE: "<=",
}

_LOGICAL_OPS = {
	T.LogicalOp.AND: "and",
	T.LogicalOp.OR: "or",
}

_UPDATE_OPS = {
	T.UpdateOp.INC: "+",
	T.UpdateOp.DEC: "-",
}

_FUNCTION_KINDS = (T.FunctionDecl, T.ResumableFunctionDecl)


def _walk(node: object) -> Iterator[object]:
	"""Yield `node` and its descendants, not entering nested function bodies."""
	yield node
	if isinstance(node, list):
		children: List[object] = list(node)
	elif is_dataclass(node):
		children = [getattr(node, f.name) for f in fields(node)]
	else:
		return
	for child in children:
		if isinstance(child, _FUNCTION_KINDS):
			yield child
			continue
		yield from _walk(child)


def declared_names(body: T.Block) -> Set[str]:
	"""Names bound by `var` or function declarations directly in this function."""
	names: Set[str] = set()
	for node in _walk(body.statements):
		if isinstance(node, T.VariableDeclaration):
			names.add(node.name)
		elif isinstance(node, _FUNCTION_KINDS):
			names.add(node.name)
	return names


def assigned_names(body: T.Block) -> Set[str]:
	"""Plain names written by `set` or `++`/`--` in this function."""
	names: Set[str] = set()
	for node in _walk(body.statements):
		target = None
		if isinstance(node, T.Assignment):
			target = node.target
		elif isinstance(node, (T.PrefixUpdate, T.PostfixUpdate)):
			target = node.operand
		if isinstance(target, T.Identifier) and "." not in target.name:
			names.add(target.name)
	return names


class PyCodegen:
	"""Python code generator."""

	def __init__(self, indent: int = 4) -> None:
		self._indent = indent
		# Names local to each enclosing function, innermost last.
		self._scopes: List[Set[str]] = []

	def generate(
		self,
		program: T.Program,
		*,
		prologue: Optional[str] = None,
		epilogue: Optional[str] = None,
	) -> str:
		lines: List[str] = []
		if prologue:
			lines.extend(prologue.splitlines())
			lines.append("")
		lines.extend(self._statements(program.body.statements, 0))
		if epilogue:
			lines.append("")
			lines.extend(epilogue.splitlines())
		return "\n".join(lines) + "\n"

	# --- statements ---

	def gen_stmt(self, node: T.TStmt, level: int = 0) -> List[str]:
		method = getattr(self, f"_stmt_{type(node).__name__}", None)
		if method is None:
			raise CodegenError(f"{type(node).__name__} cannot be printed as a statement")
		return method(node, level)

	def _ind(self, level: int) -> str:
		return " " * (self._indent * level)

	def _statements(self, statements: List[T.TStmt], level: int) -> List[str]:
		lines: List[str] = []
		for stmt in statements:
			lines.extend(self.gen_stmt(stmt, level))
		return lines

	def _suite(self, block: T.Block, level: int) -> List[str]:
		lines = self._statements(block.statements, level)
		return lines or [self._ind(level) + "pass"]

	def _stmt_Block(self, node: T.Block, level: int) -> List[str]:
		return self._statements(node.statements, level)

	def _stmt_ExpressionStatement(self, node: T.ExpressionStatement, level: int) -> List[str]:
		expr = node.expression
		if isinstance(expr, T.Assignment):
			text = f"{self.gen_expr(expr.target)} = {self.gen_expr(expr.value)}"
		elif isinstance(expr, (T.PrefixUpdate, T.PostfixUpdate)):
			text = f"{self.gen_expr(expr.operand)} {_UPDATE_OPS[expr.op]}= 1"
		elif isinstance(expr, T.SuspensionPoint):
			text = "yield" if expr.value is None else f"yield {self.gen_expr(expr.value)}"
		else:
			text = self.gen_expr(expr)
		return [self._ind(level) + text]

	def _stmt_VariableDeclaration(self, node: T.VariableDeclaration, level: int) -> List[str]:
		return [self._ind(level) + f"{node.name} = {self.gen_expr(node.init)}"]

	def _stmt_Return(self, node: T.Return, level: int) -> List[str]:
		if node.value is None:
			return [self._ind(level) + "return"]
		return [self._ind(level) + f"return {self.gen_expr(node.value)}"]

	def _stmt_If(self, node: T.If, level: int) -> List[str]:
		lines = [self._ind(level) + f"if {self.gen_expr(node.test)}:"]
		lines.extend(self._suite(node.consequent, level + 1))
		alternate = node.alternate
		# else-branch holding a single if prints as elif
		while alternate is not None and len(alternate.statements) == 1 and isinstance(alternate.statements[0], T.If):
			inner = alternate.statements[0]
			lines.append(self._ind(level) + f"elif {self.gen_expr(inner.test)}:")
			lines.extend(self._suite(inner.consequent, level + 1))
			alternate = inner.alternate
		if alternate is not None:
			lines.append(self._ind(level) + "else:")
			lines.extend(self._suite(alternate, level + 1))
		return lines

	def _stmt_While(self, node: T.While, level: int) -> List[str]:
		lines = [self._ind(level) + f"while {self.gen_expr(node.test)}:"]
		lines.extend(self._suite(node.body, level + 1))
		return lines

	def _stmt_FunctionDecl(self, node: T.FunctionDecl, level: int) -> List[str]:
		return self._function(node, level)

	def _stmt_ResumableFunctionDecl(self, node: T.ResumableFunctionDecl, level: int) -> List[str]:
		return self._function(node, level)

	def _function(self, node: T.FunctionDecl | T.ResumableFunctionDecl, level: int) -> List[str]:
		local = set(node.params) | declared_names(node.body)
		free = sorted(assigned_names(node.body) - local)
		nonlocals = [n for n in free if any(n in scope for scope in self._scopes)]
		globals_ = [n for n in free if n not in nonlocals]

		lines = [self._ind(level) + f"def {node.name}({', '.join(node.params)}):"]
		if globals_:
			lines.append(self._ind(level + 1) + "global " + ", ".join(globals_))
		if nonlocals:
			lines.append(self._ind(level + 1) + "nonlocal " + ", ".join(nonlocals))
		self._scopes.append(local)
		try:
			lines.extend(self._suite(node.body, level + 1))
		finally:
			self._scopes.pop()
		return lines

	# --- expressions ---

	def gen_expr(self, node: T.TExpr) -> str:
		method = getattr(self, f"_expr_{type(node).__name__}", None)
		if method is None:
			raise CodegenError(f"{type(node).__name__} cannot be used as an expression")
		return method(node)

	def _expr_NumericLiteral(self, node: T.NumericLiteral) -> str:
		return repr(node.value)

	def _expr_StringLiteral(self, node: T.StringLiteral) -> str:
		# Escape sequences in the source are kept as written.
		value = _UNESCAPED_QUOTE_RE.sub(r'\\"', node.value).replace("\n", "\\n")
		return f'"{value}"'

	def _expr_Identifier(self, node: T.Identifier) -> str:
		return node.name

	def _expr_Binary(self, node: T.Binary) -> str:
		return f"({self.gen_expr(node.left)} {_BINARY_OPS[node.op]} {self.gen_expr(node.right)})"

	def _expr_Logical(self, node: T.Logical) -> str:
		return f"({self.gen_expr(node.left)} {_LOGICAL_OPS[node.op]} {self.gen_expr(node.right)})"

	def _expr_Unary(self, node: T.Unary) -> str:
		if node.op is T.UnaryOp.NOT:
			return f"(not {self.gen_expr(node.operand)})"
		return f"(-{self.gen_expr(node.operand)})"

	def _walrus_name(self, target: T.TExpr, what: str) -> str:
		if not isinstance(target, T.Identifier) or "." in target.name:
			raise CodegenError(f"{what} of a non-variable cannot be used as an expression")
		return target.name

	def _expr_PrefixUpdate(self, node: T.PrefixUpdate) -> str:
		name = self._walrus_name(node.operand, "update")
		return f"({name} := {name} {_UPDATE_OPS[node.op]} 1)"

	def _expr_PostfixUpdate(self, node: T.PostfixUpdate) -> str:
		name = self._walrus_name(node.operand, "update")
		undo = "-" if node.op is T.UpdateOp.INC else "+"
		return f"(({name} := {name} {_UPDATE_OPS[node.op]} 1) {undo} 1)"

	def _expr_Assignment(self, node: T.Assignment) -> str:
		name = self._walrus_name(node.target, "assignment")
		return f"({name} := {self.gen_expr(node.value)})"

	def _expr_Call(self, node: T.Call) -> str:
		args = ", ".join(self.gen_expr(a) for a in node.args)
		return f"{self.gen_expr(node.callee)}({args})"

	def _expr_SuspensionPoint(self, node: T.SuspensionPoint) -> str:
		if node.value is None:
			return "(yield)"
		return f"(yield {self.gen_expr(node.value)})"

	def _expr_ListLiteral(self, node: T.ListLiteral) -> str:
		return "[" + ", ".join(self.gen_expr(e) for e in node.elements) + "]"

	def _expr_RecordLiteral(self, node: T.RecordLiteral) -> str:
		items = ", ".join(f"{f.key}={self.gen_expr(f.value)}" for f in node.fields)
		return f"Record({items})"

	def _expr_IndexAccess(self, node: T.IndexAccess) -> str:
		return f"{self.gen_expr(node.subject)}[{self.gen_expr(node.index)}]"

	def _expr_FieldAccess(self, node: T.FieldAccess) -> str:
		return f"{self.gen_expr(node.subject)}.{node.field}"


__all__ = ["PyCodegen", "declared_names", "assigned_names"]
