# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Target AST: the Python-shaped tree produced by the translator.

The node set is closed. Expressions derive from `TExpr`, statements from
`TStmt`; only statements may appear in `Block.statements` (see `to_statement`).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum, auto
from typing import Any, List, Optional, Union

from ..core.errors import InternalError


# Base node kinds

class TNode:
	"""Base class for all target AST nodes."""
	pass


class TExpr(TNode):
	"""Base class for all target expressions."""
	pass


class TStmt(TNode):
	"""Base class for all target statements."""
	pass


# Operator enums

class UnaryOp(Enum):
	NEG = auto()  # arithmetic negation: -x
	NOT = auto()  # logical negation: not x


class BinaryOp(Enum):
	ADD = auto()
	SUB = auto()
	MUL = auto()
	DIV = auto()

	STRICT_EQ = auto()  # no implicit coercion
	STRICT_NE = auto()
	GT = auto()
	GE = auto()
	LT = auto()
	LE = auto()


class LogicalOp(Enum):
	AND = auto()  # short-circuit
	OR = auto()


class UpdateOp(Enum):
	INC = auto()  # ++
	DEC = auto()  # --


# Expressions

@dataclass
class NumericLiteral(TExpr):
	value: Union[int, float]


@dataclass
class StringLiteral(TExpr):
	value: str


@dataclass
class Identifier(TExpr):
	name: str


@dataclass
class Assignment(TExpr):
	target: TExpr  # Identifier, IndexAccess or FieldAccess
	value: TExpr


@dataclass
class Unary(TExpr):
	op: UnaryOp
	operand: TExpr


@dataclass
class Binary(TExpr):
	op: BinaryOp
	left: TExpr
	right: TExpr


@dataclass
class Logical(TExpr):
	op: LogicalOp
	left: TExpr
	right: TExpr


@dataclass
class PrefixUpdate(TExpr):
	op: UpdateOp
	operand: TExpr


@dataclass
class PostfixUpdate(TExpr):
	op: UpdateOp
	operand: TExpr


@dataclass
class Call(TExpr):
	callee: TExpr
	args: List[TExpr]


@dataclass
class SuspensionPoint(TExpr):
	"""`yield`; `value` is only set for requests handed to the scheduler (sleep)."""
	value: Optional[TExpr] = None


@dataclass
class ListLiteral(TExpr):
	elements: List[TExpr]


@dataclass
class RecordField:
	key: str
	value: TExpr


@dataclass
class RecordLiteral(TExpr):
	fields: List[RecordField]


@dataclass
class IndexAccess(TExpr):
	subject: TExpr
	index: TExpr


@dataclass
class FieldAccess(TExpr):
	subject: TExpr
	field: str


# Statements

@dataclass
class Block(TStmt):
	statements: List[TStmt] = field(default_factory=list)


@dataclass
class ExpressionStatement(TStmt):
	expression: TExpr


@dataclass
class VariableDeclaration(TStmt):
	name: str
	init: TExpr


@dataclass
class If(TStmt):
	test: TExpr
	consequent: Block
	alternate: Optional[Block] = None


@dataclass
class While(TStmt):
	test: TExpr
	body: Block


@dataclass
class FunctionDecl(TStmt):
	name: str
	params: List[str]
	body: Block


@dataclass
class ResumableFunctionDecl(TStmt):
	"""Function whose body may suspend; the runtime drives it as a process."""
	name: str
	params: List[str]
	body: Block
	source_name: Optional[str] = None  # plain function it was derived from


@dataclass
class Return(TStmt):
	value: Optional[TExpr] = None


@dataclass
class Program(TNode):
	body: Block


_STATEMENT_KINDS = (
	Block,
	If,
	While,
	FunctionDecl,
	ResumableFunctionDecl,
	VariableDeclaration,
	Return,
	ExpressionStatement,
)

_EXPRESSION_KINDS = (
	NumericLiteral,
	StringLiteral,
	Identifier,
	Call,
	Binary,
	Unary,
	Logical,
	PrefixUpdate,
	PostfixUpdate,
	SuspensionPoint,
	ListLiteral,
	RecordLiteral,
	IndexAccess,
	FieldAccess,
	Assignment,
)


def to_statement(node: TNode) -> TStmt:
	"""
	Normalize a translated node to statement shape.

	Statement kinds pass through unchanged; expression kinds are wrapped in an
	ExpressionStatement. Anything else is a translator bug.
	"""
	if isinstance(node, _STATEMENT_KINDS):
		return node
	if isinstance(node, _EXPRESSION_KINDS):
		return ExpressionStatement(expression=node)
	raise InternalError(f"no statement form for target node {type(node).__name__}")


def node_to_dict(node: Any) -> Any:
	"""Dump a target AST to JSON-friendly data (`type` tag plus fields)."""
	if isinstance(node, Enum):
		return node.name
	if isinstance(node, list):
		return [node_to_dict(n) for n in node]
	if is_dataclass(node):
		out = {"type": type(node).__name__}
		for f in fields(node):
			out[f.name] = node_to_dict(getattr(node, f.name))
		return out
	return node


__all__ = [
	"TNode", "TExpr", "TStmt",
	"UnaryOp", "BinaryOp", "LogicalOp", "UpdateOp",
	"NumericLiteral", "StringLiteral", "Identifier", "Assignment",
	"Unary", "Binary", "Logical", "PrefixUpdate", "PostfixUpdate",
	"Call", "SuspensionPoint", "ListLiteral", "RecordField", "RecordLiteral",
	"IndexAccess", "FieldAccess",
	"Block", "ExpressionStatement", "VariableDeclaration", "If", "While",
	"FunctionDecl", "ResumableFunctionDecl", "Return", "Program",
	"to_statement", "node_to_dict",
]
