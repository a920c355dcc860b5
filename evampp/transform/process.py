# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Process transform: plain function → resumable function.

The resumable copy is what `spawn` actually runs. Its body is the original
body with suspension points interleaved so that the scheduler regains control
at statement granularity:

  [A, B, C, D]  →  [A, yield, B, yield, C, D]

Insertion indices are 1, 3, 5, ... of the growing list, bounded by the length
of the original list. Bodies of zero or one statement get no suspension point
and complete on their first drive.

Statement-level `sleep(ms)` calls, and `return sleep(ms)`, are turned into
`yield sleep(ms)` so the sleep request reaches the scheduler.
"""

from __future__ import annotations

import copy
from typing import List, Optional

from ..target import nodes as T

PROCESS_PREFIX = "_"


def process_name(name: str) -> str:
	"""Name of the resumable declaration derived from function `name`."""
	return f"{PROCESS_PREFIX}{name}"


def insert_suspension_points(statements: List[T.TStmt]) -> List[T.TStmt]:
	out = list(statements)
	for i in range(1, len(statements), 2):
		out.insert(i, T.ExpressionStatement(expression=T.SuspensionPoint()))
	return out


def _is_sleep_call(expr: T.TExpr, sleep_name: str) -> bool:
	return (
		isinstance(expr, T.Call)
		and isinstance(expr.callee, T.Identifier)
		and expr.callee.name == sleep_name
	)


def _suspend_sleeps(stmt: T.TStmt, sleep_name: str) -> List[T.TStmt]:
	"""
	Rewrite statement-level sleep calls (nested functions excluded). A returned
	sleep call, as left by an implicit return, becomes the yield followed by a
	bare `return`.
	"""
	if isinstance(stmt, T.ExpressionStatement):
		if _is_sleep_call(stmt.expression, sleep_name):
			stmt.expression = T.SuspensionPoint(value=stmt.expression)
	elif isinstance(stmt, T.Return):
		if stmt.value is not None and _is_sleep_call(stmt.value, sleep_name):
			return [
				T.ExpressionStatement(expression=T.SuspensionPoint(value=stmt.value)),
				T.Return(value=None),
			]
	elif isinstance(stmt, T.Block):
		stmt.statements = _suspend_all(stmt.statements, sleep_name)
	elif isinstance(stmt, T.If):
		_suspend_sleeps(stmt.consequent, sleep_name)
		if stmt.alternate is not None:
			_suspend_sleeps(stmt.alternate, sleep_name)
	elif isinstance(stmt, T.While):
		_suspend_sleeps(stmt.body, sleep_name)
	return [stmt]


def _suspend_all(statements: List[T.TStmt], sleep_name: str) -> List[T.TStmt]:
	return [out for stmt in statements for out in _suspend_sleeps(stmt, sleep_name)]


def to_resumable(
	decl: T.FunctionDecl,
	*,
	name: Optional[str] = None,
	sleep_name: str = "sleep",
) -> T.ResumableFunctionDecl:
	"""
	Build the resumable counterpart of `decl`.

	Pure: the body is deep-copied, `decl` is left untouched.
	"""
	body = _suspend_all(copy.deepcopy(decl.body.statements), sleep_name)
	return T.ResumableFunctionDecl(
		name=name or process_name(decl.name),
		params=list(decl.params),
		body=T.Block(statements=insert_suspension_points(body)),
		source_name=decl.name,
	)


__all__ = ["PROCESS_PREFIX", "process_name", "insert_suspension_points", "to_resumable"]
