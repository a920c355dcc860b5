# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Process transform tests: suspension point placement and sleep rewriting.
"""

from __future__ import annotations

import copy

import pytest

from evampp.target import nodes as T
from evampp.transform import insert_suspension_points, process_name, to_resumable

YIELD = T.ExpressionStatement(expression=T.SuspensionPoint())


def _stmt(name: str) -> T.ExpressionStatement:
	return T.ExpressionStatement(expression=T.Call(callee=T.Identifier(name=name), args=[]))


A, B, C, D, E = (_stmt(n) for n in "abcde")


def _fn(*body: T.TStmt) -> T.FunctionDecl:
	return T.FunctionDecl(name="work", params=["n"], body=T.Block(statements=list(body)))


def test_four_statement_oracle():
	proc = to_resumable(_fn(A, B, C, D))
	assert proc.body.statements == [A, YIELD, B, YIELD, C, D]


@pytest.mark.parametrize(
	"body, expected",
	[
		([], []),
		([A], [A]),
		([A, B], [A, YIELD, B]),
		([A, B, C], [A, YIELD, B, C]),
		([A, B, C, D, E], [A, YIELD, B, YIELD, C, D, E]),
	],
)
def test_insertion_positions(body, expected):
	assert insert_suspension_points(body) == expected


def test_signature_and_name():
	proc = to_resumable(_fn(A))
	assert isinstance(proc, T.ResumableFunctionDecl)
	assert proc.name == process_name("work") == "_work"
	assert proc.params == ["n"]
	assert proc.source_name == "work"
	assert to_resumable(_fn(A), name="custom").name == "custom"


def test_transform_is_pure():
	sleep_call = T.Call(callee=T.Identifier(name="sleep"), args=[T.NumericLiteral(value=5)])
	decl = _fn(A, T.ExpressionStatement(expression=sleep_call), B)
	before = copy.deepcopy(decl)
	proc = to_resumable(decl)
	assert decl == before
	assert proc.params is not decl.params
	assert proc.body.statements[0] is not decl.body.statements[0]
	assert to_resumable(decl) == proc


def test_sleep_calls_are_yielded_at_any_depth():
	sleep_call = T.Call(callee=T.Identifier(name="sleep"), args=[T.Identifier(name="n")])
	loop = T.While(
		test=T.Identifier(name="n"),
		body=T.Block(statements=[T.ExpressionStatement(expression=sleep_call)]),
	)
	branch = T.If(
		test=T.Identifier(name="n"),
		consequent=T.Block(statements=[A]),
		alternate=T.Block(statements=[T.ExpressionStatement(expression=sleep_call)]),
	)
	proc = to_resumable(_fn(loop, branch))
	new_loop, _, new_branch = proc.body.statements
	assert new_loop.body.statements[0].expression == T.SuspensionPoint(value=sleep_call)
	assert new_branch.consequent.statements == [A]
	assert new_branch.alternate.statements[0].expression == T.SuspensionPoint(value=sleep_call)


def test_sleep_in_nested_function_is_left_alone():
	sleep_stmt = T.ExpressionStatement(
		expression=T.Call(callee=T.Identifier(name="sleep"), args=[T.NumericLiteral(value=1)])
	)
	inner = T.FunctionDecl(name="inner", params=[], body=T.Block(statements=[sleep_stmt]))
	proc = to_resumable(_fn(inner))
	assert proc.body.statements[0].body.statements == [sleep_stmt]


def test_custom_sleep_name():
	nap = T.ExpressionStatement(expression=T.Call(callee=T.Identifier(name="nap"), args=[]))
	proc = to_resumable(_fn(nap), sleep_name="nap")
	assert isinstance(proc.body.statements[0].expression, T.SuspensionPoint)


def test_returned_sleep_is_yielded_before_returning():
	sleep_call = T.Call(callee=T.Identifier(name="sleep"), args=[T.Identifier(name="n")])
	proc = to_resumable(_fn(A, T.Return(value=sleep_call)))
	assert proc.body.statements == [
		A,
		YIELD,
		T.ExpressionStatement(expression=T.SuspensionPoint(value=sleep_call)),
		T.Return(value=None),
	]


def test_lone_returned_sleep_still_suspends():
	sleep_call = T.Call(callee=T.Identifier(name="sleep"), args=[T.NumericLiteral(value=100)])
	proc = to_resumable(_fn(T.Return(value=sleep_call)))
	assert proc.body.statements == [
		T.ExpressionStatement(expression=T.SuspensionPoint(value=sleep_call)),
		YIELD,
		T.Return(value=None),
	]


def test_other_returns_are_kept():
	ret = T.Return(value=T.Call(callee=T.Identifier(name="other"), args=[]))
	proc = to_resumable(_fn(ret))
	assert proc.body.statements == [ret]
