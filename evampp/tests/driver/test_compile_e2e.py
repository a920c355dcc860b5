# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
End-to-end: Eva source → Python source → execution on a private scheduler.
"""

from __future__ import annotations

import textwrap

import pytest

from evampp.compiler import CompileOptions, EvaMPP
from evampp.core.errors import UnknownFunction
from evampp.test_helpers import run_source

HANDLE_PROGRAM = """
(def handle (id ms)
  (begin
    (print id 1)
    (sleep ms)
    (print id 2)
    (sleep ms)
    (print id 3)))

(spawn handle "x" 300)
(spawn handle "y" 100)
"""


def test_process_program_target_text():
	result = EvaMPP().compile(HANDLE_PROGRAM)
	assert result.target == textwrap.dedent(
		"""\
		from evampp.runtime import print, spawn, sleep, drain_queue, Record

		def handle(id, ms):
		    print(id, 1)
		    sleep(ms)
		    print(id, 2)
		    sleep(ms)
		    return print(id, 3)
		def _handle(id, ms):
		    print(id, 1)
		    yield
		    yield sleep(ms)
		    yield
		    print(id, 2)
		    yield sleep(ms)
		    return print(id, 3)
		spawn(_handle, "x", 300)
		spawn(_handle, "y", 100)

		drain_queue()
		"""
	)


def test_compile_result_keeps_every_stage():
	result = EvaMPP(CompileOptions(prologue=False, epilogue=False)).compile("(print 1)")
	assert result.forms == [["print", 1]]
	assert len(result.ast.body.statements) == 1
	assert result.target == "print(1)\n"


def test_sleeping_processes_interleave_by_wake_time(fake_clock):
	lines, sched = run_source(HANDLE_PROGRAM, clock=fake_clock)
	assert lines == ["x 1", "y 1", "y 2", "y 3", "x 2", "x 3"]
	assert sched.run_queue == []
	assert fake_clock.now == pytest.approx(0.6)


def test_each_process_runs_its_statements_in_order():
	src = """
	(def work (tag) (begin (print tag 1) (print tag 2) (print tag 3)))
	(spawn work "a")
	(spawn work "b")
	"""
	lines, _ = run_source(src)
	assert sorted(lines) == ["a 1", "a 2", "a 3", "b 1", "b 2", "b 3"]
	for tag in ("a", "b"):
		assert [l for l in lines if l.startswith(tag)] == [f"{tag} 1", f"{tag} 2", f"{tag} 3"]
	# both processes are started before either finishes
	assert lines.index("b 1") < lines.index("a 3")


def test_function_can_update_global_variable():
	lines, _ = run_source("(var x 10) (def foo () (set x 20)) (foo) (print x)")
	assert lines == ["20"]


def test_while_loop_with_increment():
	lines, _ = run_source("(var i 0) (while (< i 3) (begin (print i) (i ++)))")
	assert lines == ["0", "1", "2"]


def test_records_and_lists():
	src = """
	(var a 1)
	(var r (rec (b 2) a))
	(print (+ (prop r a) (idx r "b")))
	(var xs (list 10 20 30))
	(print (idx xs 2))
	"""
	lines, _ = run_source(src)
	assert lines == ["3", "30"]


def test_dash_case_names_and_if_else():
	src = """
	(def is-small (n) (if (< n 10) (return "small") (return "big")))
	(print (is-small 3) (is-small 30))
	"""
	lines, _ = run_source(src)
	assert lines == ["small big"]


def test_spawned_functions_stay_callable_directly():
	src = """
	(def square (x) (* x x))
	(spawn square 4)
	(print (square 5))
	"""
	lines, _ = run_source(src)
	assert lines == ["25"]


def test_spawn_before_definition_is_rejected():
	with pytest.raises(UnknownFunction):
		EvaMPP().compile("(spawn later 1) (def later (n) (print n))")


def test_generated_module_runs_against_default_runtime(capsys):
	result = EvaMPP().compile(
		"""
		(def greet (who) (begin (print "hello" who) (print "bye" who)))
		(spawn greet "eva")
		"""
	)
	exec(compile(result.target, "<generated>", "exec"), {"__name__": "generated"})
	assert capsys.readouterr().out.splitlines() == ["hello eva", "bye eva"]


def test_same_named_inner_functions_spawn_their_own_body():
	src = """
	(def a () (begin (def g () (print "a-g")) (spawn g)))
	(def b () (begin (def g () (print "b-g")) (spawn g)))
	(a)
	(b)
	"""
	lines, _ = run_source(src)
	assert lines == ["a-g", "b-g"]


def test_spawn_after_redefinition_runs_new_body():
	lines, _ = run_source('(def f () (print "one")) (spawn f) (def f () (print "two")) (spawn f)')
	assert lines == ["one", "two"]


def test_trailing_sleep_suspends_the_process(fake_clock):
	lines, _ = run_source('(def w () (begin (print "a") (sleep 1000))) (spawn w)', clock=fake_clock)
	assert lines == ["a"]
	assert fake_clock.now == pytest.approx(1.0)


def test_body_that_only_sleeps(fake_clock):
	src = '(def w () (sleep 100)) (def v () (print "v")) (spawn w) (spawn v)'
	lines, _ = run_source(src, clock=fake_clock)
	assert lines == ["v"]
	assert fake_clock.sleeps == [pytest.approx(0.1)]
