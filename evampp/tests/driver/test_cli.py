# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
CLI driver tests: files in, exit code and outputs checked.
"""

from __future__ import annotations

import json
from pathlib import Path

from evampp.cli import main


def _write(tmp_path: Path, text: str, name: str = "main.eva") -> Path:
	path = tmp_path / name
	path.write_text(text, encoding="utf-8")
	return path


def test_compile_to_stdout(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "(print (+ 1 2))")
	assert main([str(src), "--no-prologue"]) == 0
	assert capsys.readouterr().out == "print((1 + 2))\n\ndrain_queue()\n"


def test_compile_to_output_file(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "(var x 1)")
	out = tmp_path / "out.py"
	assert main([str(src), "-o", str(out)]) == 0
	text = out.read_text(encoding="utf-8")
	assert text.startswith("from evampp.runtime import ")
	assert "x = 1\n" in text
	assert capsys.readouterr().out == ""


def test_emit_ast(tmp_path: Path) -> None:
	src = _write(tmp_path, "(print 1)")
	ast_path = tmp_path / "ast.json"
	assert main([str(src), "-o", str(tmp_path / "out.py"), "--emit-ast", str(ast_path)]) == 0
	data = json.loads(ast_path.read_text(encoding="utf-8"))
	assert data["type"] == "Program"
	(stmt,) = data["body"]["statements"]
	assert stmt["type"] == "ExpressionStatement"
	assert stmt["expression"]["callee"] == {"type": "Identifier", "name": "print"}


def test_indent_option(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "(def f (x) x)")
	assert main([str(src), "--no-prologue", "--indent", "2"]) == 0
	assert "def f(x):\n  return x\n" in capsys.readouterr().out


def test_run_executes_program(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, '(def hi (n) (print "hi" n)) (spawn hi 1) (print "main")')
	assert main([str(src), "--run"]) == 0
	assert capsys.readouterr().out.splitlines() == ["main", "hi 1"]


def test_translate_error_reports_and_exits_1(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "(var x)")
	assert main([str(src)]) == 1
	captured = capsys.readouterr()
	assert captured.out == ""
	assert str(src) in captured.err
	assert "error:" in captured.err
	assert "(var x)" in captured.err


def test_syntax_error_has_location(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "(print 1)\n)")
	assert main([str(src)]) == 1
	err = capsys.readouterr().err
	assert err.startswith(f"{src}:2:")


def test_json_diagnostics(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "(spawn nothing)")
	assert main([str(src), "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "translate"
	assert diag["code"] == "E-UNKNOWN-FUNCTION"
	assert diag["severity"] == "error"
	assert diag["file"] == str(src)


def test_missing_source_file(tmp_path: Path, capsys) -> None:
	missing = tmp_path / "nope.eva"
	assert main([str(missing), "--json"]) == 1
	(diag,) = json.loads(capsys.readouterr().out)["diagnostics"]
	assert diag["phase"] == "io"
	assert diag["file"] == str(missing)


def test_run_reports_program_errors(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "(print (/ 1 0))")
	assert main([str(src), "--run"]) == 1
	err = capsys.readouterr().err
	assert "ZeroDivisionError" in err
	assert err.startswith(f"{src}: error:")


def test_run_errors_as_json(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "(def boom () (begin (print 1) (/ 1 0))) (spawn boom)")
	assert main([str(src), "--run", "--json"]) == 1
	out = capsys.readouterr().out
	payload = json.loads(out.splitlines()[-1])
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "runtime"
	assert diag["message"].startswith("ZeroDivisionError")


def test_translate_error_names_the_top_level_form(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "(print 1)\n(if)")
	assert main([str(src)]) == 1
	err = capsys.readouterr().err
	assert "?:?" not in err
	assert f"{src}: note: in top-level form 2: (if)" in err


def test_json_diagnostics_carry_notes(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "(var x)")
	assert main([str(src), "--json"]) == 1
	(diag,) = json.loads(capsys.readouterr().out)["diagnostics"]
	assert diag["notes"] == ["in top-level form 1: (var x)"]
