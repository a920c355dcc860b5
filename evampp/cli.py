# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
`evampp` command line driver.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from .compiler import CompileOptions, EvaMPP
from .core.diagnostics import Diagnostic
from .core.errors import EvaError
from .core.span import Span
from .target.nodes import node_to_dict


def _report(diags: List[Diagnostic], source: Path, as_json: bool) -> int:
	if as_json:
		payload = {
			"exit_code": 1,
			"diagnostics": [d.to_json(source=str(source)) for d in diags],
		}
		print(json.dumps(payload))
	else:
		for d in diags:
			file = d.span.file or str(source)
			where = file if d.span.line is None else f"{file}:{d.span.describe()}"
			print(f"{where}: {d.severity}: {d.message}", file=sys.stderr)
			for note in d.notes:
				print(f"{where}: note: {note}", file=sys.stderr)
	return 1


def main(argv: list[str] | None = None) -> int:
	"""
	Compile an Eva file to Python. Without -o the generated code goes to stdout
	(unless --run is given). Exit code is 1 on any compile or runtime error.
	"""
	parser = argparse.ArgumentParser(prog="evampp", description="Eva MPP to Python compiler")
	parser.add_argument("source", type=Path, help="Path to Eva source file")
	parser.add_argument("-o", "--output", type=Path, help="Write generated Python to this path")
	parser.add_argument("--emit-ast", type=Path, help="Write the target AST as JSON to this path")
	parser.add_argument("--run", action="store_true", help="Execute the program after compiling")
	parser.add_argument("--indent", type=int, default=4, help="Indent width of generated code (default: 4)")
	parser.add_argument("--no-prologue", action="store_true", help="Omit the runtime import line")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/code/message/severity/file/line/column)",
	)
	parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
	args = parser.parse_args(argv)

	if args.verbose:
		logging.basicConfig(level=logging.DEBUG, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

	try:
		source = args.source.read_text(encoding="utf-8")
	except OSError as exc:
		diag = Diagnostic(message=f"cannot read source: {exc.strerror}", phase="io", span=Span(file=str(args.source)))
		return _report([diag], args.source, args.json)

	compiler = EvaMPP(CompileOptions(indent=args.indent, prologue=not args.no_prologue))
	try:
		result = compiler.compile(source, filename=str(args.source))
	except EvaError as exc:
		return _report([exc.to_diagnostic()], args.source, args.json)

	if args.emit_ast:
		args.emit_ast.write_text(json.dumps(node_to_dict(result.ast), indent=2), encoding="utf-8")
	if args.output:
		compiler.save_to_file(args.output, result.target)
	elif not args.run:
		sys.stdout.write(result.target)

	if args.run:
		try:
			compiler.run(source)
		except EvaError as exc:
			return _report([exc.to_diagnostic()], args.source, args.json)
		except Exception as exc:
			# raised by the Eva program itself
			diag = Diagnostic(message=f"{type(exc).__name__}: {exc}", code="E-RUNTIME", phase="runtime")
			return _report([diag], args.source, args.json)
	return 0


if __name__ == "__main__":
	sys.exit(main())
