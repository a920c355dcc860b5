# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Compiler facade: Eva source → Python source.

Pipeline:
  parse_program (lark) → Translator (target AST, processes materialized on
  spawn) → PyCodegen (text, with runtime prologue/epilogue).

`EvaMPP.run` executes a program in-process against a private Scheduler, which
is what the end-to-end tests use.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional

from .codegen import PyCodegen
from .forms import Form
from .parser import parse_program
from .runtime.scheduler import Scheduler
from .target import nodes as T
from .translator import Translator

LOG = logging.getLogger("evampp.compiler")

RUNTIME_NAMES = ("print", "spawn", "sleep", "drain_queue", "Record")


@dataclass(frozen=True)
class CompileOptions:
	indent: int = 4
	prologue: bool = True  # import the runtime ABI
	epilogue: bool = True  # implicit end-of-program scheduling pass
	runtime_module: str = "evampp.runtime"


@dataclass
class CompileResult:
	forms: List[Form]
	ast: T.Program
	target: str


class EvaMPP:
	"""Eva MPP → Python compiler."""

	def __init__(self, options: Optional[CompileOptions] = None) -> None:
		self.options = options or CompileOptions()

	def compile(self, source: str, *, filename: Optional[str] = None) -> CompileResult:
		forms = parse_program(source, filename=filename)
		return self.compile_forms(forms)

	def compile_forms(self, forms: List[Form]) -> CompileResult:
		program = Translator().translate_program(forms)
		target = PyCodegen(indent=self.options.indent).generate(
			program,
			prologue=self._prologue(),
			epilogue="drain_queue()" if self.options.epilogue else None,
		)
		LOG.debug("compiled %d top-level form(s) into %d line(s)", len(forms), target.count("\n"))
		return CompileResult(forms=forms, ast=program, target=target)

	def save_to_file(self, path: Path | str, code: str) -> None:
		Path(path).write_text(code, encoding="utf-8")

	def run(self, source: str, *, scheduler: Optional[Scheduler] = None) -> Scheduler:
		"""Compile and execute `source`; returns the scheduler that drove it."""
		scheduler = scheduler or Scheduler()
		compiler = EvaMPP(replace(self.options, prologue=False))
		result = compiler.compile(source)
		namespace = {"__name__": "__eva__", **scheduler.bindings()}
		exec(compile(result.target, "<eva>", "exec"), namespace)
		return scheduler

	def _prologue(self) -> Optional[str]:
		if not self.options.prologue:
			return None
		return f"from {self.options.runtime_module} import {', '.join(RUNTIME_NAMES)}"


__all__ = ["CompileOptions", "CompileResult", "EvaMPP", "RUNTIME_NAMES"]
