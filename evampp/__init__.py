# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
evampp package: Eva (S-expression) to Python compiler with cooperative processes.

Stages:
  parser: source text → Symbolic Forms (nested lists/atoms)
  translator: Symbolic Forms → target AST (with process materialization)
  transform: plain function → resumable (generator) function
  codegen: target AST → Python source
  runtime: scheduler that drives spawned processes
"""

__all__ = ["parser", "translator", "transform", "codegen", "runtime", "compiler"]
