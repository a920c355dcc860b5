"""
evampp.core: shared diagnostics and error types used across stages.

Modules:
  - span: best-effort source location
  - diagnostics: Diagnostic record rendered by the CLI
  - errors: exception taxonomy (syntax, unsupported form, internal, codegen, scheduler)
"""

__all__ = [
	"span",
	"diagnostics",
	"errors",
]
