# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Runtime values and side-effecting builtins seen by generated code.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, IO, Optional


class Record(SimpleNamespace):
	"""Value of a `rec` literal: fields are attributes, `idx` works by field name."""

	def __getitem__(self, key: str) -> Any:
		try:
			return getattr(self, key)
		except AttributeError:
			raise KeyError(key) from None

	def __setitem__(self, key: str, value: Any) -> None:
		setattr(self, key, value)


def eva_print(*args: Any, file: Optional[IO[str]] = None) -> None:
	"""`print` as exposed to Eva programs: space-separated values, one line."""
	print(*args, file=file, flush=True)


__all__ = ["Record", "eva_print"]
