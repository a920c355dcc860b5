# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Eva name → Python name mapping.

`to_python_name` is the pure mapping (dash-case → snake_case, keyword escape).
`NameMapper` wraps it with a per-compile table so two different source names
can never end up as the same Python name.
"""

from __future__ import annotations

import keyword
import re
from typing import Dict

from ..core.errors import NameCollision, UnsupportedForm

_DASH_RE = re.compile(r"-(?=[A-Za-z0-9_])")


def to_python_name(name: str) -> str:
	"""
	Map an Eva symbol to a Python identifier (dotted paths allowed).

	`user-name` → `user_name`, `class` → `class_`. Operator tokens such as `+`
	have no Python spelling and are rejected.
	"""
	parts = []
	for segment in name.split("."):
		mapped = _DASH_RE.sub("_", segment)
		if keyword.iskeyword(mapped):
			mapped += "_"
		if not mapped.isidentifier():
			raise UnsupportedForm(name, "not a valid identifier")
		parts.append(mapped)
	return ".".join(parts)


class NameMapper:
	"""Injective (per compile) source → Python name mapping."""

	def __init__(self) -> None:
		self._sources: Dict[str, str] = {}

	def map(self, name: str) -> str:
		target = to_python_name(name)
		self._claim(target, name)
		return target

	def reserve(self, target: str, owner: str) -> str:
		"""Claim a synthesized Python name (e.g. a process body) for `owner`."""
		self._claim(target, owner)
		return target

	def source_of(self, target: str) -> str | None:
		return self._sources.get(target)

	def _claim(self, target: str, source: str) -> None:
		existing = self._sources.setdefault(target, source)
		if existing != source:
			raise NameCollision(source, f"name collides with {existing!r} as {target!r}")


__all__ = ["to_python_name", "NameMapper"]
