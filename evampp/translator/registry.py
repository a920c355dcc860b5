# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Compile-time function registry.

Maps a translated function name to its declaration node, the block whose
statement list holds it, and its index in that list. The translator uses it to
splice resumable declarations right after the function they were derived from.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Union

from ..target import nodes as T

Declaration = Union[T.FunctionDecl, T.ResumableFunctionDecl]


@dataclass
class FunctionEntry:
	decl: Declaration
	block: Optional[T.Block]
	index: Optional[int]
	# Resumable declaration derived from `decl`, once some spawn needed it.
	process: Optional[T.ResumableFunctionDecl] = None


class FunctionRegistry:
	"""
	Names visible at the current point of translation.

	Function bodies open a scope: declarations made inside are dropped when the
	body is done, and outer entries they shadowed become visible again.
	"""

	def __init__(self) -> None:
		self._entries: Dict[str, FunctionEntry] = {}
		self._saved: List[Dict[str, FunctionEntry]] = []

	def push_scope(self) -> None:
		self._saved.append(dict(self._entries))

	def pop_scope(self) -> None:
		self._entries = self._saved.pop()

	def forget(self, name: str) -> None:
		"""Hide `name` in the current scope (a parameter shadowing a function)."""
		self._entries.pop(name, None)

	def register(self, name: str, decl: Declaration, block: Optional[T.Block], index: Optional[int]) -> FunctionEntry:
		entry = FunctionEntry(decl=decl, block=block, index=index)
		self._entries[name] = entry
		return entry

	def lookup(self, name: str) -> Optional[FunctionEntry]:
		return self._entries.get(name)

	def __contains__(self, name: str) -> bool:
		return name in self._entries

	def __iter__(self) -> Iterator[str]:
		return iter(self._entries)

	def position_of(self, entry: FunctionEntry) -> Optional[int]:
		"""
		Current index of `entry.decl` in its owning block, or None when it is not
		a direct statement of that block.
		"""
		block = entry.block
		if block is None:
			return None
		idx = entry.index
		if idx is not None and idx < len(block.statements) and block.statements[idx] is entry.decl:
			return idx
		for i, stmt in enumerate(block.statements):
			if stmt is entry.decl:
				entry.index = i
				return i
		return None

	def insert_after(self, entry: FunctionEntry, decl: Declaration) -> int:
		"""
		Insert `decl` right after `entry.decl` in the same block; returns the new
		index. Recorded indices of later declarations in that block are shifted.
		"""
		pos = self.position_of(entry)
		assert entry.block is not None and pos is not None
		at = pos + 1
		entry.block.statements.insert(at, decl)
		# shadowed entries of enclosing scopes may live in the same block
		seen = set()
		for entries in [self._entries, *self._saved]:
			for other in entries.values():
				if id(other) in seen:
					continue
				seen.add(id(other))
				if other.block is entry.block and other.index is not None and other.index >= at:
					other.index += 1
		return at


__all__ = ["FunctionEntry", "FunctionRegistry"]
