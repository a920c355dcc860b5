# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lightweight process (green thread).

A Process wraps a handler and its arguments. The handler is only invoked on the
first `step()`, so spawning never runs user code. A handler that returns a
generator is resumed one segment (up to the next `yield`) per step; any other
handler completes on its first step.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Generator, Optional, Tuple

from ..core.errors import SchedulerError


def display_name(handler: Callable[..., Any]) -> Optional[str]:
	"""Handler name, or None for anonymous handlers (lambdas, nameless callables)."""
	name = getattr(handler, "__name__", None)
	if not name or name.startswith("<"):
		return None
	return name


class Process:
	def __init__(self, pid: int, handler: Callable[..., Any], args: Tuple[Any, ...] = ()) -> None:
		self.pid = pid
		self.handler = handler
		self.args = args
		self.name = display_name(handler) or str(pid)
		self.done = False
		self.result: Any = None
		self.steps = 0
		self._handle: Optional[Generator[Any, Any, Any]] = None

	def step(self) -> Any:
		"""
		Run one segment. Returns the value the process yielded (a sleep request or
		None); once the process finishes `done` is set and None is returned.
		"""
		if self.done:
			raise SchedulerError(f"process {self} has already finished")
		self.steps += 1
		if self._handle is None:
			handle = self.handler(*self.args)
			if not inspect.isgenerator(handle):
				self._finish(handle)
				return None
			self._handle = handle
		try:
			return self._handle.send(None)
		except StopIteration as stop:
			self._finish(stop.value)
			return None

	def _finish(self, result: Any) -> None:
		self.done = True
		self.result = result
		self._handle = None

	def __str__(self) -> str:
		return f"#{self.pid} ({self.name})"

	def __repr__(self) -> str:
		return f"<Process {self} done={self.done}>"


__all__ = ["Process", "display_name"]
