# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Cooperative single-threaded scheduler.

Processes are queued by `spawn` and driven by `drain_queue`. Driving is
round-robin over ready processes, one segment (up to the next `yield`) at a
time. A process that yields a `SleepRequest` is parked until the clock passes
its wake time; when nothing is ready the scheduler blocks in `sleeper` until the
earliest parked process is due.

Only the per-process segment boundaries are a contract: callers must not rely
on the round-robin order beyond that.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import time
from collections import deque
from dataclasses import dataclass
from functools import partial
from typing import IO, Any, Callable, Deque, Dict, List, Optional, Tuple

from ..core.errors import SchedulerError
from .process import Process
from .values import Record, eva_print

LOG = logging.getLogger("evampp.runtime")


@dataclass(frozen=True)
class SleepRequest:
	"""Yielded by a process to park itself for `duration_ms` milliseconds."""

	duration_ms: float


class Scheduler:
	def __init__(
		self,
		*,
		clock: Callable[[], float] = time.monotonic,
		sleeper: Callable[[float], Any] = time.sleep,
		stdout: Optional[IO[str]] = None,
	) -> None:
		"""
		`clock` returns seconds; `sleeper` blocks for the given seconds. Tests pass
		a fake clock whose sleeper just advances time.
		"""
		self.run_queue: List[Process] = []
		self.current: Optional[Process] = None
		self._pids = itertools.count(1)
		self._clock = clock
		self._sleeper = sleeper
		self._stdout = stdout

	def spawn(self, fn: Callable[..., Any], *args: Any) -> Process:
		"""Queue `fn(*args)` as a new process; it is not driven until the next drain."""
		if not callable(fn):
			raise SchedulerError(f"spawn expects a function, got {fn!r}")
		proc = Process(next(self._pids), fn, args)
		self.run_queue.append(proc)
		LOG.debug("spawned %s", proc)
		return proc

	def sleep(self, duration_ms: float) -> SleepRequest:
		"""
		Build a sleep request for the running process. Generated code yields it;
		calling sleep outside a driven process is an error.
		"""
		if self.current is None:
			raise SchedulerError("sleep() can only be used inside a spawned process")
		if duration_ms < 0:
			raise SchedulerError(f"sleep duration must be non-negative, got {duration_ms}")
		return SleepRequest(duration_ms=duration_ms)

	def drain_queue(self) -> List[Process]:
		"""
		Drive every queued process (and any spawned meanwhile) to completion.

		Returns the processes in completion order. The run queue is empty
		afterwards, also when a process raised.
		"""
		ready: Deque[Process] = deque()
		parked: List[Tuple[float, int, Process]] = []
		finished: List[Process] = []
		try:
			while self.run_queue or ready or parked:
				ready.extend(self.run_queue)
				self.run_queue.clear()
				self._wake_due(parked, ready)
				if not ready:
					delay = parked[0][0] - self._clock()
					if delay > 0:
						self._sleeper(delay)
					continue

				proc = ready.popleft()
				request = self._step(proc)
				if proc.done:
					LOG.debug("finished %s after %d step(s)", proc, proc.steps)
					finished.append(proc)
				elif isinstance(request, SleepRequest):
					wake_at = self._clock() + request.duration_ms / 1000.0
					heapq.heappush(parked, (wake_at, proc.pid, proc))
				else:
					ready.append(proc)
		finally:
			self.run_queue.clear()
		return finished

	def bindings(self) -> Dict[str, Any]:
		"""Runtime ABI bound to this scheduler, for executing generated code."""
		return {
			"print": partial(eva_print, file=self._stdout),
			"spawn": self.spawn,
			"sleep": self.sleep,
			"drain_queue": self.drain_queue,
			"Record": Record,
		}

	def _wake_due(self, parked: List[Tuple[float, int, Process]], ready: Deque[Process]) -> None:
		now = self._clock()
		while parked and parked[0][0] <= now:
			_, _, proc = heapq.heappop(parked)
			ready.append(proc)

	def _step(self, proc: Process) -> Any:
		self.current = proc
		try:
			return proc.step()
		except Exception:
			LOG.exception("process %s raised", proc)
			raise
		finally:
			self.current = None


__all__ = ["Scheduler", "SleepRequest"]
