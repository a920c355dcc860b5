# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Runtime imported by generated programs.

Generated code starts with

    from evampp.runtime import print, spawn, sleep, drain_queue, Record

and ends with `drain_queue()`. All functions here act on the module-level
default `scheduler`.
"""

from __future__ import annotations

from typing import Any, Callable, List

from .process import Process
from .scheduler import Scheduler, SleepRequest
from .values import Record, eva_print

scheduler = Scheduler()


def print(*args: Any) -> None:  # noqa: A001
	eva_print(*args)


def spawn(fn: Callable[..., Any], *args: Any) -> Process:
	return scheduler.spawn(fn, *args)


def sleep(duration_ms: float) -> SleepRequest:
	return scheduler.sleep(duration_ms)


def drain_queue() -> List[Process]:
	return scheduler.drain_queue()


__all__ = [
	"Process",
	"Record",
	"Scheduler",
	"SleepRequest",
	"scheduler",
	"print",
	"spawn",
	"sleep",
	"drain_queue",
]
