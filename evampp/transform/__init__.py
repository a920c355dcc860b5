"""
Transform package: rewrites of already translated target AST.
"""

from .process import PROCESS_PREFIX, insert_suspension_points, process_name, to_resumable

__all__ = ["PROCESS_PREFIX", "insert_suspension_points", "process_name", "to_resumable"]
