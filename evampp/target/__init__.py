# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Target AST package.

Public API:
  - node classes (expressions, statements, operator enums)
  - to_statement: expression → statement normalization
  - node_to_dict: JSON dump used by `evampp --emit-ast`
"""

from .nodes import *  # noqa: F401,F403
from .nodes import __all__  # noqa: F401
