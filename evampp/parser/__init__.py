"""
Eva parser: source text → Symbolic Forms (lark LALR grammar in `grammar.lark`).
"""

from .parser import parse_form, parse_program

__all__ = ["parse_form", "parse_program"]
