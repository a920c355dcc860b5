"""
Codegen package: target AST → Python source text.
"""

from .pycodegen import PyCodegen

__all__ = ["PyCodegen"]
