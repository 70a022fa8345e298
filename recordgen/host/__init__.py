"""Python source host: symbol table, scanner and round driver."""

from .rounds import Compilation, CompilationResult, SourceRound
from .scanner import SourceScanner
from .symbols import Component, Declaration, Method, SymbolTable

__all__ = [
    "Compilation",
    "CompilationResult",
    "Component",
    "Declaration",
    "Method",
    "SourceRound",
    "SourceScanner",
    "SymbolTable",
]
