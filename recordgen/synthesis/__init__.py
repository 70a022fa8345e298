"""Synthesizers producing artifact models for builders and value types."""

from .builder import synthesize_builder
from .interface import InterfaceConversion, synthesize_interface
from .rewriter import RewriteError, rewrite_as_value_type

__all__ = [
    "InterfaceConversion",
    "RewriteError",
    "rewrite_as_value_type",
    "synthesize_builder",
    "synthesize_interface",
]
