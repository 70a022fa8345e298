"""recordgen: builder and value type generation for Python sources."""

from .directives import generated, record_builder, record_interface

__version__ = "0.1.0"

__all__ = ["__version__", "generated", "record_builder", "record_interface"]
