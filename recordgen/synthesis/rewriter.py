"""Textual rewrite of a rendered placeholder class into a frozen dataclass."""

from __future__ import annotations

import re

_FUTURE_IMPORT = "from __future__ import annotations\n"


class RewriteError(RuntimeError):
    """Raised when the rendered source does not contain the expected class."""


def rewrite_as_value_type(source: str, class_name: str, add_builder: bool) -> str:
    """Turn ``class <class_name>:`` in ``source`` into a frozen dataclass.

    With ``add_builder`` the class is also marked with ``@record_builder`` so
    the following round generates its builder.
    """
    match = re.search(rf"^class {re.escape(class_name)}\b", source, re.MULTILINE)
    if match is None:
        raise RewriteError(f"class {class_name} not found in rendered source")

    decorators = ["@dataclass(frozen=True)"]
    imports = ["from dataclasses import dataclass"]
    if add_builder:
        decorators.insert(0, "@record_builder")
        imports.extend(["", "from recordgen.directives import record_builder"])
    source = source[: match.start()] + "\n".join(decorators) + "\n" + source[match.start() :]

    import_block = "\n".join(imports) + "\n"
    index = source.find(_FUTURE_IMPORT)
    if index == -1:
        return import_block + "\n" + source
    insert_at = index + len(_FUTURE_IMPORT)
    return source[:insert_at] + "\n" + import_block + source[insert_at:]


__all__ = ["RewriteError", "rewrite_as_value_type"]
