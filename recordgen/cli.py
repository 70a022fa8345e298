"""CLI entrypoints for recordgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from .diagnostics import describe_element
from .host import Compilation
from .logging import configure_logging
from .models import Diagnostic


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recordgen",
        description="Generate builders and value types from directive-marked Python classes.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Process every directive in a source tree and write the generated modules.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the source root (defaults to current directory).",
    )
    generate_parser.add_argument(
        "--out",
        default=None,
        help="Directory receiving generated modules (defaults to the source root).",
    )
    generate_parser.add_argument(
        "--config",
        default=None,
        help="Path to a .recordgen.yml file (defaults to the one in the source root).",
    )
    generate_parser.add_argument(
        "--log-file",
        default=None,
        help="Also write debug logs to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for recordgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if getattr(args, "log_file", None) else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    if args.command == "generate":
        compilation = Compilation(
            Path(args.path),
            output_root=Path(args.out) if args.out else None,
            config_path=Path(args.config) if args.config else None,
        )
        try:
            result = compilation.run()
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        for diagnostic in result.diagnostics:
            print(format_diagnostic(diagnostic), file=sys.stderr)
        for path in result.generated:
            print(f"Generated {_relativize(path)}")
        if not result.ok:
            parser.exit(1, f"recordgen: {len(result.errors)} error(s)\n")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def format_diagnostic(diagnostic: Diagnostic) -> str:
    """Render a diagnostic as ``location: severity: message``."""
    element = diagnostic.element
    path: Optional[Path] = getattr(element, "path", None)
    line: Optional[int] = getattr(element, "line", None)
    if path is not None:
        location = _relativize(path)
        if line is not None:
            location = f"{location}:{line}"
    else:
        location = describe_element(element)
    return f"{location}: {diagnostic.severity.value}: {diagnostic.message}"


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
