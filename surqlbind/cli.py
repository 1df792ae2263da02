"""CLI entrypoints for surqlbind commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Tuple

from .config import DEFAULT_OUTPUT, GenerationConfig, anchor_path, load_config
from .errors import SurqlBindError
from .logging import configure_logging
from .models import GenerationResult
from .pipeline import generate_from_config
from .render import BindingRenderer


def _add_logging_options(
    parser: argparse.ArgumentParser, *, subcommand: bool = False
) -> None:
    # Subcommands must not overwrite flags already given before the command name.
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if subcommand else False,
        help="Log each parsed function and collected file.",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        default=argparse.SUPPRESS if subcommand else None,
        help="Also write debug logs to PATH.",
    )


def _add_source_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "paths",
        nargs="*",
        help="SurrealQL files or directories to include ($VAR references are expanded).",
    )
    parser.add_argument(
        "--driver",
        metavar="SCHEME",
        help="Generate async driver wrappers named by SCHEME: 'is', 'prefix_$' or '$_suffix'.",
    )
    parser.add_argument(
        "--datastore",
        metavar="SCHEME",
        help="Generate datastore wrappers named by SCHEME: 'is', 'prefix_$' or '$_suffix'.",
    )
    parser.add_argument(
        "--config",
        help="Path to a .surqlbind.yml file or the directory holding it.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="surqlbind",
        description="Generate typed Python wrappers for SurrealQL stored functions.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Parse and validate sources, then list the bindings that would be generated.",
    )
    _add_logging_options(check_parser, subcommand=True)
    _add_source_options(check_parser)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Write a Python package of wrappers for the included functions.",
    )
    _add_logging_options(generate_parser, subcommand=True)
    _add_source_options(generate_parser)
    generate_parser.add_argument(
        "-o",
        "--output",
        help=f"Directory of the generated package (defaults to ./{DEFAULT_OUTPUT}).",
    )
    generate_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the root module instead of writing the package.",
    )
    generate_parser.add_argument(
        "--templates-dir",
        help="Directory with template overrides for module.py.j2.",
    )

    return parser


def _resolve_config(args: argparse.Namespace) -> GenerationConfig:
    cwd = Path.cwd()
    config = load_config(Path(args.config) if args.config else cwd)
    output = getattr(args, "output", None)
    return config.merged(
        driver=args.driver,
        datastore=args.datastore,
        paths=[anchor_path(cwd, raw) for raw in args.paths],
        output=Path(anchor_path(cwd, output)) if output else None,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for surqlbind commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    try:
        config = _resolve_config(args)
        if config.verbose and not args.verbose:
            configure_logging(verbose=True, log_file=log_file)
        result = generate_from_config(config)
    except SurqlBindError as exc:
        parser.exit(1, f"surqlbind {args.command} failed: {exc}\n")

    if args.command == "check":
        for line in _summarize(result):
            print(line)
    elif args.command == "generate":
        templates_dir = Path(args.templates_dir) if args.templates_dir else None
        renderer = BindingRenderer(templates_dir=templates_dir)
        if args.stdout:
            print(renderer.render_root(result), end="")
            return
        output = config.output or Path.cwd() / DEFAULT_OUTPUT
        written = renderer.write(result, output)
        print(f"Wrote {len(written)} module(s) to {_relativize(output)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _summarize(result: GenerationResult) -> List[str]:
    symbols: Dict[str, List[Tuple[str, str]]] = {}
    for descriptor in result.descriptors:
        name = descriptor.signature.qualified_name
        symbols.setdefault(name, []).append((descriptor.target.value, descriptor.symbol))

    lines: List[str] = []
    for signature in result.tree.walk():
        params = ", ".join(f"{param.name}: {param.kind}" for param in signature.params)
        bound = ", ".join(
            f"{target} {symbol}" for target, symbol in symbols.get(signature.qualified_name, [])
        )
        lines.append(f"{signature.qualified_name}({params}) -> {bound}  [{signature.origin}]")
    lines.append(
        f"{len(result.bootstrap.entries)} function(s), {len(result.descriptors)} binding(s)"
    )
    return lines


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
