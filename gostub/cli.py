from __future__ import annotations
import argparse, sys
from pathlib import Path

from gostub.config import ConfigError, StubConfig, load_config
from gostub.internals.version import print_version
from gostub.quickfix import NamingPolicy, StubError, StubGenerator
from gostub.semantics.ast_printer import dump_ast


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _append(source: str, stub: str) -> str:
    if source and not source.endswith("\n"):
        source += "\n"
    return f"{source}\n{stub}\n"


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="gostub",
        description="Generate a Go function stub for a call to an undeclared name",
    )
    ap.add_argument("name", nargs="?", help="Undeclared function name")
    ap.add_argument("source", nargs="?", default="-", help="Go source file, or - for stdin (default)")
    ap.add_argument(
        "--naming",
        choices=[p.value for p in NamingPolicy],
        default=None,
        help="When to reuse an argument's spelling as the parameter name (default: identifier)",
    )
    ap.add_argument("--append", action="store_true",
                    help="Print the source followed by the stub")
    ap.add_argument("--diagnostics", action="store_true",
                    help="Print type-checker diagnostics to stderr")
    ap.add_argument("--dump-ast", action="store_true", help="Print AST to stderr")
    ap.add_argument("--no-color", action="store_true", help="Disable colored diagnostics")
    ap.add_argument("--version", action="store_true", help="Print version information and exit")
    return ap


def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if args.version:
        print_version()
        return 0

    if not args.name:
        print("error: function name required", file=sys.stderr)
        return 2

    try:
        config = load_config()
    except ConfigError as e:
        print(f"{e.code}: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"error: cannot read configuration: {e}", file=sys.stderr)
        return 2

    policy = NamingPolicy(args.naming) if args.naming else config.naming_policy
    use_color = False if args.no_color else config.use_color

    try:
        src = _read_source(args.source)
    except (OSError, UnicodeDecodeError) as e:
        print(f"error: cannot read {args.source}: {e}", file=sys.stderr)
        return 2

    filename = "<stdin>" if args.source == "-" else args.source
    generator = StubGenerator(policy)
    try:
        if args.dump_ast:
            print(dump_ast(generator.parse(src)), file=sys.stderr)
        stub = generator.generate(args.name, src, filename)
    except StubError as e:
        _print_diagnostics(generator, args, use_color)
        where = f"{filename}:{e.span}: " if e.span is not None else ""
        print(f"{e.code}: {where}{e}", file=sys.stderr)
        return 2

    _print_diagnostics(generator, args, use_color)
    print(_append(src, stub) if args.append else stub, end="" if args.append else "\n")
    return 0


def _print_diagnostics(generator: StubGenerator, args, use_color) -> None:
    if args.diagnostics and generator.reporter is not None:
        generator.reporter.print(sys.stderr, use_color=use_color)


if __name__ == "__main__":
    raise SystemExit(main())
