"""
ffigen: Deno FFI bindings from c2ffi declaration dumps

Usage:
    c2ffi header.h | python ffigen_cli.py -l libfoo.so > bindings.ts

Options:
  -l, --lib PATH     library identifier passed to Deno.dlopen (required)
  -i, --input FILE   read the declaration array from FILE instead of stdin
  -o, --output FILE  write the module to FILE instead of stdout
  -v, --verbose      debug logging on stderr

Skip events and the run summary go to stderr; the generated module is the
only thing written to stdout.
"""

import argparse
import logging
import sys
from typing import List, Optional

from ffigen.codegen import format_summary, render_module
from ffigen.declarations import DeclarationDecoder, Definition
from ffigen.errors import ConfigurationError, FfigenError
from ffigen.pipeline import BindingPipeline

logger = logging.getLogger("ffigen.cli")


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ffigen",
        description="Generate Deno FFI bindings from a c2ffi JSON declaration dump.",
    )
    parser.add_argument("-l", "--lib", help="Library path or soname to dlopen")
    parser.add_argument("-i", "--input", help="Declaration JSON file (default: stdin)")
    parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _read_definitions(path: Optional[str], stdin) -> List[Definition]:
    decoder = DeclarationDecoder()
    if path is None:
        definitions = decoder.read(stdin)
    else:
        try:
            with open(path, "r", encoding="utf-8") as f:
                definitions = decoder.read(f)
        except OSError as e:
            raise ConfigurationError(f"cannot read {path}: {e}") from e
    logger.debug("Input records by tag: %s", decoder.get_summary())
    return definitions


def _attach_diagnostics(stream, verbose: bool) -> logging.Handler:
    """Route the ffigen loggers to ``stream`` with bare ``%(message)s`` lines."""
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger = logging.getLogger("ffigen")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False
    return handler


def main(argv: Optional[List[str]] = None, stdin=None, stdout=None, stderr=None) -> int:
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr

    args = _build_arg_parser().parse_args(argv)

    package_logger = logging.getLogger("ffigen")
    saved_level, saved_propagate = package_logger.level, package_logger.propagate
    handler = _attach_diagnostics(stderr, args.verbose)
    try:
        return _run(args, stdin, stdout, stderr)
    finally:
        package_logger.removeHandler(handler)
        package_logger.setLevel(saved_level)
        package_logger.propagate = saved_propagate


def _run(args, stdin, stdout, stderr) -> int:
    try:
        if not args.lib:
            raise ConfigurationError("missing -l argument")
        definitions = _read_definitions(args.input, stdin)
        context = BindingPipeline(definitions).run()
    except FfigenError as e:
        logger.error("%s", e)
        return 1

    for line in format_summary(context.stats):
        print(line, file=stderr)

    source = render_module(context.symbols, args.lib)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(source)
        logger.info("Wrote %d symbols to %s", len(context.symbols), args.output)
    else:
        stdout.write(source)
    return 0


if __name__ == "__main__":
    sys.exit(main())
