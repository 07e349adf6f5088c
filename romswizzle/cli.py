"""Command line entry-point for romswizzle.

Usage::

    romswizzle [options] in_path out_path

Example, reverse the bit order of every byte::

    romswizzle -d0,1,2,3,4,5,6,7 in.bin out.bin
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn, Sequence

from romswizzle import __version__, log
from romswizzle.config import build_config, load_config_file
from romswizzle.image import swizzle_file
from romswizzle.permutation import parse_int
from romswizzle.types import MAX_BYTES_PER_WORD, MIN_BYTES_PER_WORD, SwizzleError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_FATAL = 1
EXIT_BAD_WORD = 255

USAGE = """\
usage: romswizzle [options] in_path out_path

supported options:
  -h / --help             show this information and exit
  -a / --addr <bits>      specify address bit order (optional)
  -d / --data <bits>      specify data bit order (optional)
  -w / --word <num>       specify number of bytes per word (default 1, max 4)
  -b / --big              use big-endian byte ordering
  -c / --config <path>    read options from a YAML file (optional)
  -v / --verbose          print progress and debug information

<bits> is a comma-separated list of 0-based bit indexes
  (comma separated, most significant first).

Example: to reverse the order of bits in each byte:
  romswizzle -d0,1,2,3,4,5,6,7 in.bin out.bin
"""


class _Parser(argparse.ArgumentParser):
    """Argument parser that reports every usage problem with exit status 1."""

    def print_usage(self, file=None) -> None:
        (file or sys.stderr).write(USAGE)

    def error(self, message: str) -> NoReturn:
        sys.stderr.write(f"{self.prog}: {message}\n")
        self.print_usage()
        self.exit(EXIT_USAGE)


# options that always consume the next argument, even one starting with "-"
_VALUE_OPTIONS = frozenset({"-a", "--addr", "-d", "--data", "-w", "--word", "-c", "--config"})


def _attach_option_values(argv: Sequence[str]) -> list[str]:
    """Bind ``-a -1,0`` style values to their option the way getopt does."""
    out: list[str] = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--":
            out.extend(argv[i:])
            break
        if arg in _VALUE_OPTIONS and i + 1 < len(argv):
            out.append(f"{arg}={argv[i + 1]}")
            i += 2
        else:
            out.append(arg)
            i += 1
    return out


def _build_parser() -> argparse.ArgumentParser:
    parser = _Parser(prog="romswizzle", add_help=False)
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("-a", "--addr", default=None)
    parser.add_argument("-d", "--data", default=None)
    parser.add_argument("-w", "--word", default=None)
    parser.add_argument("-b", "--big", action="store_true", default=None)
    parser.add_argument("-c", "--config", default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("in_path", nargs="?")
    parser.add_argument("out_path", nargs="?")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry-point."""
    print(f"romswizzle v{__version__}")

    parser = _build_parser()
    if argv is None:
        argv = sys.argv[1:]
    args = parser.parse_args(_attach_option_values(argv))

    word = None
    if args.word is not None:
        word = parse_int(args.word)
        if not MIN_BYTES_PER_WORD <= word <= MAX_BYTES_PER_WORD:
            print(
                f"bytes per word must be between {MIN_BYTES_PER_WORD}-{MAX_BYTES_PER_WORD}",
                file=sys.stderr,
            )
            return EXIT_BAD_WORD

    if args.help or args.out_path is None:
        parser.print_usage()
        return EXIT_USAGE

    log.setup(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        file_values = load_config_file(args.config) if args.config else None
        config = build_config(
            file_values, addr=args.addr, data=args.data, word=word, big=args.big
        )
        swizzle_file(args.in_path, args.out_path, config)
    except SwizzleError as exc:
        logger.error("%s", exc)
        return EXIT_FATAL

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
