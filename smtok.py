#!/usr/bin/env python3
"""
smtok — smasm token dump

Usage:
    python smtok.py <input.s|-> [--isa instructions.inc|vocab.json]
                                [--dialect classic|stamina] [--directive-prefix CHAR]
                                [--strict] [-v|-vv] [-q]

Prints one token per line as  file:line:col - Type - payload - `source`
up to (not including) EndOfFile.

Examples:
    python smtok.py boot.s --isa isa/instructions.inc
    python smtok.py boot.s --isa vocab.json --dialect stamina --strict
    cat boot.s | python smtok.py - -vv
"""

import argparse
import io
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from smasm import __version__
from smasm.errors import InternalError, LexerError, VocabularyError, raise_on_error
from smasm.lexer import DIALECTS, Tokenizer
from smasm.source import FileSource
from smasm.tokens import TokenType
from smasm.vocabulary import EMPTY_VOCABULARY, load_vocabulary

log = logging.getLogger("smtok")


def setup_logging(verbose: int = 0, quiet: bool = False):
    """Route log records to stderr through rich. WARNING by default."""
    if quiet:
        level = logging.ERROR
    elif verbose == 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:  # -vv or more
        level = logging.DEBUG

    handler = RichHandler(
        console=Console(stderr=True),
        level=level,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        handlers=[handler],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smtok",
        description="Dump the smasm token stream of an assembly source file",
        epilog="Dialects: " + ", ".join(
            f"{name} ({d['description']})" for name, d in DIALECTS.items()),
    )
    parser.add_argument("input", help="Input assembly file, or - for stdin")
    parser.add_argument("--isa", default=None,
                        help="Instruction-set listing (.inc) or JSON vocabulary")
    parser.add_argument("--dialect", default="classic", choices=list(DIALECTS.keys()),
                        help="Lexer dialect (default: classic)")
    parser.add_argument("--directive-prefix", default=None,
                        help="Override the dialect's directive prefix character")
    parser.add_argument("--strict", action="store_true",
                        help="Stop at the first lexical error (exit status 1)")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Increase log verbosity (-v, -vv)")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Only log errors")
    parser.add_argument("--version", action="version",
                        version=f"smtok {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    try:
        if args.isa:
            vocabulary = load_vocabulary(args.isa)
            log.info("Vocabulary: %d mnemonics, %d conditions (%s)",
                     len(vocabulary.mnemonics), len(vocabulary.conditions), args.isa)
        else:
            vocabulary = EMPTY_VOCABULARY
            log.warning("No --isa given; every mnemonic will lex as an identifier")

        prefix = args.directive_prefix or DIALECTS[args.dialect]["directive_prefix"]

        if args.input == "-":
            stdin = io.TextIOWrapper(sys.stdin.buffer, encoding="utf-8", newline="")
            source = FileSource(stdin, "<stdin>")
        else:
            source = FileSource.open(args.input)

        with source:
            tokenizer = Tokenizer(source, vocabulary, directive_prefix=prefix)
            errors = 0
            for token in tokenizer:
                if token.type is TokenType.EndOfFile:
                    break
                if args.strict:
                    raise_on_error(token)
                if token.is_error:
                    errors += 1
                print(token)
            if errors:
                log.warning("%d lexical error(s) in %s", errors, source.filename)

    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error reading {args.input}: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except VocabularyError as e:
        print(f"Vocabulary error: {e}", file=sys.stderr)
        return 1
    except LexerError as e:
        print(str(e), file=sys.stderr)
        return 1
    except InternalError as e:
        print(f"Internal error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
