"""
Error types for the smasm front end.

Two kinds of failure exist and they never mix:

  Lexical errors   — bad user input. The tokenizer reports these as Error
                     tokens and keeps going; nothing is raised. Callers that
                     want exceptions opt in through raise_on_error().
  Internal errors  — the scanner broke its own contract (e.g. asked for the
                     value of a digit it never validated). These go through
                     invariant_violation() and are not meant to be caught.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, NoReturn

if TYPE_CHECKING:
    from .tokens import Token

__all__ = ['LexerError', 'VocabularyError', 'InternalError',
           'invariant_violation', 'raise_on_error']

log = logging.getLogger(__name__)


class LexerError(Exception):
    """Raised in strict mode for the first Error token seen."""
    def __init__(self, token: "Token"):
        self.token = token
        self.pos = token.pos
        super().__init__(f"Lexer error at {token.pos}: {token.payload}")


class VocabularyError(Exception):
    """Raised when an instruction-set description cannot be loaded."""
    def __init__(self, message: str, source: str = "", line_num: int = 0):
        self.message = message
        self.source = source
        self.line_num = line_num
        where = source or "<vocabulary>"
        if line_num:
            where = f"{where}:{line_num}"
        super().__init__(f"{where}: {message}")


class InternalError(Exception):
    """Scanner invariant broken. Indicates a bug in smasm, not in the input."""


def invariant_violation(message: str) -> NoReturn:
    log.critical("smasm assertion failed: %s", message)
    raise InternalError(message)


def raise_on_error(token: "Token") -> "Token":
    """Return *token* unchanged unless it is an Error token."""
    from .tokens import TokenType
    if token.type is TokenType.Error:
        raise LexerError(token)
    return token
