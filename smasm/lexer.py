"""
Tokenizer for smasm assembly source.

Pulls characters from a CharSource one at a time and hands out one Token
per next_token() call. The only state carried between calls (besides the
source cursor) is whether a newline seen now would end a statement.

Lexical errors never raise: they come back as Error tokens positioned at
the start of the offending text, and the cursor is already past that text
so the caller may keep asking for tokens.

Surface syntax:
    ; comment                  to end of line
    .name / @name              directive (prefix depends on dialect)
    .. / @@                    token concatenation (doubled prefix)
    "text\\n"                  string with C escapes
    `text`                     raw string, no escapes
    'c'                        character literal -> NumericLit (one byte)
    42  0b101  0o17  0xFF      numerals (prefix letter in either case)
    cmp/eq  cmpi/lt            compare mnemonics with condition suffix
"""

from __future__ import annotations
import logging
import string
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import invariant_violation
from .position import UNKNOWN_FILE
from .source import CharSource, StringSource
from .tokens import NEWLINE_SIGNIFICANT, S64_MAX, Token, TokenType
from .vocabulary import EMPTY_VOCABULARY, Vocabulary

__all__ = ['Tokenizer', 'tokenize', 'DIALECTS', 'digit_value']

log = logging.getLogger(__name__)


# ──────────────────────────────────────────────
# Character classes
# ──────────────────────────────────────────────

LETTERS = string.ascii_letters
DEC_DIGITS = "0123456789"
OCT_DIGITS = "01234567"
BIN_DIGITS = "01"
HEX_DIGITS = "0123456789abcdefABCDEF"
IDENT_CHARS = LETTERS + DEC_DIGITS + "._"
WHITESPACE = " \t\r"


def _is(ch: Optional[str], charset: str) -> bool:
    return ch is not None and ch in charset


def digit_value(ch: str) -> int:
    """Value of a binary/octal/decimal/hex digit. Callers must validate first."""
    if "0" <= ch <= "9":
        return ord(ch) - ord("0")
    if "a" <= ch <= "f":
        return ord(ch) - ord("a") + 10
    if "A" <= ch <= "F":
        return ord(ch) - ord("A") + 10
    invariant_violation(f"digit_value called on non-digit {ch!r}")


# ──────────────────────────────────────────────
# Operator tables
# ──────────────────────────────────────────────

SINGLE_CHAR_TOKENS: Dict[str, TokenType] = {
    ",": TokenType.Comma,
    "(": TokenType.LParen,
    ")": TokenType.RParen,
    "+": TokenType.Plus,
    "-": TokenType.Minus,
    "*": TokenType.Mul,
    "/": TokenType.Div,
    "%": TokenType.Mod,
    "^": TokenType.Xor,
    "~": TokenType.BitNot,
}

# first char -> (second char or None, type), tried in order; longest match first
MULTI_CHAR_TOKENS: Dict[str, Tuple[Tuple[Optional[str], TokenType], ...]] = {
    "<": (("<", TokenType.ShLeft), ("=", TokenType.LessEqual), (None, TokenType.Less)),
    ">": ((">", TokenType.ShRight), ("=", TokenType.GreaterEqual), (None, TokenType.Greater)),
    "=": (("=", TokenType.Equal),),
    "!": (("=", TokenType.NotEqual), (None, TokenType.LogicNot)),
    "&": (("&", TokenType.LogicAnd), (None, TokenType.BitAnd)),
    "|": (("|", TokenType.LogicOr), (None, TokenType.BitOr)),
}

ESCAPES: Dict[str, str] = {
    "a": "\x07",
    "b": "\x08",
    "f": "\x0c",
    "n": "\x0a",
    "r": "\x0d",
    "t": "\x09",
    "v": "\x0b",
    "\\": "\\",
    "'": "'",
    '"': '"',
}

RADIX_PREFIXES: Dict[str, Tuple[int, str]] = {
    "b": (2, BIN_DIGITS),
    "B": (2, BIN_DIGITS),
    "o": (8, OCT_DIGITS),
    "O": (8, OCT_DIGITS),
    "x": (16, HEX_DIGITS),
    "X": (16, HEX_DIGITS),
}

# mnemonics that take a /COND suffix instead of being listed in the vocabulary
COMPARE_MNEMONICS = ("CMP", "CMPI")

# Characters that already mean something and cannot introduce a directive.
_RESERVED_CHARS = (LETTERS + DEC_DIGITS + "_" + WHITESPACE + "\n;\"'`"
                   + "".join(SINGLE_CHAR_TOKENS) + "".join(MULTI_CHAR_TOKENS))


# ──────────────────────────────────────────────
# Dialects
# ──────────────────────────────────────────────

DIALECTS: Dict[str, Dict[str, str]] = {
    "classic": {
        "directive_prefix": ".",
        "description": "Dot directives (.def, .org); '..' concatenates tokens",
    },
    "stamina": {
        "directive_prefix": "@",
        "description": "At-sign directives (@def, @org); '@@' concatenates tokens",
    },
}


class _Reject(Exception):
    """Internal: abandon the current token and report it as an Error token."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# ──────────────────────────────────────────────
# Tokenizer
# ──────────────────────────────────────────────

class Tokenizer:
    """Turns a CharSource into Tokens, one per next_token() call."""

    def __init__(self, source: CharSource, vocabulary: Vocabulary = EMPTY_VOCABULARY,
                 *, directive_prefix: str = "."):
        if len(directive_prefix) != 1 or directive_prefix in _RESERVED_CHARS:
            raise ValueError(f"invalid directive prefix: {directive_prefix!r}")
        self.source = source
        self.vocabulary = vocabulary
        self.directive_prefix = directive_prefix
        self._ident_start = "".join(c for c in IDENT_CHARS
                                    if c not in DEC_DIGITS and c != directive_prefix)
        self._can_newline = True
        self._pos = source.position
        self._text: List[str] = []

    @classmethod
    def for_dialect(cls, source: CharSource, vocabulary: Vocabulary = EMPTY_VOCABULARY,
                    dialect: str = "classic") -> Tokenizer:
        try:
            settings = DIALECTS[dialect]
        except KeyError:
            raise ValueError(f"unknown dialect: {dialect!r}") from None
        return cls(source, vocabulary, directive_prefix=settings["directive_prefix"])

    # ── Cursor helpers ──

    def _peek(self) -> Optional[str]:
        return self.source.peek()

    def _next_ch(self):
        """Consume the lookahead, recording it as part of the current token."""
        ch = self.source.peek()
        if ch is not None:
            self._text.append(ch)
        self.source.advance()

    def _maybe_ch(self, expected: str) -> bool:
        if self._peek() == expected:
            self._next_ch()
            return True
        return False

    def _take_while(self, charset: str) -> str:
        chars = []
        while _is(self._peek(), charset):
            chars.append(self._peek())
            self._next_ch()
        return "".join(chars)

    def _make_token(self, ttype: TokenType, payload=None) -> Token:
        token = Token(self._pos, ttype, payload, "".join(self._text))
        self._can_newline = NEWLINE_SIGNIFICANT[ttype]
        log.debug("token %r", token)
        return token

    # ── Entry points ──

    def next_token(self) -> Token:
        while True:
            while _is(self._peek(), WHITESPACE):
                self.source.advance()

            if self._peek() == ";":
                while self._peek() is not None and self._peek() != "\n":
                    self.source.advance()

            self._pos = self.source.position
            self._text = []
            ch = self._peek()

            if ch == "\n":
                self._next_ch()
                if self._can_newline:
                    return self._make_token(TokenType.NewLine)
                continue

            if ch is None:
                if self._can_newline:
                    return self._make_token(TokenType.NewLine)
                return self._make_token(TokenType.EndOfFile)

            break

        self._next_ch()
        try:
            return self._dispatch(ch)
        except _Reject as e:
            return self._make_token(TokenType.Error, e.message)

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the first EndOfFile."""
        while True:
            token = self.next_token()
            yield token
            if token.type is TokenType.EndOfFile:
                return

    def tokenize(self) -> List[Token]:
        return list(self)

    # ── Dispatch on the first character ──

    def _dispatch(self, ch: str) -> Token:
        if ch == '"':
            return self._lex_translated_string()
        if ch == "'":
            return self._lex_char()
        if ch == "`":
            return self._lex_raw_string()
        if ch == self.directive_prefix:
            if self._maybe_ch(self.directive_prefix):
                return self._make_token(TokenType.TokCat)
            return self._lex_directive()

        if ch in SINGLE_CHAR_TOKENS:
            return self._make_token(SINGLE_CHAR_TOKENS[ch])

        if ch in MULTI_CHAR_TOKENS:
            for follow, ttype in MULTI_CHAR_TOKENS[ch]:
                if follow is None or self._maybe_ch(follow):
                    return self._make_token(ttype)
            if ch == "=":
                raise _Reject("single equals sign is not a valid token")

        if ch in DEC_DIGITS:
            return self._lex_numeral(ch)
        if ch in self._ident_start:
            return self._lex_identifier(ch)

        raise _Reject(f"unknown character {ch!r}")

    # ── Literals ──

    def _lex_single_translated_char(self, what: str, *, multiline: bool = True) -> str:
        """Decode one possibly-escaped character of a string or char literal.

        With multiline=False a line break ends the literal and is left unread.
        """
        ch = self._peek()
        if ch is None or (ch == "\n" and not multiline):
            raise _Reject(f"unterminated {what}")
        self._next_ch()
        if ch != "\\":
            return ch

        esc = self._peek()
        if esc is None or (esc == "\n" and not multiline):
            raise _Reject(f"unterminated {what}")
        self._next_ch()

        if esc in OCT_DIGITS:
            value = digit_value(esc)
            ndigits = 1
            while ndigits < 3 and _is(self._peek(), OCT_DIGITS):
                value = value * 8 + digit_value(self._peek())
                self._next_ch()
                ndigits += 1
            if value >= 256:
                raise _Reject(f"octal escape \\{value:o} is out of range")
            return chr(value)

        if esc in ESCAPES:
            return ESCAPES[esc]
        raise _Reject(f"invalid escape sequence \\{esc}")

    def _lex_translated_string(self) -> Token:
        chars = []
        error = None
        while True:
            ch = self._peek()
            if ch is None:
                raise _Reject(error or "unterminated string literal")
            if ch == '"':
                break
            try:
                chars.append(self._lex_single_translated_char("string literal"))
            except _Reject as e:
                # keep going to the closing quote so the whole literal is skipped
                if error is None:
                    error = e.message
        self._next_ch()
        if error is not None:
            raise _Reject(error)
        return self._make_token(TokenType.StringLit, "".join(chars))

    def _lex_char(self) -> Token:
        if self._maybe_ch("'"):
            raise _Reject("empty character literal")
        try:
            ch = self._lex_single_translated_char("character literal", multiline=False)
        except _Reject:
            self._skip_char_literal()
            raise
        if not self._maybe_ch("'"):
            if not self._skip_char_literal():
                raise _Reject("unterminated character literal")
            raise _Reject("character literal can only contain a single character")
        if ord(ch) > 0xFF:
            raise _Reject(f"character literal {ch!r} is not a single byte")
        return self._make_token(TokenType.NumericLit, ord(ch))

    def _skip_char_literal(self) -> bool:
        """Skip to the closing quote on this line. False if there is none."""
        while self._peek() not in (None, "\n", "'"):
            self._next_ch()
        return self._maybe_ch("'")

    def _lex_raw_string(self) -> Token:
        chars = []
        while not self._maybe_ch("`"):
            ch = self._peek()
            if ch is None:
                raise _Reject("unterminated raw string literal")
            chars.append(ch)
            self._next_ch()
        return self._make_token(TokenType.StringLit, "".join(chars))

    # ── Words ──

    def _lex_directive(self) -> Token:
        name = self._take_while(IDENT_CHARS)
        if not name:
            raise _Reject(f"directive name expected after {self.directive_prefix!r}")
        return self._make_token(TokenType.Directive, name)

    def _lex_identifier(self, first: str) -> Token:
        ident = first + self._take_while(IDENT_CHARS)
        upper_ident = ident.upper()

        if self.vocabulary.is_mnemonic(upper_ident):
            return self._make_token(TokenType.Mnemonic, upper_ident)

        if upper_ident in COMPARE_MNEMONICS:
            if not self._maybe_ch("/"):
                raise _Reject(f"{ident} must be followed by /")
            cond = self._take_while(LETTERS)
            if not self.vocabulary.is_condition(cond):
                raise _Reject(f"{ident} must be followed by a valid condition, "
                              f"{cond!r} is not a valid condition")
            return self._make_token(TokenType.Mnemonic, f"{upper_ident}/{cond.upper()}")

        return self._make_token(TokenType.Identifier, ident)

    def _lex_numeral(self, first: str) -> Token:
        radix, digits, value = 10, DEC_DIGITS, digit_value(first)

        if first == "0" and _is(self._peek(), "".join(RADIX_PREFIXES)):
            prefix = self._peek()
            self._next_ch()
            (radix, digits), value = RADIX_PREFIXES[prefix], 0
            if not _is(self._peek(), digits):
                raise _Reject(f"missing digits after radix prefix 0{prefix}")

        while _is(self._peek(), digits):
            value = value * radix + digit_value(self._peek())
            self._next_ch()
            if value > S64_MAX:
                self._take_while(digits)
                raise _Reject("number literal overflow")

        return self._make_token(TokenType.NumericLit, value)


def tokenize(text: str, vocabulary: Vocabulary = EMPTY_VOCABULARY,
             filename: str = UNKNOWN_FILE, *, directive_prefix: str = ".") -> List[Token]:
    """Tokenize a whole string. The list ends with the EndOfFile token."""
    source = StringSource(text, filename)
    return Tokenizer(source, vocabulary, directive_prefix=directive_prefix).tokenize()
